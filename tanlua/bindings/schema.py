"""Schema construction: field handles, the single-use builder, and schemas."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

import tantivy

from tanlua.bindings.handles import LuaHandle, describe, lua_sequence, lua_text
from tanlua.bindings.options import IntOptions, OptionsT, TextOptions, merge
from tanlua.errors import ConsumedResourceError, FieldDeclarationError, InvalidArgumentError

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """Value type a field accepts."""

    TEXT = "text"
    U64 = "u64"
    I64 = "i64"
    FACET = "facet"
    BYTES = "bytes"


@dataclass(frozen=True, slots=True)
class FieldHandle(LuaHandle):
    """Opaque reference to a field of one schema.

    ``ordinal`` is the declaration position, which is also tantivy's field id.
    A handle is only meaningful for indexes built from the schema that produced
    it; passing it to an unrelated index is a caller error and is not checked.
    """

    ordinal: int
    name: str
    kind: FieldKind


class Schema(LuaHandle):
    """Immutable mapping of field names to handles, wrapping a ``tantivy.Schema``."""

    __slots__ = ("_native", "_fields")

    lua_methods = ("get_field",)

    def __init__(self, native: tantivy.Schema, fields: Mapping[str, FieldHandle]) -> None:
        self._native = native
        self._fields: Mapping[str, FieldHandle] = MappingProxyType(dict(fields))

    @property
    def native(self) -> tantivy.Schema:
        return self._native

    @property
    def fields(self) -> Mapping[str, FieldHandle]:
        return self._fields

    @property
    def field_names(self) -> list[str]:
        """Field names in declaration order."""
        return [handle.name for handle in sorted(self._fields.values(), key=lambda h: h.ordinal)]

    def get_field(self, name: Any) -> FieldHandle | None:
        """Return the handle declared under ``name``, or None (``nil``) if absent."""
        if isinstance(name, bytes):
            try:
                name = name.decode("utf-8")
            except UnicodeDecodeError:
                return None
        if not isinstance(name, str):
            return None
        return self._fields.get(name)

    def clone(self) -> Schema:
        """Return a schema sharing this one's native definition and field map."""
        twin = Schema.__new__(Schema)
        twin._native = self._native
        twin._fields = self._fields
        return twin

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldHandle]:
        return iter(sorted(self._fields.values(), key=lambda h: h.ordinal))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Schema(fields={self.field_names!r})"


class SchemaBuilder(LuaHandle):
    """Single-use accumulator of field declarations.

    The native builder is held until :meth:`build` takes it. From then on every
    operation raises :class:`ConsumedResourceError`.

    Example:
        >>> builder = SchemaBuilder()
        >>> title = builder.add_text_field("title", [TEXT, STORED])
        >>> schema = builder.build()
        >>> schema.get_field("title") == title
        True
    """

    __slots__ = ("_native", "_fields")

    lua_methods = (
        "add_u64_field",
        "add_i64_field",
        "add_text_field",
        "add_facet_field",
        "add_bytes_field",
        "build",
    )

    def __init__(self) -> None:
        self._native: tantivy.SchemaBuilder | None = tantivy.SchemaBuilder()
        self._fields: dict[str, FieldHandle] = {}

    @property
    def is_consumed(self) -> bool:
        return self._native is None

    def add_u64_field(self, name: Any, options: Any) -> FieldHandle:
        self._require_native()
        kwargs = _merge_options(options, IntOptions, "add_u64_field").to_native_kwargs()
        return self._declare(
            name, FieldKind.U64, lambda native, n: native.add_unsigned_field(n, **kwargs)
        )

    def add_i64_field(self, name: Any, options: Any) -> FieldHandle:
        self._require_native()
        kwargs = _merge_options(options, IntOptions, "add_i64_field").to_native_kwargs()
        return self._declare(
            name, FieldKind.I64, lambda native, n: native.add_integer_field(n, **kwargs)
        )

    def add_text_field(self, name: Any, options: Any) -> FieldHandle:
        self._require_native()
        kwargs = _merge_options(options, TextOptions, "add_text_field").to_native_kwargs()
        return self._declare(
            name, FieldKind.TEXT, lambda native, n: native.add_text_field(n, **kwargs)
        )

    def add_facet_field(self, name: Any) -> FieldHandle:
        return self._declare(name, FieldKind.FACET, lambda native, n: native.add_facet_field(n))

    def add_bytes_field(self, name: Any) -> FieldHandle:
        return self._declare(
            name,
            FieldKind.BYTES,
            lambda native, n: native.add_bytes_field(n, stored=True, indexed=False, fast=False),
        )

    def build(self) -> Schema:
        """Finalize the declarations into a :class:`Schema`, consuming the builder."""
        native = self._require_native()
        self._native = None
        schema = Schema(native.build(), self._fields)
        logger.debug("Built schema with fields %s", schema.field_names)
        return schema

    def _require_native(self) -> tantivy.SchemaBuilder:
        if self._native is None:
            raise ConsumedResourceError("SchemaBuilder")
        return self._native

    def _declare(
        self,
        name: Any,
        kind: FieldKind,
        register: Callable[[tantivy.SchemaBuilder, str], object],
    ) -> FieldHandle:
        native = self._require_native()
        name = _validate_field_name(name)
        if name in self._fields:
            raise FieldDeclarationError(f"Field '{name}' is already declared")

        try:
            register(native, name)
        except ValueError as exc:
            raise FieldDeclarationError(f"Cannot declare field '{name}': {exc}") from exc

        handle = FieldHandle(ordinal=len(self._fields), name=name, kind=kind)
        self._fields[name] = handle
        logger.debug("Declared %s field '%s' (ordinal %d)", kind.value, name, handle.ordinal)
        return handle

    def __repr__(self) -> str:
        state = "consumed" if self.is_consumed else f"fields={list(self._fields)!r}"
        return f"SchemaBuilder({state})"


def _validate_field_name(name: Any) -> str:
    name = lua_text(name, "Field name")
    if not name:
        raise FieldDeclarationError("Field name must not be empty")
    if name.startswith("-"):
        raise FieldDeclarationError(f"Field name '{name}' must not start with '-'")
    return name


def _merge_options(options: Any, family: type[OptionsT], operation: str) -> OptionsT:
    values = lua_sequence(options)
    if not values:
        raise FieldDeclarationError(f"{operation} requires at least one option")
    for value in values:
        if not isinstance(value, family):
            raise InvalidArgumentError(
                f"{operation} expects {family.__name__} values, got {describe(value)}"
            )
    return merge(values)
