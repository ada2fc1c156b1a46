"""Documents assembled by scripts before submission to a writer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import tantivy

from tanlua.bindings.handles import LuaHandle, describe, lua_integer, lua_text
from tanlua.bindings.schema import FieldHandle, FieldKind, Schema
from tanlua.errors import DocumentRejectedError, InvalidArgumentError

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
I64_MIN, I64_MAX = -(2**63), 2**63 - 1

_NATIVE_ADDERS: dict[FieldKind, Callable[[tantivy.Document, str, Any], None]] = {
    FieldKind.TEXT: lambda doc, name, value: doc.add_text(name, value),
    FieldKind.U64: lambda doc, name, value: doc.add_unsigned(name, value),
    FieldKind.I64: lambda doc, name, value: doc.add_integer(name, value),
    FieldKind.FACET: lambda doc, name, value: doc.add_facet(name, tantivy.Facet.from_string(value)),
    FieldKind.BYTES: lambda doc, name, value: doc.add_bytes(name, value),
}


class Document(LuaHandle):
    """Mutable bag of ``(field, value)`` pairs.

    Fields may hold several values. A document is independent of any index
    until it is submitted; :meth:`to_native` copies the values, so mutating the
    document afterwards does not alter what was already submitted.
    """

    __slots__ = ("_values",)

    lua_methods = ("add_text", "add_u64", "add_i64", "add_facet", "add_bytes")

    def __init__(self) -> None:
        self._values: list[tuple[FieldHandle, FieldKind, Any]] = []

    @property
    def values(self) -> tuple[tuple[FieldHandle, Any], ...]:
        return tuple((handle, value) for handle, _, value in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def add_text(self, field: Any, text: Any) -> None:
        self._append(field, FieldKind.TEXT, lua_text(text, "add_text value"))

    def add_u64(self, field: Any, value: Any) -> None:
        number = lua_integer(value, "add_u64 value")
        if not 0 <= number <= U64_MAX:
            raise InvalidArgumentError(f"add_u64 value {number} is outside the u64 range")
        self._append(field, FieldKind.U64, number)

    def add_i64(self, field: Any, value: Any) -> None:
        number = lua_integer(value, "add_i64 value")
        if not I64_MIN <= number <= I64_MAX:
            raise InvalidArgumentError(f"add_i64 value {number} is outside the i64 range")
        self._append(field, FieldKind.I64, number)

    def add_facet(self, field: Any, path: Any) -> None:
        path = lua_text(path, "add_facet path")
        if not path.startswith("/"):
            raise InvalidArgumentError(
                f"add_facet expects a path string starting with '/', got {path!r}"
            )
        self._append(field, FieldKind.FACET, path)

    def add_bytes(self, field: Any, data: Any) -> None:
        # Lua strings arrive as raw bytes; Python callers may also pass text.
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data)
        elif isinstance(data, str):
            data = data.encode("utf-8")
        else:
            raise InvalidArgumentError(f"add_bytes expects a string value, got {describe(data)}")
        self._append(field, FieldKind.BYTES, data)

    def to_native(self, schema: Schema) -> tantivy.Document:
        """Build a ``tantivy.Document`` after checking value kinds against ``schema``.

        Raises:
            DocumentRejectedError: If a field is unknown to ``schema`` or was
                declared with a different value type.
        """
        native = tantivy.Document()
        for handle, kind, value in self._values:
            declared = schema.get_field(handle.name)
            if declared is None:
                raise DocumentRejectedError(
                    f"Field '{handle.name}' is not declared in the index schema",
                    field=handle.name,
                )
            if declared.kind is not kind:
                raise DocumentRejectedError(
                    f"Field '{handle.name}' is declared as {declared.kind.value} "
                    f"but received a {kind.value} value",
                    field=handle.name,
                )
            try:
                _NATIVE_ADDERS[kind](native, handle.name, value)
            except ValueError as exc:
                raise DocumentRejectedError(
                    f"Invalid value for field '{handle.name}': {exc}", field=handle.name
                ) from exc
        return native

    def _append(self, field: Any, kind: FieldKind, value: Any) -> None:
        if not isinstance(field, FieldHandle):
            raise InvalidArgumentError(f"Expected a field handle, got {describe(field)}")
        self._values.append((field, kind, value))

    def __repr__(self) -> str:
        return f"Document(values={len(self._values)})"
