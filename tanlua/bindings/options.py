"""Field option values and their merge semantics.

Two disjoint families exist: :class:`TextOptions` for text fields and
:class:`IntOptions` for signed/unsigned integer fields. Each wraps an
:class:`enum.Flag` set, so combining values is a plain flag union and therefore
associative and commutative. ``|`` between families returns ``NotImplemented``
and Python raises ``TypeError``.
"""

from __future__ import annotations

import functools
import operator
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Flag, auto
from typing import Any, TypeVar

from tanlua.bindings.handles import LuaHandle
from tanlua.errors import EmptyMergeInput


class TextFlag(Flag):
    TEXT = auto()
    STRING = auto()
    STORED = auto()


class NumericFlag(Flag):
    INDEXED = auto()
    STORED = auto()
    FAST = auto()


@dataclass(frozen=True, slots=True)
class TextOptions(LuaHandle):
    """Indexing and storage options of a text field."""

    flags: TextFlag

    def __or__(self, other: object) -> TextOptions:
        if not isinstance(other, TextOptions):
            return NotImplemented
        return TextOptions(self.flags | other.flags)

    def to_native_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``tantivy.SchemaBuilder.add_text_field``.

        TEXT wins over STRING when both are present. tantivy-py always indexes
        text fields, so a STORED-only value falls back to raw, basic indexing.
        """
        if TextFlag.TEXT in self.flags:
            tokenizer, index_option = "default", "position"
        else:
            tokenizer, index_option = "raw", "basic"
        return {
            "stored": TextFlag.STORED in self.flags,
            "tokenizer_name": tokenizer,
            "index_option": index_option,
        }


@dataclass(frozen=True, slots=True)
class IntOptions(LuaHandle):
    """Indexing, storage and fast-field options of an integer field."""

    flags: NumericFlag

    def __or__(self, other: object) -> IntOptions:
        if not isinstance(other, IntOptions):
            return NotImplemented
        return IntOptions(self.flags | other.flags)

    def to_native_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``add_unsigned_field`` / ``add_integer_field``."""
        return {
            "stored": NumericFlag.STORED in self.flags,
            "indexed": NumericFlag.INDEXED in self.flags,
            "fast": NumericFlag.FAST in self.flags,
        }


OptionsT = TypeVar("OptionsT", TextOptions, IntOptions)


def merge(options: Iterable[OptionsT]) -> OptionsT:
    """Union a non-empty sequence of option values of one family.

    Raises:
        EmptyMergeInput: If ``options`` is empty. Callers validate script input
            before merging, so this only fires on an internal bug.
    """
    values = list(options)
    if not values:
        raise EmptyMergeInput("merge() requires at least one option value")
    return functools.reduce(operator.or_, values)


# Named constants exposed to scripts
TEXT = TextOptions(TextFlag.TEXT)
STRING = TextOptions(TextFlag.STRING)
STORED = TextOptions(TextFlag.STORED)
INT_STORED = IntOptions(NumericFlag.STORED)
INT_INDEXED = IntOptions(NumericFlag.INDEXED)
FAST = IntOptions(NumericFlag.FAST)
