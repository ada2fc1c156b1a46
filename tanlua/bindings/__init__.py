"""Opaque handle types exposed to Lua scripts."""

from tanlua.bindings.document import Document
from tanlua.bindings.index import Index, IndexWriter
from tanlua.bindings.options import (
    FAST,
    INT_INDEXED,
    INT_STORED,
    STORED,
    STRING,
    TEXT,
    IntOptions,
    TextOptions,
    merge,
)
from tanlua.bindings.schema import FieldHandle, FieldKind, Schema, SchemaBuilder

__all__ = [
    "Document",
    "FieldHandle",
    "FieldKind",
    "Index",
    "IndexWriter",
    "IntOptions",
    "Schema",
    "SchemaBuilder",
    "TextOptions",
    "merge",
    "TEXT",
    "STRING",
    "STORED",
    "INT_STORED",
    "INT_INDEXED",
    "FAST",
]
