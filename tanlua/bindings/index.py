"""Index handles and writer sessions backed by tantivy."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import tantivy

from tanlua.bindings.document import Document
from tanlua.bindings.handles import LuaHandle, describe, lua_integer, lua_text
from tanlua.bindings.schema import Schema
from tanlua.config import Settings, get_settings
from tanlua.errors import (
    DocumentRejectedError,
    IndexCommitError,
    InvalidArgumentError,
    StorageInitializationError,
    WriterAcquisitionError,
)

logger = logging.getLogger(__name__)

# tantivy writes this file when an index is created in a directory.
INDEX_META_FILE = "meta.json"


class Index(LuaHandle):
    """Storage root (in memory or on disk) and factory for writers.

    tantivy allows one live writer per index. The adapter adds no locking of its
    own: Lua execution is single-threaded, so hosts that share an index across
    threads must serialize :meth:`writer` and document submission themselves.
    """

    __slots__ = ("_native", "_schema", "_path", "_settings")

    lua_methods = ("writer", "num_docs")

    def __init__(
        self,
        native: tantivy.Index,
        schema: Schema,
        *,
        path: Path | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._native = native
        self._schema = schema
        self._path = path
        self._settings = settings or get_settings()

    @classmethod
    def in_memory(cls, schema: Any, settings: Settings | None = None) -> Index:
        """Create an ephemeral index held in RAM."""
        schema = _require_schema(schema)
        index = cls(tantivy.Index(schema.native), schema, settings=settings)
        logger.info("Created in-memory index with fields %s", schema.field_names)
        return index

    @classmethod
    def at_path(
        cls,
        path: Any,
        schema: Any,
        settings: Settings | None = None,
    ) -> Index:
        """Create (or, if configured, reopen) a durable index under ``path``.

        Raises:
            StorageInitializationError: If the directory cannot be prepared or
                tantivy refuses to initialize it (existing index, schema
                mismatch, permissions).
        """
        schema = _require_schema(schema)
        if isinstance(path, bytes):
            path = lua_text(path, "Index path")
        if not isinstance(path, (str, os.PathLike)) or not str(path):
            raise InvalidArgumentError(
                f"Index path must be a non-empty string, got {describe(path)}"
            )
        settings = settings or get_settings()
        target = Path(path).expanduser()

        if settings.create_missing_dirs:
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageInitializationError(str(path), str(exc)) from exc

        if not settings.reuse_existing_index and (target / INDEX_META_FILE).exists():
            raise StorageInitializationError(str(path), "an index already exists at this path")

        try:
            native = tantivy.Index(
                schema.native,
                path=str(target),
                reuse=settings.reuse_existing_index,
            )
        except (ValueError, OSError) as exc:
            raise StorageInitializationError(str(path), str(exc)) from exc

        logger.info("Opened index at %s with fields %s", target, schema.field_names)
        return cls(native, schema, path=target, settings=settings)

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def in_memory_only(self) -> bool:
        return self._path is None

    def writer(self, size: Any = None) -> IndexWriter:
        """Open a writer session with a memory budget of ``size`` bytes.

        Raises:
            WriterAcquisitionError: If tantivy cannot grant the session, e.g.
                another writer on this index is still alive or the budget does
                not fit the engine's size type.
        """
        heap_size = (
            self._settings.writer_heap_size if size is None else lua_integer(size, "Writer size")
        )
        if heap_size <= 0:
            raise InvalidArgumentError(f"Writer size must be positive, got {heap_size}")

        try:
            native = self._native.writer(
                heap_size=heap_size,
                num_threads=self._settings.writer_num_threads,
            )
        except (ValueError, OverflowError) as exc:
            raise WriterAcquisitionError(f"Cannot acquire index writer: {exc}") from exc

        logger.info("Acquired index writer (heap_size=%d bytes)", heap_size)
        return IndexWriter(native, self)

    def num_docs(self) -> int:
        """Number of committed documents visible to a freshly reloaded reader."""
        self._native.reload()
        return self._native.searcher().num_docs

    def __repr__(self) -> str:
        location = "memory" if self._path is None else str(self._path)
        return f"Index({location})"


class IndexWriter(LuaHandle):
    """Writer session bound to one :class:`Index`.

    Documents are buffered by tantivy and become durable and searchable only
    after :meth:`commit`.
    """

    __slots__ = ("_native", "_index", "_pending")

    lua_methods = ("add_document", "commit", "rollback")

    def __init__(self, native: tantivy.IndexWriter, index: Index) -> None:
        self._native = native
        self._index = index
        self._pending = 0

    @property
    def documents_added(self) -> int:
        """Documents accepted since the last commit or rollback."""
        return self._pending

    def add_document(self, document: Any) -> int:
        """Submit ``document`` and return its opstamp.

        Raises:
            DocumentRejectedError: If a value does not match the index schema.
        """
        if not isinstance(document, Document):
            raise InvalidArgumentError(f"add_document expects a document, got {describe(document)}")

        try:
            native_doc = document.to_native(self._index.schema)
            opstamp = self._native.add_document(native_doc)
        except DocumentRejectedError as exc:
            logger.warning("Rejected document: %s", exc)
            raise
        except ValueError as exc:
            logger.warning("Rejected document: %s", exc)
            raise DocumentRejectedError(f"Document rejected by index: {exc}") from exc

        self._pending += 1
        logger.debug("Added document with %d values (opstamp=%d)", len(document), opstamp)
        return opstamp

    def commit(self) -> int:
        """Persist buffered documents and return the commit opstamp."""
        try:
            opstamp = self._native.commit()
        except ValueError as exc:
            raise IndexCommitError(f"Commit failed: {exc}") from exc

        logger.info("Committed %d documents (opstamp=%d)", self._pending, opstamp)
        self._pending = 0
        return opstamp

    def rollback(self) -> int:
        """Discard documents added since the last commit."""
        try:
            opstamp = self._native.rollback()
        except ValueError as exc:
            raise IndexCommitError(f"Rollback failed: {exc}") from exc

        logger.info("Rolled back %d uncommitted documents", self._pending)
        self._pending = 0
        return opstamp

    def __repr__(self) -> str:
        return f"IndexWriter({self._index!r}, pending={self._pending})"


def _require_schema(schema: Any) -> Schema:
    if not isinstance(schema, Schema):
        raise InvalidArgumentError(f"Expected a schema, got {describe(schema)}")
    return schema
