"""Installation of the ``tan`` namespace into a Lua runtime."""

from __future__ import annotations

import logging
from typing import Any

from lupa import LuaRuntime

from tanlua.bindings import options
from tanlua.bindings.document import Document
from tanlua.bindings.handles import LUA_ATTRIBUTE_HANDLERS, lua_string
from tanlua.bindings.index import Index
from tanlua.bindings.schema import SchemaBuilder
from tanlua.config import Settings, get_settings

logger = logging.getLogger(__name__)

# tantivy separates facet path segments with a NUL byte.
FACET_SEP_BYTE = 0

OPTION_CONSTANTS = {
    "TEXT": options.TEXT,
    "STRING": options.STRING,
    "STORED": options.STORED,
    "INT_STORED": options.INT_STORED,
    "INT_INDEXED": options.INT_INDEXED,
    "FAST": options.FAST,
}


def install(lua: LuaRuntime, settings: Settings | None = None) -> None:
    """Register the binding namespace as a global table of ``lua``.

    The runtime must have been created with
    ``attribute_handlers=LUA_ATTRIBUTE_HANDLERS`` for handle methods to be
    callable; :func:`create_runtime` does this. Call once per runtime.
    """
    settings = settings or get_settings()

    def new_schema_builder() -> SchemaBuilder:
        return SchemaBuilder()

    def new_document() -> Document:
        return Document()

    def index_in_ram(schema: Any) -> Index:
        return Index.in_memory(schema, settings=settings)

    def index_in_dir(path: Any, schema: Any) -> Index:
        return Index.at_path(path, schema, settings=settings)

    members: dict[str, Any] = {
        "new_schema_builder": new_schema_builder,
        "new_document": new_document,
        "index_in_ram": index_in_ram,
        "index_in_dir": index_in_dir,
        "FACET_SEP_BYTE": FACET_SEP_BYTE,
        **OPTION_CONSTANTS,
    }
    table = lua.table_from({lua_string(key): value for key, value in members.items()})
    lua.globals()[lua_string(settings.namespace)] = table
    logger.debug("Installed Lua namespace '%s'", settings.namespace)


def create_runtime(settings: Settings | None = None) -> LuaRuntime:
    """Create a Lua runtime wired for handle objects, with the namespace installed.

    In sandbox mode the ``python`` module is removed, so scripts only see the
    binding namespace and the Lua standard library.

    No string encoding is configured: Lua strings cross into Python as
    ``bytes``, which keeps binary payloads for ``add_bytes`` intact. Strings
    read back from the runtime (``lua.eval``, ``lua.execute``) are ``bytes`` too.
    """
    settings = settings or get_settings()
    lua = LuaRuntime(
        encoding=None,
        unpack_returned_tuples=True,
        register_eval=not settings.sandbox,
        register_builtins=not settings.sandbox,
        attribute_handlers=LUA_ATTRIBUTE_HANDLERS,
    )
    if settings.sandbox:
        lua.globals()[b"python"] = None
    install(lua, settings)
    return lua
