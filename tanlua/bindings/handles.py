"""Uniform handle convention shared by every object exposed to Lua.

Each handle class lists the methods Lua may call in ``lua_methods``. The
runtime's attribute getter hands Lua the *unbound* class function, so the colon
call syntax (``builder:build()``) passes the handle itself as ``self``. Every
other attribute lookup fails, which keeps native objects and Python internals
out of reach of scripts.

The runtime is created without a string encoding, so Lua strings reach Python
as ``bytes`` and must be sent back as ``bytes``. :func:`lua_text` decodes names,
paths and text values; byte payloads pass through untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from lupa import lua_type

from tanlua.errors import InvalidArgumentError


class LuaHandle:
    """Base for opaque objects handed to Lua."""

    __slots__ = ()

    lua_methods: ClassVar[tuple[str, ...]] = ()


def lua_attribute_getter(obj: Any, name: Any) -> Callable[..., Any]:
    """Resolve ``obj.name`` for Lua against the handle's method table."""
    cls = type(obj)
    if isinstance(name, bytes):
        name = name.decode("utf-8", errors="replace")
    methods: tuple[str, ...] = getattr(cls, "lua_methods", ())
    if name not in methods:
        raise AttributeError(f"{cls.__name__} has no method '{name}'")
    return getattr(cls, name)


def lua_attribute_setter(obj: Any, name: Any, value: Any) -> None:
    raise AttributeError(f"{type(obj).__name__} handles are read-only (cannot set '{name}')")


LUA_ATTRIBUTE_HANDLERS = (lua_attribute_getter, lua_attribute_setter)


def lua_sequence(value: Any) -> list[Any]:
    """Normalize a Lua array table, Python sequence, or single value into a list."""
    if value is None:
        return []
    if lua_type(value) == "table":
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def lua_text(value: Any, what: str) -> str:
    """Decode a Lua string (``bytes`` on the Python side) as UTF-8 text.

    Raises:
        InvalidArgumentError: If ``value`` is not a string or is not valid UTF-8.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidArgumentError(f"{what} must be valid UTF-8 text: {exc}") from exc
    raise InvalidArgumentError(f"{what} must be a string, got {describe(value)}")


def lua_string(text: str) -> bytes:
    """Encode ``text`` for use as a Lua string key or value."""
    return text.encode("utf-8")


def lua_integer(value: Any, what: str) -> int:
    """Accept Lua integers (and integral floats) as Python ints."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{what} must be an integer, got boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidArgumentError(f"{what} must be an integer, got {describe(value)}")


def describe(value: Any) -> str:
    """Short type description used in error messages."""
    if value is None:
        return "nil"
    if isinstance(value, bytes):
        return "Lua string"
    kind = lua_type(value)
    if kind is not None:
        return f"Lua {kind}"
    return type(value).__name__
