"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from lupa import LuaRuntime

from tanlua.bindings import STORED, TEXT, Schema, SchemaBuilder
from tanlua.config import Settings
from tanlua.namespace import create_runtime


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Drop lingering writers so index lock files are released
        gc.collect()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Settings, None, None]:
    """Provide isolated tanlua settings scoped to tests."""

    import tanlua.config as config_module

    for name in (
        "TANLUA_NAMESPACE",
        "TANLUA_SANDBOX",
        "TANLUA_WRITER_HEAP_SIZE",
        "TANLUA_WRITER_NUM_THREADS",
        "TANLUA_CREATE_MISSING_DIRS",
        "TANLUA_REUSE_EXISTING_INDEX",
    ):
        monkeypatch.delenv(name, raising=False)

    original_settings = getattr(config_module, "_settings", None)
    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def lua(override_settings: Settings) -> LuaRuntime:
    """Sandboxed Lua runtime with the `tan` namespace installed."""
    return create_runtime(override_settings)


@pytest.fixture
def article_schema() -> Schema:
    """Schema with a stored full-text title and a full-text body."""
    builder = SchemaBuilder()
    builder.add_text_field("title", [TEXT, STORED])
    builder.add_text_field("body", [TEXT])
    return builder.build()
