"""Configuration management with Pydantic settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Smallest per-thread arena tantivy accepts for an index writer.
MIN_WRITER_HEAP_SIZE = 15_000_000

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    """tanlua configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TANLUA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Lua surface
    namespace: str = Field(
        default="tan",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Name of the global Lua table holding the bindings",
    )

    sandbox: bool = Field(
        default=True,
        description="Hide the `python` module from scripts in runtimes created by tanlua",
    )

    # Writer defaults
    writer_heap_size: int = Field(
        default=50_000_000,
        ge=MIN_WRITER_HEAP_SIZE,
        description="Writer memory budget in bytes when a script calls index:writer() without one",
    )

    writer_num_threads: int = Field(
        default=0,
        ge=0,
        description="Indexing threads per writer (0 lets tantivy decide)",
    )

    # Storage
    create_missing_dirs: bool = Field(
        default=True,
        description="Create missing parent directories for index_in_dir",
    )

    reuse_existing_index: bool = Field(
        default=False,
        description="Open an existing index at the target path instead of failing",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Log level applied by the tanlua CLI",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
