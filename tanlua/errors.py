"""Exception hierarchy for the tantivy Lua bindings.

Every recoverable failure derives from :class:`TanluaError`. When raised inside a
function called from Lua it becomes an ordinary Lua error (catchable with
``pcall``); when left uncaught, lupa re-raises it to the Python host.

:class:`EmptyMergeInput` is the exception: it signals a broken call site, not bad
script input, and therefore sits outside the hierarchy.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "TanluaError",
    "ConsumedResourceError",
    "StorageInitializationError",
    "WriterAcquisitionError",
    "DocumentRejectedError",
    "IndexCommitError",
    "FieldDeclarationError",
    "InvalidArgumentError",
    "EmptyMergeInput",
]


class TanluaError(Exception):
    """Base class for recoverable binding errors.

    Attributes:
        details: Structured context for logging (path, field name, ...).
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r})"


class ConsumedResourceError(TanluaError, RuntimeError):
    """Raised when a single-use resource (schema builder) is used after being consumed."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            f"{resource} already consumed: build() may only be called once",
            details={"resource": resource},
        )
        self.resource = resource


class StorageInitializationError(TanluaError):
    """Raised when an on-disk index cannot be created or opened."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Cannot initialize index storage at '{path}': {reason}",
            details={"path": path},
        )
        self.path = path


class WriterAcquisitionError(TanluaError):
    """Raised when the engine refuses to grant a writer session."""


class DocumentRejectedError(TanluaError):
    """Raised when a document does not fit the schema of the target index."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class IndexCommitError(TanluaError):
    """Raised when committing or rolling back a writer fails."""


class FieldDeclarationError(TanluaError, ValueError):
    """Raised for invalid field declarations (bad name, duplicate, no options)."""


class InvalidArgumentError(TanluaError, TypeError):
    """Raised when a script passes a value of the wrong type or family."""


class EmptyMergeInput(AssertionError):
    """Raised when option merge is called without operands."""
