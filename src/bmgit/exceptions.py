"""bmgit exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class BmgitError(Exception):
    """Base exception for bmgit errors."""


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(BmgitError):
    """Raised when the key-value persistence substrate rejects an operation.

    Attributes:
        operation: The storage operation that failed (get, set, remove).
        keys: The slot names involved in the failed operation.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        keys: Sequence[str] = (),
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and storage context.

        Args:
            message: Human-readable error message.
            operation: The storage operation that failed.
            keys: The slot names involved in the failed operation.
            cause: The underlying exception, if any.
        """
        super().__init__(message)
        self.operation: str = operation
        self.keys: tuple[str, ...] = tuple(keys)
        self.cause: Exception | None = cause


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(BmgitError):
    """Base exception for commit store errors."""


class RepositoryNotInitializedError(RepositoryError):
    """Raised when a commit is requested before the repository exists."""


class CommitNotFoundError(RepositoryError, KeyError):
    """Raised when a commit hash does not resolve.

    Attributes:
        commit_hash: The hash that was not found.
    """

    def __init__(self, message: str, *, commit_hash: str | None = None) -> None:
        """Initialize with error message and commit context.

        Args:
            message: Human-readable error message.
            commit_hash: The hash that was not found.
        """
        super().__init__(message)
        self.commit_hash: str | None = commit_hash

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class SnapshotEncodingError(RepositoryError):
    """Raised when a snapshot cannot be serialized for a commit.

    JSON encoding is depth-limited, so a tree nested deeper than the
    encoder allows is rejected before anything is written.
    """


class ImportValidationError(RepositoryError, ValueError):
    """Raised when an export bundle fails validation before import.

    Attributes:
        field: The bundle field that failed validation (if applicable).
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Create the error, naming the bundle field that failed.

        Args:
            message: Human-readable error message.
            field: The bundle field that failed validation.
        """
        super().__init__(message)
        self.field: str | None = field


# =============================================================================
# Source Exceptions
# =============================================================================


class TreeSourceError(BmgitError):
    """Raised when the current tree snapshot cannot be captured.

    Attributes:
        path: The bookmarks file involved, if any.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and source context."""
        super().__init__(message)
        self.path: Path | None = path


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(BmgitError):
    """Any problem with the bmgit configuration."""


class ConfigLoadError(ConfigError):
    """A config file could not be read or is not valid TOML."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Create the error; ``path`` names the offending file."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """A config value has the wrong type or is out of range."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Create the error with the offending key and value."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# File Exceptions
# =============================================================================


class FileIOError(BmgitError):
    """Raised when a JSON file cannot be read, parsed or written.

    Attributes:
        path: The file involved.
        operation: The failed operation (read, parse, write).
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and file context."""
        super().__init__(message)
        self.path: Path = path
        self.operation: str = operation
        self.cause: Exception | None = cause
