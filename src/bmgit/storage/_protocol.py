"""Key-value persistence protocol.

The commit store talks to persistence exclusively through this protocol:
named top-level slots holding JSON-compatible values, read and written in
batches. A single ``set`` call is all-or-nothing.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class StorageKey(StrEnum):
    """Names of the persisted top-level slots."""

    REPOSITORY = "bookmark_git_repo"
    COMMITS = "bookmark_commits"
    CURRENT_BRANCH = "current_branch"
    GIT_CONFIG = "git_config"
    CHANGE_HISTORY = "change_history"


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for key-value persistence backends.

    Values are JSON-compatible (dicts, lists, strings, numbers, booleans,
    None). Implementations must give read-your-writes consistency within a
    process and must apply each ``set`` call atomically.
    """

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        """Read the given slots.

        Args:
            keys: Slot names to read.

        Returns:
            Mapping of slot name to value. Missing slots are omitted.

        Raises:
            StorageError: If the backend cannot be read.
        """
        ...

    async def set(self, items: Mapping[str, Any]) -> None:
        """Write several slots in one atomic operation.

        Args:
            items: Mapping of slot name to value.

        Raises:
            StorageError: If the write fails. No slot is changed in that case.
        """
        ...

    async def remove(self, keys: Iterable[str]) -> None:
        """Delete the given slots. Missing slots are ignored.

        Args:
            keys: Slot names to delete.

        Raises:
            StorageError: If the delete fails.
        """
        ...
