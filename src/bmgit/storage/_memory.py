# pyright: reportAny=false, reportExplicitAny=false
"""In-memory key-value store.

Useful for testing and for embedding where persistence is not wanted.
Can be used as a drop-in replacement for SQLiteStore.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from bmgit.exceptions import StorageError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from structlog.typing import FilteringBoundLogger


class MemoryStore:
    """In-memory implementation of KeyValueStore.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.

    The fail_next_* helpers make the next matching operation raise
    StorageError without touching any data, for failure-path tests.
    """

    _data: dict[str, Any]
    _fail_get: int
    _fail_set: int
    _fail_remove: int
    _logger: FilteringBoundLogger | None

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            initial: Optional slots to pre-populate.
            logger: Optional logger for debug-level operation logging.
        """
        self._data = copy.deepcopy(dict(initial)) if initial else {}
        self._fail_get = 0
        self._fail_set = 0
        self._fail_remove = 0
        self._logger = logger

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        """Read the given slots."""
        wanted = [str(key) for key in keys]
        if self._fail_get:
            self._fail_get -= 1
            msg = "Simulated read failure"
            raise StorageError(msg, operation="get", keys=wanted)

        result = {
            key: copy.deepcopy(self._data[key]) for key in wanted if key in self._data
        }
        if self._logger:
            self._logger.debug("store_get", keys=wanted, found=sorted(result))
        return result

    async def set(self, items: Mapping[str, Any]) -> None:
        """Write several slots atomically."""
        if self._fail_set:
            self._fail_set -= 1
            msg = "Simulated write failure"
            raise StorageError(msg, operation="set", keys=[str(k) for k in items])

        # Copy everything first so a bad value cannot leave a partial write
        staged = {str(key): copy.deepcopy(value) for key, value in items.items()}
        self._data.update(staged)
        if self._logger:
            self._logger.debug("store_set", keys=sorted(staged))

    async def remove(self, keys: Iterable[str]) -> None:
        """Delete the given slots."""
        wanted = [str(key) for key in keys]
        if self._fail_remove:
            self._fail_remove -= 1
            msg = "Simulated delete failure"
            raise StorageError(msg, operation="remove", keys=wanted)

        for key in wanted:
            _ = self._data.pop(key, None)
        if self._logger:
            self._logger.debug("store_remove", keys=wanted)

    # =========================================================================
    # Test Helper Methods
    # =========================================================================

    def fail_next_get(self, count: int = 1) -> None:
        """Make the next ``count`` reads raise StorageError."""
        self._fail_get = count

    def fail_next_set(self, count: int = 1) -> None:
        """Make the next ``count`` writes raise StorageError."""
        self._fail_set = count

    def fail_next_remove(self, count: int = 1) -> None:
        """Make the next ``count`` deletes raise StorageError."""
        self._fail_remove = count

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of every stored slot."""
        return copy.deepcopy(self._data)
