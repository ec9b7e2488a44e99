# pyright: reportAny=false
"""Bounded, newest-first log of coalesced bursts."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from pydantic import ValidationError

from bmgit.storage import StorageKey
from bmgit.tracker._models import ChangeHistoryEntry

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from bmgit.storage import KeyValueStore

DEFAULT_HISTORY_LIMIT = 100


@final
class ChangeHistoryLog:
    """Change history kept in its own persistence slot.

    Entries are prepended and the log is truncated to ``limit`` entries.
    """

    __slots__ = ("_limit", "_logger", "_storage")

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        if limit < 1:
            msg = f"History limit must be positive, got {limit}"
            raise ValueError(msg)
        self._storage = storage
        self._limit = limit
        self._logger = logger

    @property
    def limit(self) -> int:
        """Maximum number of retained entries."""
        return self._limit

    async def append(self, entry: ChangeHistoryEntry) -> None:
        """Prepend an entry, dropping the oldest beyond the limit.

        Raises:
            StorageError: If persistence fails.
        """
        state = await self._storage.get([StorageKey.CHANGE_HISTORY])
        existing: list[object] = state.get(StorageKey.CHANGE_HISTORY) or []
        updated = [entry.model_dump(mode="json"), *existing][: self._limit]
        await self._storage.set({StorageKey.CHANGE_HISTORY: updated})

    async def entries(self, limit: int | None = None) -> list[ChangeHistoryEntry]:
        """Return entries newest first; malformed records are skipped."""
        state = await self._storage.get([StorageKey.CHANGE_HISTORY])
        raw_entries: list[object] = state.get(StorageKey.CHANGE_HISTORY) or []

        result: list[ChangeHistoryEntry] = []
        for raw in raw_entries:
            if limit is not None and len(result) >= limit:
                break
            try:
                result.append(ChangeHistoryEntry.model_validate(raw))
            except ValidationError:
                if self._logger:
                    self._logger.warning("change_history_entry_malformed")
        return result

    async def clear(self) -> None:
        """Remove the whole change history."""
        await self._storage.remove([StorageKey.CHANGE_HISTORY])
