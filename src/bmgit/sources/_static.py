"""In-memory tree source."""

from __future__ import annotations

from typing import Any

from bmgit.tree import Snapshot


class StaticTreeSource:
    """Serves a snapshot held in memory.

    The snapshot can be swapped with ``replace`` to simulate edits. Useful
    for tests and for committing trees obtained elsewhere.
    """

    __slots__ = ("_read_count", "_snapshot")

    def __init__(self, snapshot: Snapshot | list[Any] | None = None) -> None:
        self._snapshot = self._coerce(snapshot)
        self._read_count = 0

    @staticmethod
    def _coerce(snapshot: Snapshot | list[Any] | None) -> Snapshot:
        if snapshot is None:
            return Snapshot()
        if isinstance(snapshot, Snapshot):
            return snapshot
        return Snapshot.from_raw(snapshot)

    @property
    def read_count(self) -> int:
        """How many times the snapshot has been read."""
        return self._read_count

    def replace(self, snapshot: Snapshot | list[Any] | None) -> None:
        """Swap in a new current tree."""
        self._snapshot = self._coerce(snapshot)

    async def get_current_snapshot(self) -> Snapshot:
        """Return the held snapshot."""
        self._read_count += 1
        return self._snapshot
