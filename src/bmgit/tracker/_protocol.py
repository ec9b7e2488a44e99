"""Protocol definitions for tree sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bmgit.tree import Snapshot


@runtime_checkable
class TreeSource(Protocol):
    """Provides the full current tree on demand.

    The coalescer pulls from the source once per burst, after the quiet
    period has elapsed, so the committed snapshot reflects every buffered
    event.
    """

    async def get_current_snapshot(self) -> Snapshot:
        """Return the full current tree.

        Raises:
            TreeSourceError: If the tree cannot be read.
        """
        ...
