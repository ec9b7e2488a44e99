# pyright: reportAny=false, reportExplicitAny=false
"""Bookmark tracker: the outbound interface consumed by user interfaces.

Every boundary method here converts failures into result objects or empty
values, whatever the store or the tree source raised; nothing raises across
this boundary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self, final

from bmgit.tracker._coalescer import DEFAULT_QUIET_PERIOD, ChangeCoalescer
from bmgit.tracker._models import (
    MutationEvent,
    MutationEventType,
    OperationResult,
    RestoreResult,
    TrackerStatus,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from structlog.typing import FilteringBoundLogger

    from bmgit.repository import (
        CommitStore,
        CommitSummary,
        ExportBundle,
        RepositoryStats,
    )
    from bmgit.tracker._history import ChangeHistoryLog
    from bmgit.tracker._models import ChangeHistoryEntry
    from bmgit.tracker._protocol import TreeSource
    from bmgit.tree import DiffResult

INITIAL_SNAPSHOT_MESSAGE = "Initial bookmark snapshot"
MANUAL_SNAPSHOT_MESSAGE = "Manual bookmark snapshot"


@final
class BookmarkTracker:
    """Ties a commit store, a tree source and a coalescer together.

    Enter the tracker as an async context manager before feeding it
    mutation events; leaving the context commits any pending burst.

    Example:
        >>> tracker = BookmarkTracker(store, source, history=history)
        >>> async with tracker:
        ...     await tracker.initialize()
        ...     await tracker.handle_change("created", {"id": "7"})
    """

    __slots__ = (
        "_auto_commit",
        "_coalescer",
        "_history",
        "_logger",
        "_source",
        "_store",
    )

    def __init__(
        self,
        store: CommitStore,
        source: TreeSource,
        *,
        history: ChangeHistoryLog | None = None,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        auto_commit: bool = True,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            store: The commit store.
            source: Where snapshots are read from.
            history: Optional change history log.
            quiet_period: Debounce quiet period in seconds.
            auto_commit: Whether mutation events are committed at all.
            logger: Optional structured logger.
        """
        self._store = store
        self._source = source
        self._history = history
        self._auto_commit = auto_commit
        self._logger = logger
        self._coalescer = ChangeCoalescer(
            store,
            source,
            history=history,
            quiet_period=quiet_period,
            logger=logger,
        )

    @property
    def store(self) -> CommitStore:
        """The underlying commit store."""
        return self._store

    @property
    def coalescer(self) -> ChangeCoalescer:
        """The change coalescer fed by ``handle_change``."""
        return self._coalescer

    @property
    def auto_commit(self) -> bool:
        """Whether mutation events are committed."""
        return self._auto_commit

    async def __aenter__(self) -> Self:
        _ = await self._coalescer.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return await self._coalescer.__aexit__(exc_type, exc_val, exc_tb)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> OperationResult:
        """Initialize the repository and take the first snapshot if needed.

        Idempotent: an existing repository and its history are kept, and
        the initial snapshot is only taken while the history is empty.
        """
        try:
            await self._store.initialize()
            if await self._store.has_commits():
                return OperationResult(
                    success=True, message="Repository already initialized"
                )

            snapshot = await self._source.get_current_snapshot()
            commit_hash = await self._store.create_commit(
                snapshot, INITIAL_SNAPSHOT_MESSAGE, author="system"
            )
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.exception("tracker_initialize_failed", error=str(e))
            return OperationResult(success=False, error=str(e))

        if self._logger:
            self._logger.info("tracker_initialized", commit=commit_hash)
        return OperationResult(
            success=True,
            message="Initial snapshot created",
            commit_hash=commit_hash,
        )

    async def handle_change(
        self,
        event_type: MutationEventType | str,
        details: Mapping[str, Any] | None = None,
    ) -> bool:
        """Feed a mutation event to the coalescer.

        Args:
            event_type: Kind of mutation.
            details: Event payload used for the commit message.

        Returns:
            True if the event was buffered, False if it was ignored.
        """
        if not self._auto_commit:
            if self._logger:
                self._logger.debug(
                    "change_ignored_auto_commit_disabled", event_type=str(event_type)
                )
            return False

        try:
            kind = MutationEventType(event_type)
        except ValueError:
            if self._logger:
                self._logger.warning(
                    "change_ignored_unknown_type", event_type=str(event_type)
                )
            return False

        try:
            self._coalescer.record(MutationEvent(kind, dict(details or {})))
        except RuntimeError as e:
            if self._logger:
                self._logger.warning("change_ignored_not_running", error=str(e))
            return False
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_status(self) -> TrackerStatus:
        """Return whether a repository exists and how many events are pending."""
        try:
            stats = await self._store.get_repository_stats()
            initialized = stats.initialized
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("tracker_status_failed", error=str(e))
            initialized = False
        return TrackerStatus(
            initialized=initialized,
            pending_changes=self._coalescer.pending_count,
        )

    async def get_commit_history(self, limit: int | None = 50) -> list[CommitSummary]:
        """Return commit history newest first, or an empty list on failure."""
        try:
            return await self._store.get_commit_history(limit)
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("commit_history_failed", error=str(e))
            return []

    async def get_repository_stats(self) -> RepositoryStats | None:
        """Return repository statistics, or None on failure."""
        try:
            return await self._store.get_repository_stats()
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("repository_stats_failed", error=str(e))
            return None

    async def get_commit_diff(self, hash_a: str, hash_b: str) -> DiffResult | None:
        """Diff two commits, or None if either is missing or reads fail."""
        try:
            return await self._store.get_commit_diff(hash_a, hash_b)
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("commit_diff_failed", error=str(e))
            return None

    async def get_change_history(
        self, limit: int | None = None
    ) -> list[ChangeHistoryEntry]:
        """Return change history entries newest first."""
        if self._history is None:
            return []
        try:
            return await self._history.entries(limit)
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("change_history_failed", error=str(e))
            return []

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_manual_snapshot(
        self, message: str = MANUAL_SNAPSHOT_MESSAGE
    ) -> OperationResult:
        """Commit the current tree immediately with author ``manual``."""
        try:
            snapshot = await self._source.get_current_snapshot()
            commit_hash = await self._store.create_commit(
                snapshot, message or MANUAL_SNAPSHOT_MESSAGE, author="manual"
            )
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.exception("manual_snapshot_failed", error=str(e))
            return OperationResult(success=False, error=str(e))

        return OperationResult(
            success=True,
            message="Snapshot created successfully",
            commit_hash=commit_hash,
        )

    async def restore_from_commit(self, commit_hash: str) -> RestoreResult:
        """Fetch the snapshot stored with a commit.

        The tree itself is not modified; applying the snapshot is left to
        the caller.
        """
        try:
            snapshot = await self._store.get_commit_data(commit_hash)
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("restore_failed", commit=commit_hash, error=str(e))
            return RestoreResult(success=False, error=str(e))

        if snapshot is None:
            return RestoreResult(success=False, error="Commit data not found")
        return RestoreResult(success=True, data=snapshot)

    async def export_repository(self) -> ExportBundle | None:
        """Export the repository, or None on failure."""
        try:
            return await self._store.export_repository()
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("export_failed", error=str(e))
            return None

    async def import_repository(
        self, bundle: ExportBundle | Mapping[str, Any]
    ) -> OperationResult:
        """Replace the repository with a bundle.

        A rejected bundle leaves the current repository untouched.
        """
        try:
            await self._store.import_repository(bundle)
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("import_failed", error=str(e))
            return OperationResult(success=False, error=str(e))
        return OperationResult(success=True)

    async def reset_repository(self) -> OperationResult:
        """Discard the history and start with an empty repository."""
        try:
            success = await self._store.reset_repository()
        except Exception as e:  # noqa: BLE001
            if self._logger:
                self._logger.warning("reset_failed", error=str(e))
            return OperationResult(success=False, error=str(e))
        if not success:
            return OperationResult(success=False, error="Failed to reset repository")
        return OperationResult(success=True)
