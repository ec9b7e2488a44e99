"""Debounced coalescing of mutation events into commits.

The coalescer is a two-state machine. ``record`` appends an event to the
pending buffer and restarts the quiet-period timer; when a timer runs to
completion the buffer is detached, the tree source is read once and a single
commit covers the whole burst.

Timers are cancel scopes running in the coalescer's own task group, so at
most one is ever pending. A failed burst is logged, recorded in the change
history with its error and then dropped; there is no retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self, final

import anyio
import anyio.abc

from bmgit.tracker._messages import generate_commit_message
from bmgit.tracker._models import ChangeHistoryEntry, CoalescerState

if TYPE_CHECKING:
    from types import TracebackType

    from structlog.typing import FilteringBoundLogger

    from bmgit.repository import CommitStore
    from bmgit.tracker._history import ChangeHistoryLog
    from bmgit.tracker._models import MutationEvent
    from bmgit.tracker._protocol import TreeSource

DEFAULT_QUIET_PERIOD = 1.0
COALESCED_AUTHOR = "user"


@final
class ChangeCoalescer:
    """Turns bursts of mutation events into one commit each.

    Use as an async context manager; leaving the context commits whatever is
    still pending.

    Example:
        >>> async with ChangeCoalescer(store, source, quiet_period=1.0) as coalescer:
        ...     coalescer.record(MutationEvent(MutationEventType.CREATED, {"id": "7"}))
    """

    __slots__ = (
        "_commit_lock",
        "_history",
        "_logger",
        "_pending",
        "_quiet_period",
        "_source",
        "_store",
        "_task_group",
        "_timer",
    )

    def __init__(
        self,
        store: CommitStore,
        source: TreeSource,
        *,
        history: ChangeHistoryLog | None = None,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the coalescer.

        Args:
            store: Commit store receiving the coalesced commits.
            source: Tree source read once per burst.
            history: Optional change history receiving one entry per burst.
            quiet_period: Seconds without events before a burst is committed.
            logger: Optional structured logger.
        """
        if quiet_period < 0:
            msg = f"Quiet period must not be negative, got {quiet_period}"
            raise ValueError(msg)

        self._store = store
        self._source = source
        self._history = history
        self._quiet_period = quiet_period
        self._logger = logger
        self._pending: list[MutationEvent] = []
        self._timer: anyio.CancelScope | None = None
        self._task_group: anyio.abc.TaskGroup | None = None
        self._commit_lock = anyio.Lock()

    @property
    def state(self) -> CoalescerState:
        """Current debounce state."""
        return CoalescerState.BUFFERING if self._pending else CoalescerState.IDLE

    @property
    def pending_count(self) -> int:
        """Number of buffered events."""
        return len(self._pending)

    @property
    def quiet_period(self) -> float:
        """Seconds of inactivity that close a burst."""
        return self._quiet_period

    async def __aenter__(self) -> Self:
        task_group = anyio.create_task_group()
        _ = await task_group.__aenter__()
        self._task_group = task_group
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        task_group = self._task_group
        if task_group is None:
            return None

        self._cancel_timer()
        self._task_group = None
        if exc_type is None:
            try:
                _ = await self.flush()
            except BaseException as e:
                if not await task_group.__aexit__(type(e), e, e.__traceback__):
                    raise
                return None
        return await task_group.__aexit__(exc_type, exc_val, exc_tb)

    # =========================================================================
    # Event intake
    # =========================================================================

    def record(self, event: MutationEvent) -> None:
        """Buffer an event and restart the quiet period.

        Raises:
            RuntimeError: If called outside the coalescer's async context.
        """
        if self._task_group is None:
            msg = "ChangeCoalescer must be entered before recording events"
            raise RuntimeError(msg)

        self._pending.append(event)
        self._cancel_timer()

        scope = anyio.CancelScope()
        self._timer = scope
        self._task_group.start_soon(self._run_timer, scope)

        if self._logger:
            self._logger.debug(
                "coalescer_event_recorded",
                event_type=str(event.event_type),
                pending=len(self._pending),
            )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _run_timer(self, scope: anyio.CancelScope) -> None:
        with scope:
            await anyio.sleep(self._quiet_period)
        if scope.cancel_called:
            return

        if self._timer is scope:
            self._timer = None
        _ = await self._commit_pending()

    # =========================================================================
    # Committing
    # =========================================================================

    async def flush(self) -> str | None:
        """Commit the pending burst now instead of waiting.

        Returns:
            Hash of the new commit, or None if nothing was pending or the
            commit failed.
        """
        self._cancel_timer()
        return await self._commit_pending()

    async def _commit_pending(self) -> str | None:
        async with self._commit_lock:
            # Events recorded from here on start a new burst
            events = self._pending
            if not events:
                return None
            self._pending = []

            message = generate_commit_message(events)
            commit_hash: str | None = None
            error: str | None = None

            try:
                snapshot = await self._source.get_current_snapshot()
                commit_hash = await self._store.create_commit(
                    snapshot, message, author=COALESCED_AUTHOR
                )
            except Exception as e:  # noqa: BLE001
                error = str(e)
                if self._logger:
                    self._logger.exception(
                        "coalescer_commit_failed",
                        error=error,
                        events=len(events),
                        message=message,
                    )
            else:
                if self._logger:
                    self._logger.info(
                        "coalescer_flushed",
                        commit=commit_hash,
                        events=len(events),
                        message=message,
                    )

            if self._history is not None:
                entry = ChangeHistoryEntry(
                    changes=[event.to_raw() for event in events],
                    commit_message=message,
                    commit_hash=commit_hash,
                    error=error,
                )
                try:
                    await self._history.append(entry)
                except Exception as e:  # noqa: BLE001
                    if self._logger:
                        self._logger.warning(
                            "change_history_append_failed", error=str(e)
                        )

            return commit_hash
