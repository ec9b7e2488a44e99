"""bmgit change tracking.

Classes:
    BookmarkTracker: Outbound interface for user interfaces.
    ChangeCoalescer: Debounces mutation events into one commit per burst.
    ChangeHistoryLog: Bounded log of coalesced bursts.

Protocols:
    TreeSource: Provides the current tree on demand.

Models:
    MutationEventType, MutationEvent: Incoming mutation events.
    CoalescerState: Idle/Buffering debounce state.
    ChangeHistoryEntry: One recorded burst.
    TrackerStatus, OperationResult, RestoreResult: Boundary results.
"""

from bmgit.tracker._coalescer import DEFAULT_QUIET_PERIOD, ChangeCoalescer
from bmgit.tracker._history import DEFAULT_HISTORY_LIMIT, ChangeHistoryLog
from bmgit.tracker._messages import describe_event, generate_commit_message
from bmgit.tracker._models import (
    ChangeHistoryEntry,
    CoalescerState,
    MutationEvent,
    MutationEventType,
    OperationResult,
    RestoreResult,
    TrackerStatus,
)
from bmgit.tracker._protocol import TreeSource
from bmgit.tracker._tracker import (
    INITIAL_SNAPSHOT_MESSAGE,
    MANUAL_SNAPSHOT_MESSAGE,
    BookmarkTracker,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_QUIET_PERIOD",
    "INITIAL_SNAPSHOT_MESSAGE",
    "MANUAL_SNAPSHOT_MESSAGE",
    "BookmarkTracker",
    "ChangeCoalescer",
    "ChangeHistoryEntry",
    "ChangeHistoryLog",
    "CoalescerState",
    "MutationEvent",
    "MutationEventType",
    "OperationResult",
    "RestoreResult",
    "TrackerStatus",
    "TreeSource",
    "describe_event",
    "generate_commit_message",
]
