# pyright: reportAny=false, reportExplicitAny=false
"""Data models for change tracking.

This module defines the types exchanged between the mutation source, the
coalescer and the tracker boundary:
- MutationEventType: Kinds of tree mutations
- MutationEvent: One buffered mutation with its payload
- CoalescerState: Idle/Buffering debounce states
- ChangeHistoryEntry: Persisted record of one coalesced burst
- TrackerStatus, OperationResult, RestoreResult: Boundary results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from bmgit.repository import now_ms
from bmgit.tree import Snapshot


class MutationEventType(StrEnum):
    """Types of tree mutation events.

    - CREATED: A node was added
    - REMOVED: A node was deleted
    - MOVED: A node changed parent or position
    - CHANGED: A node's title or url changed
    - REORDERED: A container's children were reordered
    - IMPORT_BEGAN: A bulk import started
    - IMPORT_ENDED: A bulk import finished
    """

    CREATED = "created"
    REMOVED = "removed"
    MOVED = "moved"
    CHANGED = "changed"
    REORDERED = "reordered"
    IMPORT_BEGAN = "import_began"
    IMPORT_ENDED = "import_ended"


@dataclass(frozen=True, slots=True)
class MutationEvent:
    """A single buffered mutation.

    Attributes:
        event_type: Kind of mutation.
        details: Event-specific payload (ids, titles, urls). Used only for
            commit messages, never for snapshot content.
        timestamp: Receipt time in epoch milliseconds.
    """

    event_type: MutationEventType
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: int = field(default_factory=now_ms)

    def to_raw(self) -> dict[str, Any]:
        """Return the JSON-compatible form stored in the change history."""
        return {
            "type": str(self.event_type),
            "details": self.details,
            "timestamp": self.timestamp,
        }


class CoalescerState(StrEnum):
    """Debounce states.

    - IDLE: No pending events and no scheduled commit
    - BUFFERING: At least one pending event and a commit is scheduled
    """

    IDLE = "idle"
    BUFFERING = "buffering"


class ChangeHistoryEntry(BaseModel):
    """One coalesced burst as recorded in the change history.

    Attributes:
        timestamp: When the burst was committed, in epoch milliseconds.
        changes: The raw buffered events.
        commit_message: The generated message.
        commit_hash: Hash of the resulting commit, None if it failed.
        error: Failure description when the commit failed.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=now_ms)
    changes: list[dict[str, Any]] = Field(default_factory=list)
    commit_message: str
    commit_hash: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class TrackerStatus:
    """Tracker status as shown to a UI.

    Attributes:
        initialized: Whether a repository exists.
        pending_changes: Number of events waiting in the coalescer.
    """

    initialized: bool
    pending_changes: int


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a state-changing boundary operation."""

    success: bool
    error: str | None = None
    message: str | None = None
    commit_hash: str | None = None


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Outcome of fetching a commit's snapshot for restoration."""

    success: bool
    data: Snapshot | None = None
    error: str | None = None
