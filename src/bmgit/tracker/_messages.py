"""Commit message generation for coalesced bursts."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from bmgit.tracker._models import MutationEvent, MutationEventType

if TYPE_CHECKING:
    from collections.abc import Sequence

BULK_PREFIX = "Bulk bookmark changes"


def describe_event(event: MutationEvent) -> str:
    """Describe a single mutation event.

    Args:
        event: The event to describe.

    Returns:
        A one-line, event-type specific message.
    """
    details = event.details
    node_id = details.get("id", "unknown")

    match event.event_type:
        case MutationEventType.CREATED:
            bookmark = details.get("bookmark") or {}
            title = bookmark.get("title") or bookmark.get("url") or "New folder"
            return f"Added bookmark: {title}"
        case MutationEventType.REMOVED:
            return f"Removed bookmark (ID: {node_id})"
        case MutationEventType.MOVED:
            return f"Moved bookmark (ID: {node_id})"
        case MutationEventType.CHANGED:
            return f"Modified bookmark (ID: {node_id})"
        case MutationEventType.REORDERED:
            return f"Reordered bookmarks in folder (ID: {node_id})"
        case MutationEventType.IMPORT_BEGAN:
            return "Started bookmark import"
        case MutationEventType.IMPORT_ENDED:
            return "Completed bookmark import"
        case _:  # pyright: ignore[reportUnnecessaryComparison]
            return f"Bookmark {event.event_type}"


def generate_commit_message(events: Sequence[MutationEvent]) -> str:
    """Derive a commit message from a burst of events.

    A single event yields its own description. A burst yields a count per
    event type in first-seen order, e.g.
    ``Bulk bookmark changes: 3 created, 1 moved``.

    Args:
        events: The buffered events, oldest first.

    Returns:
        The commit message, or an empty string for an empty burst.
    """
    if not events:
        return ""
    if len(events) == 1:
        return describe_event(events[0])

    counts = Counter(str(event.event_type) for event in events)
    summary = ", ".join(f"{count} {event_type}" for event_type, count in counts.items())
    return f"{BULK_PREFIX}: {summary}"
