"""Watch a Chromium ``Bookmarks`` file and feed its mutations to a tracker."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import awatch

from bmgit.exceptions import TreeSourceError
from bmgit.sources._chromium import BookmarkFileSource
from bmgit.sources._events import derive_events

if TYPE_CHECKING:
    import anyio
    from structlog.typing import FilteringBoundLogger
    from watchfiles import Change

    from bmgit.tracker import BookmarkTracker


async def watch_bookmark_file(
    path: Path | str,
    tracker: BookmarkTracker,
    *,
    stop_event: anyio.Event | None = None,
    logger: FilteringBoundLogger | None = None,
) -> int:
    """Feed mutations of a bookmarks file to a tracker until stopped.

    The parent directory is watched because browsers replace the file by
    renaming a temporary file over it. After every change the file is
    re-read, events are derived against the previous read, and each event
    is handed to ``tracker.handle_change``. Unreadable intermediate states
    are logged and skipped.

    The tracker must already be entered as an async context manager.

    Args:
        path: The ``Bookmarks`` file.
        tracker: Receives the derived events.
        stop_event: Ends the watch when set.
        logger: Optional structured logger.

    Returns:
        The number of events handed to the tracker.

    Raises:
        TreeSourceError: If the file cannot be read when the watch starts.
    """
    source = BookmarkFileSource(path, logger=logger)
    watched = source.path
    previous = await source.get_current_snapshot()
    forwarded = 0

    def is_bookmarks_file(_change: Change, changed_path: str) -> bool:
        return Path(changed_path).name == watched.name

    if logger:
        logger.info("bookmark_watch_started", path=str(watched))

    async for _changes in awatch(
        watched.parent,
        watch_filter=is_bookmarks_file,
        stop_event=stop_event,
        recursive=False,
    ):
        try:
            current = await source.get_current_snapshot()
        except TreeSourceError as e:
            if logger:
                logger.warning("bookmark_watch_read_failed", error=str(e))
            continue

        events = derive_events(previous, current)
        previous = current
        for event in events:
            if await tracker.handle_change(event.event_type, event.details):
                forwarded += 1

        if logger and events:
            logger.debug("bookmark_watch_events", count=len(events))

    if logger:
        logger.info("bookmark_watch_stopped", path=str(watched), events=forwarded)
    return forwarded
