"""bmgit tree and mutation sources.

Classes:
    StaticTreeSource: In-memory, replaceable snapshot.
    BookmarkFileSource: Reads a Chromium ``Bookmarks`` file.

Functions:
    derive_events: Mutation events between two snapshots.
    watch_bookmark_file: Feed file mutations to a tracker.
    chromium_to_raw: Convert ``Bookmarks`` file content to raw nodes.
"""

from bmgit.sources._chromium import (
    ROOT_KEYS,
    BookmarkFileSource,
    chromium_to_raw,
    webkit_to_epoch_ms,
)
from bmgit.sources._events import derive_events
from bmgit.sources._static import StaticTreeSource
from bmgit.sources._watch import watch_bookmark_file

__all__ = [
    "ROOT_KEYS",
    "BookmarkFileSource",
    "StaticTreeSource",
    "chromium_to_raw",
    "derive_events",
    "watch_bookmark_file",
    "webkit_to_epoch_ms",
]
