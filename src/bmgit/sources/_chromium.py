# pyright: reportAny=false, reportExplicitAny=false
"""Tree source reading a Chromium ``Bookmarks`` file.

Chromium stores bookmarks as JSON with a ``roots`` object holding the
``bookmark_bar``, ``other`` and ``synced`` folders. Node names live in
``name`` and dates are WebKit timestamps (microseconds since 1601-01-01,
as strings). The file is converted to the shape returned by the browser
bookmarks API: one root container with id ``"0"`` whose children are the
three root folders.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import anyio.to_thread

from bmgit.exceptions import FileIOError, TreeSourceError
from bmgit.tree import Snapshot
from bmgit.utils import read_json

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

ROOT_KEYS: Final = ("bookmark_bar", "other", "synced")

# Milliseconds between 1601-01-01 and 1970-01-01
_WEBKIT_EPOCH_OFFSET_MS: Final = 11_644_473_600_000


def webkit_to_epoch_ms(value: object) -> int | None:
    """Convert a WebKit microsecond timestamp to epoch milliseconds.

    Returns:
        The timestamp, or None for missing, zero or unparseable values.
    """
    if isinstance(value, bool):
        return None
    try:
        micros = int(value)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError):
        return None
    if micros <= 0:
        return None
    return micros // 1000 - _WEBKIT_EPOCH_OFFSET_MS


def _convert_node(raw: Mapping[str, Any]) -> dict[str, Any]:
    node: dict[str, Any] = {
        "id": str(raw.get("id", "")),
        "title": raw.get("name") or "",
    }
    date_added = webkit_to_epoch_ms(raw.get("date_added"))
    if date_added is not None:
        node["dateAdded"] = date_added

    if raw.get("type") == "url":
        node["url"] = raw.get("url") or ""
        return node

    modified = webkit_to_epoch_ms(raw.get("date_modified"))
    if modified is not None:
        node["dateGroupModified"] = modified
    children = raw.get("children")
    node["children"] = [
        _convert_node(child)
        for child in (children if isinstance(children, list) else [])
        if isinstance(child, Mapping)
    ]
    return node


def chromium_to_raw(data: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Convert parsed ``Bookmarks`` file content to raw API-shaped nodes.

    Raises:
        TreeSourceError: If the content has no ``roots`` object.
    """
    roots = data.get("roots")
    if not isinstance(roots, Mapping):
        msg = "Bookmarks file has no 'roots' object"
        raise TreeSourceError(msg)

    children = [
        _convert_node(roots[key])
        for key in ROOT_KEYS
        if isinstance(roots.get(key), Mapping)
    ]
    return [{"id": "0", "title": "", "children": children}]


class BookmarkFileSource:
    """Reads the current tree from a Chromium ``Bookmarks`` file.

    The file is re-read on every call; reading happens in a worker thread.
    """

    __slots__ = ("_logger", "_path")

    def __init__(
        self,
        path: Path | str,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._path = Path(path).expanduser()
        self._logger = logger

    @property
    def path(self) -> Path:
        """The bookmarks file."""
        return self._path

    def read(self) -> Snapshot:
        """Read and convert the file synchronously.

        Raises:
            TreeSourceError: If the file cannot be read or is malformed.
        """
        try:
            data = read_json(self._path)
        except FileIOError as e:
            msg = f"Cannot read bookmarks file: {e}"
            raise TreeSourceError(msg, path=self._path) from e

        try:
            raw = chromium_to_raw(data)
        except TreeSourceError as e:
            raise TreeSourceError(str(e), path=self._path) from e
        return Snapshot.from_raw(raw)

    async def get_current_snapshot(self) -> Snapshot:
        """Read the file and return its tree.

        Raises:
            TreeSourceError: If the file cannot be read or is malformed.
        """
        snapshot = await anyio.to_thread.run_sync(self.read)
        if self._logger:
            self._logger.debug("bookmarks_file_read", path=str(self._path))
        return snapshot
