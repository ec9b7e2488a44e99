"""Raw bookmark tree builders shared by tests."""

from typing import Any


def make_leaf(node_id: str, title: str | None = None) -> dict[str, Any]:
    return {
        "id": node_id,
        "title": title if title is not None else f"Bookmark {node_id}",
        "url": f"https://example.com/{node_id}",
    }


def make_tree(leaf_count: int, *, folder_id: str = "1") -> list[dict[str, Any]]:
    """A single folder holding ``leaf_count`` bookmarks."""
    return [
        {
            "id": folder_id,
            "title": "Bookmarks bar",
            "children": [make_leaf(str(100 + i)) for i in range(leaf_count)],
        }
    ]


def make_chromium_file(
    bar: list[dict[str, Any]] | None = None,
    other: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Content of a Chromium ``Bookmarks`` file."""
    return {
        "checksum": "0" * 32,
        "version": 1,
        "roots": {
            "bookmark_bar": {
                "id": "1",
                "name": "Bookmarks bar",
                "type": "folder",
                "date_added": "13300000000000000",
                "date_modified": "0",
                "children": bar or [],
            },
            "other": {
                "id": "2",
                "name": "Other bookmarks",
                "type": "folder",
                "children": other or [],
            },
            "synced": {
                "id": "3",
                "name": "Mobile bookmarks",
                "type": "folder",
                "children": [],
            },
        },
    }


def chromium_url(node_id: str, name: str, url: str) -> dict[str, Any]:
    return {
        "id": node_id,
        "name": name,
        "type": "url",
        "url": url,
        "date_added": "13300000000000000",
    }


def make_nested(depth: int) -> list[dict[str, Any]]:
    """A chain of ``depth`` folders with one bookmark at the bottom."""
    node = make_leaf("0")
    for level in range(depth):
        node = {"id": str(level + 1), "title": f"Folder {level}", "children": [node]}
    return [node]


def nesting_depth(raw: list[dict[str, Any]]) -> int:
    """Count the folders along the first-child chain of a raw tree."""
    depth = 0
    node = raw[0]
    while "children" in node:
        depth += 1
        node = node["children"][0]
    return depth
