# pyright: reportAny=false, reportExplicitAny=false
"""Bookmark tree models.

A snapshot is a forest of nodes where every node is exactly one of two
variants: a ``Leaf`` that points at a URL, or a ``Container`` that holds an
ordered tuple of child nodes. Snapshots are immutable once built.

The raw form of a snapshot is the JSON-compatible node list produced by the
browser bookmarks API (``title``, ``url``, ``children``, ``dateAdded``).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Leaf:
    """A bookmark: a node with a target URL.

    Attributes:
        id: Node identifier assigned by the bookmark source.
        title: Display title.
        url: Target URL.
        date_added: Creation time in epoch milliseconds, if known.
    """

    id: str
    title: str
    url: str
    date_added: int | None = None


@dataclass(frozen=True, slots=True)
class Container:
    """A folder: a node with an ordered sequence of children.

    Attributes:
        id: Node identifier assigned by the bookmark source.
        title: Display title.
        children: Child nodes in display order.
        date_added: Creation time in epoch milliseconds, if known.
        date_group_modified: Last content change in epoch milliseconds, if known.
    """

    id: str
    title: str
    children: tuple[Node, ...] = ()
    date_added: int | None = None
    date_group_modified: int | None = None


type Node = Leaf | Container


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _header(raw: Mapping[str, Any]) -> tuple[str, str, int | None]:
    title = raw.get("title")
    return (
        str(raw.get("id", "")),
        title if isinstance(title, str) else "",
        _optional_int(raw.get("dateAdded")),
    )


def _raw_items(raw: object) -> Iterator[object]:
    return iter(raw) if isinstance(raw, list | tuple) else iter(())


_EXHAUSTED = object()

type _ParseFrame = tuple[Mapping[str, Any] | None, Iterator[object], list[Node]]


def parse_node(raw: object) -> Node | None:
    """Parse a raw API-shaped node into a typed node.

    A mapping with a non-empty string ``url`` is a leaf; any other mapping is
    a container whose ``children`` are read when they form a list. Anything
    that is not a mapping is malformed and yields None.

    Args:
        raw: The raw node value.

    Returns:
        The typed node, or None if the value is malformed.
    """
    if not isinstance(raw, Mapping):
        return None
    return parse_nodes([raw])[0]


def parse_nodes(raw: object) -> tuple[Node, ...]:
    """Parse a raw node list, dropping malformed entries.

    Nesting depth is bounded only by memory: containers are built bottom-up
    from an explicit stack rather than by recursion.

    Args:
        raw: The raw node list. Non-list values yield an empty tuple.

    Returns:
        The typed nodes in their original order.
    """
    roots: list[Node] = []
    # (container mapping or None for the top level, remaining raw children,
    # children parsed so far)
    stack: list[_ParseFrame] = [(None, _raw_items(raw), roots)]

    while stack:
        owner, items, parsed = stack[-1]
        item = next(items, _EXHAUSTED)

        if item is _EXHAUSTED:
            _ = stack.pop()
            if owner is not None:
                node_id, title, date_added = _header(owner)
                stack[-1][2].append(
                    Container(
                        id=node_id,
                        title=title,
                        children=tuple(parsed),
                        date_added=date_added,
                        date_group_modified=_optional_int(
                            owner.get("dateGroupModified")
                        ),
                    )
                )
            continue

        if not isinstance(item, Mapping):
            continue

        url = item.get("url")
        if isinstance(url, str) and url:
            node_id, title, date_added = _header(item)
            parsed.append(Leaf(id=node_id, title=title, url=url, date_added=date_added))
        else:
            stack.append((item, _raw_items(item.get("children")), []))

    return tuple(roots)


def _raw_fields(node: Node) -> dict[str, Any]:
    raw: dict[str, Any] = {"id": node.id, "title": node.title}
    if node.date_added is not None:
        raw["dateAdded"] = node.date_added

    match node:
        case Leaf(url=url):
            raw["url"] = url
        case Container(date_group_modified=modified):
            if modified is not None:
                raw["dateGroupModified"] = modified

    return raw


def node_to_raw(node: Node) -> dict[str, Any]:
    """Convert a typed node back to its raw API-shaped form."""
    root = _raw_fields(node)
    stack: list[tuple[Node, dict[str, Any]]] = [(node, root)]
    while stack:
        current, raw = stack.pop()
        if isinstance(current, Container):
            children = [_raw_fields(child) for child in current.children]
            raw["children"] = children
            stack.extend(zip(current.children, children, strict=True))
    return root


@dataclass(frozen=True, slots=True)
class Snapshot:
    """An immutable capture of the whole bookmark forest at one instant.

    Attributes:
        nodes: Top-level nodes of the forest.
    """

    nodes: tuple[Node, ...] = field(default=())

    @classmethod
    def from_raw(cls, data: object) -> Snapshot:
        """Build a snapshot from raw API-shaped node data.

        Args:
            data: A list of raw nodes. Other values yield an empty snapshot.

        Returns:
            The parsed snapshot.
        """
        return cls(nodes=parse_nodes(data))

    def to_raw(self) -> list[dict[str, Any]]:
        """Return the raw API-shaped node list for persistence."""
        return [node_to_raw(node) for node in self.nodes]

    def walk(self) -> Iterator[tuple[Node, Container | None, int]]:
        """Iterate every node depth-first with its parent and sibling index.

        Yields:
            Tuples of (node, parent container or None for roots, index).
        """
        stack: list[tuple[Node, Container | None, int]] = [
            (node, None, index) for index, node in enumerate(self.nodes)
        ]
        stack.reverse()
        while stack:
            node, parent, index = stack.pop()
            yield node, parent, index
            if isinstance(node, Container):
                stack.extend(
                    (child, node, child_index)
                    for child_index, child in reversed(list(enumerate(node.children)))
                )
