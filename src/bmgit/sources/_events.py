"""Mutation events derived from two consecutive snapshots.

Used where the tree source cannot report mutations itself (a bookmarks
file on disk), so that events can be fed to the coalescer like those of a
live bookmarks API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bmgit.tracker import MutationEvent, MutationEventType
from bmgit.tree import Container, Leaf

if TYPE_CHECKING:
    from bmgit.tree import Node, Snapshot


@dataclass(frozen=True, slots=True)
class _Placement:
    node: Node
    parent_id: str | None
    index: int


def _index(snapshot: Snapshot) -> dict[str, _Placement]:
    placements: dict[str, _Placement] = {}
    for node, parent, index in snapshot.walk():
        if node.id:
            parent_id = parent.id if parent is not None else None
            placements[node.id] = _Placement(node, parent_id, index)
    return placements


def _node_details(node: Node) -> dict[str, object]:
    details: dict[str, object] = {"title": node.title}
    if isinstance(node, Leaf):
        details["url"] = node.url
    return details


def _children_reordered(old: Container, new: Container) -> bool:
    new_ids = {child.id for child in new.children}
    old_ids = {child.id for child in old.children}
    old_order = [child.id for child in old.children if child.id in new_ids]
    new_order = [child.id for child in new.children if child.id in old_ids]
    return old_order != new_order


def derive_events(old: Snapshot, new: Snapshot) -> list[MutationEvent]:
    """Compute the mutations that turn ``old`` into ``new``.

    Nodes are matched by id. Events are produced in this order: nodes
    created and nodes moved or changed (in tree order of ``new``), nodes
    removed (in tree order of ``old``), then containers whose surviving
    children changed relative order. A removed container yields one event
    for itself and one per descendant.

    Args:
        old: The previous snapshot.
        new: The current snapshot.

    Returns:
        The derived events, empty when the snapshots match.
    """
    before = _index(old)
    after = _index(new)
    events: list[MutationEvent] = []

    for node_id, placement in after.items():
        previous = before.get(node_id)
        if previous is None:
            events.append(
                MutationEvent(
                    MutationEventType.CREATED,
                    {
                        "id": node_id,
                        "bookmark": {
                            **_node_details(placement.node),
                            "parentId": placement.parent_id,
                            "index": placement.index,
                        },
                    },
                )
            )
            continue

        if previous.parent_id != placement.parent_id:
            events.append(
                MutationEvent(
                    MutationEventType.MOVED,
                    {
                        "id": node_id,
                        "parentId": placement.parent_id,
                        "index": placement.index,
                        "oldParentId": previous.parent_id,
                        "oldIndex": previous.index,
                    },
                )
            )

        old_details = _node_details(previous.node)
        new_details = _node_details(placement.node)
        if old_details != new_details:
            events.append(
                MutationEvent(MutationEventType.CHANGED, {"id": node_id, **new_details})
            )

    for node_id, placement in before.items():
        if node_id not in after:
            events.append(
                MutationEvent(
                    MutationEventType.REMOVED,
                    {
                        "id": node_id,
                        "parentId": placement.parent_id,
                        "index": placement.index,
                        "node": _node_details(placement.node),
                    },
                )
            )

    for node_id, placement in after.items():
        previous = before.get(node_id)
        if (
            previous is not None
            and isinstance(placement.node, Container)
            and isinstance(previous.node, Container)
            and _children_reordered(previous.node, placement.node)
        ):
            events.append(
                MutationEvent(
                    MutationEventType.REORDERED,
                    {
                        "id": node_id,
                        "childIds": [child.id for child in placement.node.children],
                    },
                )
            )

    return events
