"""Bookmark tree snapshots and the pure functions computed over them.

Models:
    Leaf: A bookmark node with a target URL.
    Container: A folder node with ordered children.
    Node: Type alias for Leaf | Container.
    Snapshot: Immutable capture of the whole forest.
    TreeStats: Leaf/container counts of a snapshot.
    DiffResult: Coarse size-delta between two snapshots.

Example:
    >>> from bmgit.tree import Snapshot, compute_stats
    >>> snapshot = Snapshot.from_raw([{"id": "1", "title": "a", "url": "https://a"}])
    >>> compute_stats(snapshot).leaf_count
    1
"""

from bmgit.tree._models import (
    Container,
    Leaf,
    Node,
    Snapshot,
    node_to_raw,
    parse_node,
    parse_nodes,
)
from bmgit.tree._stats import (
    CountDelta,
    DiffResult,
    TreeStats,
    compute_stats,
    diff_snapshots,
)

__all__ = [
    "Container",
    "CountDelta",
    "DiffResult",
    "Leaf",
    "Node",
    "Snapshot",
    "TreeStats",
    "compute_stats",
    "diff_snapshots",
    "node_to_raw",
    "parse_node",
    "parse_nodes",
]
