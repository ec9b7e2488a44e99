"""Stat and diff computation over bookmark snapshots.

Both functions are pure. Statistics count every leaf and every container in
a snapshot; the diff compares two sets of statistics and reports coarse
added/removed counts. Structural changes inside the tree are not detected,
so ``changed`` is always 0.
"""

from dataclasses import dataclass

from bmgit.tree._models import Container, Snapshot


@dataclass(frozen=True, slots=True)
class TreeStats:
    """Aggregate item counts for one snapshot.

    Attributes:
        leaf_count: Number of bookmarks.
        container_count: Number of folders.
        total_count: Sum of both counts.
    """

    leaf_count: int = 0
    container_count: int = 0
    total_count: int = 0


@dataclass(frozen=True, slots=True)
class CountDelta:
    """Added/removed/changed counts for one item kind."""

    added: int = 0
    removed: int = 0
    changed: int = 0


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Coarse size-delta diff between two snapshots.

    Attributes:
        bookmarks: Delta for leaf items.
        folders: Delta for container items.
    """

    bookmarks: CountDelta
    folders: CountDelta


def _as_snapshot(snapshot: Snapshot | object) -> Snapshot:
    if isinstance(snapshot, Snapshot):
        return snapshot
    return Snapshot.from_raw(snapshot)


def compute_stats(snapshot: Snapshot | object) -> TreeStats:
    """Count the leaves and containers of a snapshot.

    Every container counts once regardless of its number of children.
    Raw node data is accepted as well; malformed parts contribute zero.

    Args:
        snapshot: A snapshot or raw API-shaped node list.

    Returns:
        The aggregate counts.
    """
    leaves = 0
    containers = 0
    for node, _parent, _index in _as_snapshot(snapshot).walk():
        if isinstance(node, Container):
            containers += 1
        else:
            leaves += 1

    return TreeStats(
        leaf_count=leaves,
        container_count=containers,
        total_count=leaves + containers,
    )


def _delta(before: int, after: int) -> CountDelta:
    return CountDelta(added=max(0, after - before), removed=max(0, before - after))


def diff_snapshots(
    snapshot_a: Snapshot | object,
    snapshot_b: Snapshot | object,
) -> DiffResult:
    """Compare the aggregate stats of two snapshots.

    Args:
        snapshot_a: The older snapshot.
        snapshot_b: The newer snapshot.

    Returns:
        Added/removed counts for bookmarks and folders going from A to B.
    """
    stats_a = compute_stats(snapshot_a)
    stats_b = compute_stats(snapshot_b)
    return DiffResult(
        bookmarks=_delta(stats_a.leaf_count, stats_b.leaf_count),
        folders=_delta(stats_a.container_count, stats_b.container_count),
    )
