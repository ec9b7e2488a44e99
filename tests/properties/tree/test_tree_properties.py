from hypothesis import given, settings, strategies as st

from bmgit.tree import Container, Leaf, Node, Snapshot, compute_stats, diff_snapshots
from tests.factories import make_nested, nesting_depth

node_ids = st.text(alphabet="0123456789", min_size=1, max_size=6)
timestamps = st.none() | st.integers(min_value=0, max_value=2**53)

leaves = st.builds(
    Leaf,
    id=node_ids,
    title=st.text(max_size=20),
    url=st.text(min_size=1, max_size=30),
    date_added=timestamps,
)


def _containers(children: st.SearchStrategy[Node]) -> st.SearchStrategy[Node]:
    return st.builds(
        Container,
        id=node_ids,
        title=st.text(max_size=20),
        children=st.lists(children, max_size=5).map(tuple),
        date_added=timestamps,
        date_group_modified=timestamps,
    )


nodes: st.SearchStrategy[Node] = st.recursive(leaves, _containers, max_leaves=30)
snapshots = st.lists(nodes, max_size=4).map(lambda items: Snapshot(nodes=tuple(items)))


def _count(node: Node) -> tuple[int, int]:
    if isinstance(node, Leaf):
        return 1, 0
    leaves_total, containers_total = 0, 1
    for child in node.children:
        child_leaves, child_containers = _count(child)
        leaves_total += child_leaves
        containers_total += child_containers
    return leaves_total, containers_total


@given(snapshot=snapshots)
def test_total_is_sum_of_leaves_and_containers(snapshot: Snapshot) -> None:
    stats = compute_stats(snapshot)

    assert stats.total_count == stats.leaf_count + stats.container_count


@given(snapshot=snapshots)
def test_stats_match_recursive_count(snapshot: Snapshot) -> None:
    counts = [_count(node) for node in snapshot.nodes]

    stats = compute_stats(snapshot)

    assert stats.leaf_count == sum(leaves for leaves, _ in counts)
    assert stats.container_count == sum(containers for _, containers in counts)


@given(snapshot=snapshots)
def test_walk_visits_every_node_once(snapshot: Snapshot) -> None:
    visited = list(snapshot.walk())

    assert len(visited) == compute_stats(snapshot).total_count
    assert [node for node, parent, _ in visited if parent is None] == list(
        snapshot.nodes
    )


@given(snapshot=snapshots)
def test_raw_form_parses_back_unchanged(snapshot: Snapshot) -> None:
    assert Snapshot.from_raw(snapshot.to_raw()) == snapshot


@given(snapshot=snapshots)
def test_raw_stats_match_typed_stats(snapshot: Snapshot) -> None:
    assert compute_stats(snapshot.to_raw()) == compute_stats(snapshot)


@given(snapshot_a=snapshots, snapshot_b=snapshots)
def test_diff_accounts_for_count_change(
    snapshot_a: Snapshot, snapshot_b: Snapshot
) -> None:
    stats_a = compute_stats(snapshot_a)
    stats_b = compute_stats(snapshot_b)

    result = diff_snapshots(snapshot_a, snapshot_b)

    assert result.bookmarks.added - result.bookmarks.removed == (
        stats_b.leaf_count - stats_a.leaf_count
    )
    assert result.folders.added - result.folders.removed == (
        stats_b.container_count - stats_a.container_count
    )
    assert min(result.bookmarks.added, result.bookmarks.removed) == 0
    assert result.bookmarks.changed == result.folders.changed == 0


@given(raw=st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=5),
    lambda inner: st.lists(inner, max_size=4)
    | st.dictionaries(
        st.sampled_from(["id", "title", "url", "children", "dateAdded"]),
        inner,
        max_size=5,
    ),
    max_leaves=20,
))
def test_malformed_raw_data_never_raises(raw: object) -> None:
    stats = compute_stats(raw)

    assert stats.total_count >= 0


@settings(max_examples=20, deadline=None)
@given(
    depth=st.integers(min_value=1, max_value=4000),
    extra_leaves=st.integers(min_value=0, max_value=5),
)
def test_stats_finish_at_any_depth(depth: int, extra_leaves: int) -> None:
    raw = make_nested(depth)
    raw.extend({"id": f"x{i}", "url": f"https://x/{i}"} for i in range(extra_leaves))

    stats = compute_stats(raw)

    assert stats.container_count == depth
    assert stats.leaf_count == 1 + extra_leaves
    assert nesting_depth(Snapshot.from_raw(raw).to_raw()) == depth
