from bmgit.tree import (
    Container,
    Leaf,
    Snapshot,
    compute_stats,
    node_to_raw,
    parse_node,
    parse_nodes,
)
from tests.factories import make_nested, nesting_depth

DEEP = 3000


class TestParseNode:
    def test_node_with_url_is_leaf(self) -> None:
        node = parse_node({"id": "5", "title": "Docs", "url": "https://docs.python.org"})

        assert node == Leaf(id="5", title="Docs", url="https://docs.python.org")

    def test_node_without_url_is_container(self) -> None:
        node = parse_node({"id": "1", "title": "Folder", "children": []})

        assert isinstance(node, Container)
        assert node.children == ()

    def test_empty_url_is_container(self) -> None:
        node = parse_node({"id": "1", "title": "Folder", "url": ""})

        assert isinstance(node, Container)

    def test_non_mapping_is_malformed(self) -> None:
        assert parse_node("not a node") is None
        assert parse_node(None) is None
        assert parse_node(42) is None

    def test_missing_title_defaults_to_empty(self) -> None:
        node = parse_node({"id": "1", "url": "https://a"})

        assert node is not None
        assert node.title == ""

    def test_reads_dates(self) -> None:
        node = parse_node(
            {"id": "1", "title": "F", "dateAdded": 10, "dateGroupModified": 20.0}
        )

        assert isinstance(node, Container)
        assert node.date_added == 10
        assert node.date_group_modified == 20

    def test_boolean_dates_are_ignored(self) -> None:
        node = parse_node({"id": "1", "title": "F", "dateAdded": True})

        assert node is not None
        assert node.date_added is None

    def test_children_not_a_list_yield_empty_container(self) -> None:
        node = parse_node({"id": "1", "title": "F", "children": "oops"})

        assert isinstance(node, Container)
        assert node.children == ()


class TestParseNodes:
    def test_drops_malformed_entries(self) -> None:
        nodes = parse_nodes([{"id": "1", "url": "https://a"}, "junk", None])

        assert len(nodes) == 1

    def test_non_list_yields_empty(self) -> None:
        assert parse_nodes({"id": "1"}) == ()
        assert parse_nodes(None) == ()


class TestNodeToRaw:
    def test_leaf(self) -> None:
        raw = node_to_raw(Leaf(id="1", title="A", url="https://a", date_added=5))

        assert raw == {"id": "1", "title": "A", "dateAdded": 5, "url": "https://a"}

    def test_container_includes_children(self) -> None:
        container = Container(
            id="1",
            title="F",
            children=(Leaf(id="2", title="A", url="https://a"),),
            date_group_modified=9,
        )

        raw = node_to_raw(container)

        assert raw == {
            "id": "1",
            "title": "F",
            "dateGroupModified": 9,
            "children": [{"id": "2", "title": "A", "url": "https://a"}],
        }


class TestSnapshot:
    def test_from_raw_non_list_is_empty(self) -> None:
        assert Snapshot.from_raw(None).nodes == ()
        assert Snapshot.from_raw({"roots": {}}).nodes == ()

    def test_to_raw_preserves_structure(self) -> None:
        raw = [
            {
                "id": "1",
                "title": "Bar",
                "children": [
                    {"id": "2", "title": "A", "url": "https://a"},
                    {"id": "3", "title": "Sub", "children": []},
                ],
            }
        ]

        assert Snapshot.from_raw(raw).to_raw() == raw

    def test_walk_is_depth_first_with_parent_and_index(self) -> None:
        snapshot = Snapshot.from_raw(
            [
                {
                    "id": "1",
                    "title": "Bar",
                    "children": [
                        {
                            "id": "2",
                            "title": "Sub",
                            "children": [{"id": "4", "url": "x"}],
                        },
                        {"id": "3", "url": "y"},
                    ],
                },
                {"id": "5", "url": "z"},
            ]
        )

        walked = [
            (node.id, parent.id if parent else None, index)
            for node, parent, index in snapshot.walk()
        ]

        assert walked == [
            ("1", None, 0),
            ("2", "1", 0),
            ("4", "2", 0),
            ("3", "1", 1),
            ("5", None, 1),
        ]

    def test_snapshots_compare_by_value(self) -> None:
        raw = [{"id": "1", "url": "https://a"}]

        assert Snapshot.from_raw(raw) == Snapshot.from_raw(raw)


class TestDeepTrees:
    def test_from_raw_handles_any_depth(self) -> None:
        snapshot = Snapshot.from_raw(make_nested(DEEP))

        assert sum(1 for _ in snapshot.walk()) == DEEP + 1

    def test_parse_node_handles_any_depth(self) -> None:
        node = parse_node(make_nested(DEEP)[0])

        depth = 0
        while isinstance(node, Container):
            depth += 1
            node = node.children[0]
        assert depth == DEEP
        assert isinstance(node, Leaf)

    def test_to_raw_handles_any_depth(self) -> None:
        raw = Snapshot.from_raw(make_nested(DEEP)).to_raw()

        assert nesting_depth(raw) == DEEP

    def test_compute_stats_counts_leaves_at_the_bottom(self) -> None:
        raw = make_nested(DEEP)
        bottom = raw[0]
        while bottom["children"][0].get("children") is not None:
            bottom = bottom["children"][0]
        bottom["children"].append({"id": "x", "url": "https://x"})

        stats = compute_stats(raw)

        assert stats.leaf_count == 2
        assert stats.container_count == DEEP
