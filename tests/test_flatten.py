#!/usr/bin/env python3
"""Tests for flattening the service group tree."""

import pytest

from svctree.tree.flatten import array_move, flatten, get_descendant_ids, index_of, sorted_ids
from svctree.tree.tree_types import NodeKind, TreeNode


def group(node_id, *children, collapsed=False):
    return TreeNode(node_id, node_id.title(), NodeKind.GROUP, children=list(children), collapsed=collapsed)


def service(node_id):
    return TreeNode(node_id, node_id.title(), NodeKind.SERVICE, monitor_id=f"m-{node_id}")


def sample_tree():
    return [
        group("prod", service("api"), group("db", service("pg"), service("redis"))),
        group("staging", service("web"), collapsed=True),
        service("cdn"),
    ]


class TestFlatten:
    """Test pre-order flattening."""

    def test_order_parent_and_depth(self):
        """Test that groups precede their descendants and depth counts ancestors."""
        items = flatten(sample_tree())

        assert [(i.id, i.parent_id, i.depth) for i in items] == [
            ("prod", None, 0),
            ("api", "prod", 1),
            ("db", "prod", 1),
            ("pg", "db", 2),
            ("redis", "db", 2),
            ("staging", None, 0),
            ("web", "staging", 1),
            ("cdn", None, 0),
        ]

    def test_index_is_global_position(self):
        """Test that index numbers the whole flat sequence, not just siblings."""
        items = flatten(sample_tree())
        assert [i.index for i in items] == list(range(8))

    def test_collapsed_groups_are_flattened_by_default(self):
        """Test that collapse does not hide descendants from the drag engine."""
        ids = sorted_ids(flatten(sample_tree()))
        assert "web" in ids

    def test_visible_only_skips_collapsed_descendants(self):
        """Test the visible-only policy."""
        items = flatten(sample_tree(), visible_only=True)

        assert "web" not in sorted_ids(items)
        assert "staging" in sorted_ids(items)
        assert items[-1].id == "cdn"
        assert items[-1].index == 6

    def test_fields_are_copied(self):
        """Test that identity and display fields survive flattening."""
        items = flatten(sample_tree())
        pg = items[index_of(items, "pg")]
        staging = items[index_of(items, "staging")]

        assert pg.kind == NodeKind.SERVICE
        assert pg.monitor_id == "m-pg"
        assert pg.name == "Pg"
        assert staging.collapsed is True
        assert staging.is_group

    def test_empty_tree(self):
        """Test flattening an empty forest."""
        assert flatten([]) == []

    def test_input_not_modified(self):
        """Test that flattening leaves the tree untouched."""
        tree = sample_tree()
        before = sample_tree()
        flatten(tree)
        assert tree == before

    def test_depth_invariant(self):
        """Test depth == parent depth + 1 for every node."""
        items = flatten(sample_tree())
        by_id = {i.id: i for i in items}
        for item in items:
            expected = 0 if item.parent_id is None else by_id[item.parent_id].depth + 1
            assert item.depth == expected


class TestFlatHelpers:
    """Test helpers over flat lists."""

    def test_array_move_forward_and_back(self):
        """Test moving elements in both directions without mutating input."""
        data = ["a", "b", "c", "d"]
        assert array_move(data, 0, 2) == ["b", "c", "a", "d"]
        assert array_move(data, 3, 1) == ["a", "d", "b", "c"]
        assert array_move(data, 1, 1) == data
        assert data == ["a", "b", "c", "d"]

    def test_index_of_missing(self):
        """Test index_of for unknown and None ids."""
        items = flatten(sample_tree())
        assert index_of(items, "nope") == -1
        assert index_of(items, None) == -1

    def test_get_descendant_ids(self):
        """Test transitive descendant collection."""
        items = flatten(sample_tree())
        assert get_descendant_ids(items, "prod") == {"api", "db", "pg", "redis"}
        assert get_descendant_ids(items, "db") == {"pg", "redis"}
        assert get_descendant_ids(items, "cdn") == set()

    @pytest.mark.parametrize("node_id", ["prod", "staging", "cdn"])
    def test_node_is_not_its_own_descendant(self, node_id):
        """Test that a node never appears in its own descendant set."""
        items = flatten(sample_tree())
        assert node_id not in get_descendant_ids(items, node_id)
