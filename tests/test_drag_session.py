#!/usr/bin/env python3
"""Tests for the drag session state machine."""

from unittest.mock import Mock

import pytest

from svctree.tree.drag_session import (
    DragCancel, DragEnd, DragMove, DragOver, DragPhase, DragSession, DragStart, DragState,
    commit_drop, preview, reduce_drag,
)
from svctree.tree.flatten import flatten
from svctree.tree.tree_constants import STATUS_PAGE_INDENTATION_WIDTH
from svctree.tree.tree_exceptions import DragStateError
from svctree.tree.tree_types import DragConfig, NodeKind, Projection, TreeNode

CONFIG = DragConfig(indent_width=24)


def group(node_id, *children, collapsed=False):
    return TreeNode(node_id, node_id.title(), NodeKind.GROUP, children=list(children), collapsed=collapsed)


def service(node_id):
    return TreeNode(node_id, node_id.title(), NodeKind.SERVICE, monitor_id=f"m-{node_id}")


def abc_tree():
    return [group("a", service("b")), group("c")]


def run(state, *events, config=CONFIG):
    for event in events:
        state = reduce_drag(state, event, config)
    return state


class TestReducer:
    """Test reduce_drag()."""

    def test_start_records_active_and_resets_offset(self):
        """Test DragStart enters the dragging phase hovering itself."""
        state = run(DragState(tree=abc_tree(), offset_left=99), DragStart("b"))

        assert state.phase == DragPhase.DRAGGING
        assert state.active_id == "b"
        assert state.over_id == "b"
        assert state.offset_left == 0.0

    def test_moves_accumulate(self):
        """Test that DragMove deltas add up."""
        state = run(DragState(tree=abc_tree()), DragStart("b"), DragMove(10), DragMove(14), DragMove(-4))
        assert state.offset_left == 20

    def test_events_ignored_while_idle(self):
        """Test stray move/over/end events outside a drag."""
        initial = DragState(tree=abc_tree())
        state = run(initial, DragMove(50), DragOver("c"), DragEnd("c"))
        assert state == initial
        assert state.phase == DragPhase.IDLE

    def test_second_start_rejected(self):
        """Test only one drag can be active."""
        state = run(DragState(tree=abc_tree()), DragStart("b"))
        with pytest.raises(DragStateError):
            reduce_drag(state, DragStart("c"), CONFIG)

    def test_start_unknown_node_stays_idle(self):
        """Test DragStart of an id not in the tree."""
        state = run(DragState(tree=abc_tree()), DragStart("ghost"))
        assert state.phase == DragPhase.IDLE

    def test_full_gesture_commits(self):
        """Test dragging B onto C with a rightward offset."""
        tree = abc_tree()
        state = run(DragState(tree=tree), DragStart("b"), DragMove(24), DragOver("c"))

        assert preview(state, CONFIG) == Projection(parent_id="c", depth=1, min_depth=0, max_depth=1)

        state = run(state, DragEnd("c"))

        assert state.phase == DragPhase.IDLE
        assert [n.id for n in state.tree] == ["a", "c"]
        assert state.tree[0].children is None
        assert [n.id for n in state.tree[1].children] == ["b"]
        assert [n.id for n in tree[0].children] == ["b"]

    def test_group_picked_up_and_released_stays_put(self):
        """Test a zero-offset gesture on a group with children."""
        tree = [group("a", service("a1")), group("g", service("g1"))]
        state = run(DragState(tree=tree), DragStart("g"), DragEnd("g"))

        assert state.phase == DragPhase.IDLE
        assert state.tree is tree

    def test_group_released_over_own_child_stays_put(self):
        """Test hovering the group's first child without horizontal travel."""
        tree = [group("a", service("a1")), group("g", service("g1"))]
        state = run(DragState(tree=tree), DragStart("g"), DragOver("g1"), DragEnd("g1"))

        assert state.tree is tree

    def test_cancel_discards_everything(self):
        """Test DragCancel from the middle of a gesture."""
        tree = abc_tree()
        state = run(DragState(tree=tree), DragStart("b"), DragMove(24), DragOver("c"), DragCancel())

        assert state == DragState(tree=tree)
        assert state.tree is tree

    def test_end_without_target(self):
        """Test DragEnd outside any droppable."""
        tree = abc_tree()
        state = run(DragState(tree=tree), DragStart("b"), DragOver(None), DragEnd(None))

        assert state.phase == DragPhase.IDLE
        assert state.tree is tree

    def test_preview_none_while_not_hovering(self):
        """Test that no preview exists without a hovered node."""
        state = run(DragState(tree=abc_tree()), DragStart("b"), DragOver(None))
        assert preview(state, CONFIG) is None
        assert preview(DragState(tree=abc_tree()), CONFIG) is None

    def test_preview_is_repeatable(self):
        """Test that recomputing a frame gives the same answer."""
        state = run(DragState(tree=abc_tree()), DragStart("b"), DragMove(24), DragOver("c"))
        assert preview(state, CONFIG) == preview(state, CONFIG)


class TestCommitDrop:
    """Test commit_drop()."""

    def test_drop_in_place_is_noop(self):
        """Test dropping a node back onto its own slot."""
        assert commit_drop(abc_tree(), "b", "b", 0, CONFIG) is None

    def test_indent_in_place_commits(self):
        """Test that a horizontal-only drag onto itself can re-parent."""
        tree = [group("g"), service("s")]
        result = commit_drop(tree, "s", "s", 24, CONFIG)

        assert [n.id for n in result] == ["g"]
        assert [c.id for c in result[0].children] == ["s"]

    def test_indent_width_sets_sensitivity(self):
        """Test the narrower status page indentation needs less travel."""
        tree = [group("g"), service("s")]
        status_page = DragConfig(indent_width=STATUS_PAGE_INDENTATION_WIDTH)

        assert commit_drop(tree, "s", "s", 10, status_page) is not None
        assert commit_drop(tree, "s", "s", 10, CONFIG) is None

    def test_unknown_ids(self):
        """Test drops referencing unknown nodes."""
        assert commit_drop(abc_tree(), "ghost", "c", 0, CONFIG) is None
        assert commit_drop(abc_tree(), "b", None, 0, CONFIG) is None

    def test_visible_only_drop_keeps_hidden_children(self):
        """Test moving a collapsed group does not lose its hidden subtree."""
        tree = [group("x", service("x1"), collapsed=True), group("y")]
        config = DragConfig(indent_width=24, visible_only=True)

        result = commit_drop(tree, "x", "y", 24, config)

        assert [n.id for n in result] == ["y"]
        moved = result[0].children[0]
        assert moved.id == "x"
        assert moved.collapsed is True
        assert [c.id for c in moved.children] == ["x1"]


class TestDragSession:
    """Test the stateful DragSession wrapper."""

    def test_commit_notifies_once(self):
        """Test on_change receives the rebuilt tree."""
        on_change = Mock()
        session = DragSession(abc_tree(), on_change=on_change, config=CONFIG)

        session.handle_drag_start("b")
        session.handle_drag_move(24)
        session.handle_drag_over("c")
        assert session.is_dragging
        assert session.active_item.id == "b"
        assert session.get_item_depth("b") == 1
        assert session.get_item_depth("c") == 0
        changed = session.handle_drag_end("c")

        assert changed is True
        on_change.assert_called_once()
        new_tree = on_change.call_args[0][0]
        assert [n.id for n in new_tree[1].children] == ["b"]
        assert session.tree is new_tree
        assert not session.is_dragging

    def test_cancel_does_not_notify(self):
        """Test cancellation leaves the tree and skips the callback."""
        on_change = Mock()
        tree = abc_tree()
        session = DragSession(tree, on_change=on_change, config=CONFIG)

        session.handle_drag_start("b")
        session.handle_drag_over("c")
        session.handle_drag_cancel()

        on_change.assert_not_called()
        assert session.tree == tree
        assert session.projected is None

    def test_disabled_session_ignores_drags(self):
        """Test the disabled flag."""
        session = DragSession(abc_tree(), config=CONFIG, disabled=True)
        session.handle_drag_start("b")
        assert not session.is_dragging
        assert session.active_item is None

    def test_flattened_items_follow_tree(self):
        """Test the render list is refreshed after a commit."""
        session = DragSession(abc_tree(), config=CONFIG)
        assert session.sorted_ids == ["a", "b", "c"]

        session.handle_drag_start("b")
        session.handle_drag_over("c")
        session.handle_drag_end("c")

        assert session.sorted_ids == ["a", "c", "b"]
        assert [i.depth for i in session.flattened_items] == [0, 0, 1]

    def test_direct_edits_notify(self):
        """Test mutator passthroughs replace the tree and notify."""
        on_change = Mock()
        session = DragSession(abc_tree(), on_change=on_change, config=CONFIG)

        session.toggle_collapse("a")
        session.rename("c", "Cache")
        session.insert_subgroup("c", group("inner"))
        session.delete("b")

        assert on_change.call_count == 4
        assert [n.name for n in session.tree] == ["A", "Cache"]
        assert session.tree[0].collapsed is True
        assert session.tree[0].children is None or session.tree[0].children == []
        assert [c.id for c in session.tree[1].children] == ["inner"]

    def test_edits_rejected_while_dragging(self):
        """Test that the tree cannot be edited mid-drag."""
        session = DragSession(abc_tree(), config=CONFIG)
        session.handle_drag_start("b")
        with pytest.raises(DragStateError):
            session.rename("c", "Cache")
        with pytest.raises(DragStateError):
            session.replace_tree([])

    def test_replace_tree(self):
        """Test adopting an external tree."""
        session = DragSession(abc_tree(), config=CONFIG)
        session.replace_tree([service("solo")])
        assert [i.id for i in flatten(session.tree)] == ["solo"]
        assert session.sorted_ids == ["solo"]
