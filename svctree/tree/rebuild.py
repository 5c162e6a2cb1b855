#!/usr/bin/env python3
"""
Reconstruction of the nested tree from an edited flat list.

After a drop the flat list is only locally consistent: the moved node carries
its projected parent and depth, every other node keeps the values computed on
the pre-drag tree. The hierarchy is derived from parent ids alone, so a moved
group takes its whole subtree along.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set

from svctree.core.logging_config import get_logger
from svctree.core.performance import performance_timer
from svctree.tree.flatten import array_move, index_of
from svctree.tree.tree_types import FlattenedNode, Projection, TreeNode

logger = get_logger(__name__)


def apply_drop(
    items: Sequence[FlattenedNode],
    active_id: str,
    over_id: str,
    projection: Projection,
) -> Optional[List[FlattenedNode]]:
    """
    Move the active node to the over node's position and stamp the projection on it.

    Returns:
        The reordered flat list, or None if either id is missing
    """
    active_index = index_of(items, active_id)
    over_index = index_of(items, over_id)
    if active_index == -1 or over_index == -1:
        logger.debug(f"Cannot apply drop: active={active_id} over={over_id}")
        return None

    moved = array_move(items, active_index, over_index)
    moved[over_index] = replace(
        moved[over_index],
        parent_id=projection.parent_id,
        depth=projection.depth,
    )
    return moved


def index_tree(tree: Sequence[TreeNode]) -> Dict[str, TreeNode]:
    """Map every node id in a nested tree to its node."""
    index: Dict[str, TreeNode] = {}
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        # First match wins, as with a depth-first search
        index.setdefault(node.id, node)
        if node.children:
            stack.extend(reversed(node.children))
    return index


@performance_timer("tree.rebuild")
def rebuild(flat: Sequence[FlattenedNode], previous_tree: Sequence[TreeNode],
            restore_hidden: bool = False) -> List[TreeNode]:
    """
    Build a nested tree from a flat list.

    Collapsed flags are restored from previous_tree. Nodes whose parent
    cannot be resolved are attached to the root instead of being dropped.

    Args:
        flat: Flat list, possibly reordered by apply_drop()
        previous_tree: Tree the flat list was built from
        restore_hidden: flat came from visible-only flattening. Children of
            groups collapsed in previous_tree that are absent from flat are
            carried over in their previous order. Otherwise the hierarchy
            comes from flat alone and absent nodes stay absent.
    """
    previous = index_tree(previous_tree)
    shells: Dict[str, TreeNode] = {}
    parent_of: Dict[str, Optional[str]] = {}

    # Pass 1: childless shells
    for item in flat:
        original = previous.get(item.id)
        shells[item.id] = TreeNode(
            id=item.id,
            name=item.name,
            kind=item.kind,
            monitor_id=item.monitor_id,
            collapsed=original.collapsed if original is not None else item.collapsed,
            children=[],
        )
        parent_of[item.id] = item.parent_id

    detached = _find_unrooted(parent_of, shells)

    # Pass 2: hierarchy in flat order
    roots: List[TreeNode] = []
    for item in flat:
        node = shells[item.id]
        if item.parent_id is None:
            roots.append(node)
        elif item.id in detached:
            logger.warning(f"Node {item.id} has unresolvable parent {item.parent_id}; moved to root")
            roots.append(node)
        else:
            shells[item.parent_id].children.append(node)

    if restore_hidden:
        _restore_hidden_children(shells, previous)
    return [_normalize(node) for node in roots]


def _find_unrooted(parent_of: Dict[str, Optional[str]], shells: Dict[str, TreeNode]) -> Set[str]:
    """Ids whose own parent link is broken or whose ancestry loops forever.

    Only the node closest to the break is reported, so its descendants stay
    attached to it.
    """
    detached: Set[str] = set()
    for node_id, parent_id in parent_of.items():
        if parent_id is None:
            continue
        parent = shells.get(parent_id)
        if parent is None or not parent.is_group:
            detached.add(node_id)

    # Cycles: walk each chain, cut the first node seen twice
    resolved: Set[str] = set()
    for start in parent_of:
        path: List[str] = []
        on_path: Set[str] = set()
        current: Optional[str] = start
        while current is not None and current not in resolved and current not in detached:
            if current in on_path:
                detached.add(current)
                break
            path.append(current)
            on_path.add(current)
            current = parent_of.get(current)
        resolved.update(path)
    return detached


def _restore_hidden_children(shells: Dict[str, TreeNode], previous: Dict[str, TreeNode]) -> None:
    for node_id, shell in shells.items():
        original = previous.get(node_id)
        if original is None or not original.collapsed or not original.children or not shell.is_group:
            continue
        for child in original.children:
            if child.id not in shells:
                shell.children.append(_copy_subtree(child))


def _copy_subtree(node: TreeNode) -> TreeNode:
    children = [_copy_subtree(child) for child in node.children] if node.children else None
    return replace(node, children=children)


def _normalize(node: TreeNode) -> TreeNode:
    """Replace empty child lists with None, recursively."""
    if node.children:
        node.children = [_normalize(child) for child in node.children]
    else:
        node.children = None
    return node
