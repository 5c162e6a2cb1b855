#!/usr/bin/env python3
"""
Flattening of the nested service group tree into the linear drag list.

The flat list is what the sortable view renders and what the projector
reasons about: a group precedes all of its descendants, which precede the
group's next sibling.
"""

from typing import Dict, List, Optional, Sequence, Set, TypeVar

from svctree.core.performance import performance_timer
from svctree.tree.tree_types import FlattenedNode, TreeNode

T = TypeVar("T")


@performance_timer("tree.flatten")
def flatten(tree: Sequence[TreeNode], visible_only: bool = False) -> List[FlattenedNode]:
    """
    Flatten a forest in pre-order.

    Args:
        tree: Root-level nodes
        visible_only: Skip the descendants of collapsed groups. By default the
            whole tree is flattened and collapse only affects rendering.

    Returns:
        Flat list annotated with parent id, depth and global index
    """
    result: List[FlattenedNode] = []

    def walk(nodes: Sequence[TreeNode], parent_id: Optional[str], depth: int) -> None:
        for node in nodes:
            result.append(FlattenedNode(
                id=node.id,
                name=node.name,
                kind=node.kind,
                parent_id=parent_id,
                depth=depth,
                index=len(result),
                monitor_id=node.monitor_id,
                collapsed=node.collapsed,
                children=node.children,
            ))
            if node.children and not (visible_only and node.collapsed):
                walk(node.children, node.id, depth + 1)

    walk(tree, None, 0)
    return result


def array_move(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Return a copy of items with the element at from_index moved to to_index."""
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved


def index_of(items: Sequence[FlattenedNode], node_id: Optional[str]) -> int:
    """Position of node_id in the flat list, or -1."""
    if node_id is None:
        return -1
    for i, item in enumerate(items):
        if item.id == node_id:
            return i
    return -1


def get_descendant_ids(items: Sequence[FlattenedNode], node_id: str) -> Set[str]:
    """All ids whose parent_id chain leads to node_id (node_id itself excluded)."""
    children_of: Dict[Optional[str], List[str]] = {}
    for item in items:
        children_of.setdefault(item.parent_id, []).append(item.id)

    descendants: Set[str] = set()
    stack = list(children_of.get(node_id, []))
    while stack:
        current = stack.pop()
        if current in descendants or current == node_id:
            continue
        descendants.add(current)
        stack.extend(children_of.get(current, []))
    return descendants


def sorted_ids(items: Sequence[FlattenedNode]) -> List[str]:
    """Ids in render order, as handed to the sortable context."""
    return [item.id for item in items]
