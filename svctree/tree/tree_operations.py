#!/usr/bin/env python3
"""
Pure operations on the nested service group tree.

Every mutator returns a brand-new tree; the input is never modified and no
node object is shared between the input and the result.
"""

# Standard library imports
import uuid
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

# Local imports
from svctree.core.logging_config import get_logger
from svctree.core.validation import validate_node_name
from svctree.tree.tree_constants import DEFAULT_GROUP_NAME
from svctree.tree.tree_exceptions import NodeExistsError, NodeNotFoundError, NodeTypeError
from svctree.tree.tree_types import NodeKind, TreeNode

logger = get_logger(__name__)

NodeTransform = Callable[[TreeNode], TreeNode]


def _map_tree(tree: Sequence[TreeNode], transform: NodeTransform) -> List[TreeNode]:
    """Copy the whole tree, applying transform to every copied node."""
    result = []
    for node in tree:
        children = _map_tree(node.children, transform) if node.children is not None else None
        result.append(transform(replace(node, children=children)))
    return result


def copy_tree(tree: Sequence[TreeNode]) -> List[TreeNode]:
    """Deep copy of a tree."""
    return _map_tree(tree, lambda node: node)


def find_deep(tree: Sequence[TreeNode], node_id: str) -> Optional[TreeNode]:
    """Depth-first search for the first node with node_id."""
    for node in tree:
        if node.id == node_id:
            return node
        if node.children:
            found = find_deep(node.children, node_id)
            if found is not None:
                return found
    return None


def find_parent(tree: Sequence[TreeNode], node_id: str,
                parent: Optional[TreeNode] = None) -> Optional[TreeNode]:
    """Enclosing group of node_id, or None for root nodes and unknown ids."""
    for node in tree:
        if node.id == node_id:
            return parent
        if node.children:
            found = find_parent(node.children, node_id, node)
            if found is not None:
                return found
    return None


def count_descendants(node: TreeNode) -> int:
    """Number of groups and services nested anywhere below node."""
    if not node.children:
        return 0
    return sum(1 + count_descendants(child) for child in node.children)


def get_service_monitor_ids(tree: Sequence[TreeNode]) -> List[str]:
    """Monitor ids referenced by the tree's services, in display order."""
    ids = []
    for node in tree:
        if node.is_service and node.monitor_id:
            ids.append(node.monitor_id)
        if node.children:
            ids.extend(get_service_monitor_ids(node.children))
    return ids


def set_collapsed(tree: Sequence[TreeNode], node_id: str, collapsed: bool) -> List[TreeNode]:
    """Set the collapsed flag of a group."""
    def transform(node: TreeNode) -> TreeNode:
        if node.id == node_id and node.is_group:
            node.collapsed = collapsed
        return node
    return _map_tree(tree, transform)


def toggle_collapse(tree: Sequence[TreeNode], node_id: str) -> List[TreeNode]:
    """Flip the collapsed flag of a group. Services and unknown ids are left as is."""
    def transform(node: TreeNode) -> TreeNode:
        if node.id == node_id and node.is_group:
            node.collapsed = not node.collapsed
        return node
    return _map_tree(tree, transform)


def rename(tree: Sequence[TreeNode], node_id: str, new_name: str) -> List[TreeNode]:
    """Replace the name of a node."""
    new_name = validate_node_name(new_name)

    def transform(node: TreeNode) -> TreeNode:
        if node.id == node_id:
            node.name = new_name
        return node
    return _map_tree(tree, transform)


def delete_subtree(tree: Sequence[TreeNode], node_id: str) -> List[TreeNode]:
    """Remove a node together with everything nested below it."""
    result = []
    for node in tree:
        if node.id == node_id:
            logger.debug(f"Deleting {node_id} and {count_descendants(node)} descendants")
            continue
        children = delete_subtree(node.children, node_id) if node.children is not None else None
        result.append(replace(node, children=children))
    return result


def add_item_to_parent(tree: Sequence[TreeNode], parent_id: Optional[str],
                       item: TreeNode, index: Optional[int] = None) -> List[TreeNode]:
    """
    Insert item among the children of parent_id (the root when None).

    Args:
        tree: Current tree
        parent_id: Target group, or None for the root level
        item: Node to insert; copied into the result
        index: Sibling position, appended when None

    Raises:
        NodeExistsError: If item's id is already in the tree
        NodeNotFoundError: If parent_id does not exist
        NodeTypeError: If parent_id is a service
    """
    if find_deep(tree, item.id) is not None:
        raise NodeExistsError(item.id, "add_item")

    if parent_id is not None:
        parent = find_deep(tree, parent_id)
        if parent is None:
            raise NodeNotFoundError(parent_id, "add_item")
        if not parent.is_group:
            raise NodeTypeError(parent_id, NodeKind.GROUP.value, parent.kind.value, "add_item")

    inserted = copy_tree([item])[0]

    def place(siblings: List[TreeNode]) -> List[TreeNode]:
        position = len(siblings) if index is None else index
        siblings.insert(position, inserted)
        return siblings

    if parent_id is None:
        return place(copy_tree(tree))

    def transform(node: TreeNode) -> TreeNode:
        if node.id == parent_id:
            node.children = place(list(node.children or []))
        return node
    return _map_tree(tree, transform)


def insert_subgroup(tree: Sequence[TreeNode], parent_id: Optional[str],
                    new_group: TreeNode) -> List[TreeNode]:
    """Append a new group under parent_id and expand the parent so it shows."""
    if not new_group.is_group:
        raise NodeTypeError(new_group.id, NodeKind.GROUP.value, new_group.kind.value, "insert_subgroup")

    result = add_item_to_parent(tree, parent_id, new_group)
    if parent_id is None:
        return result
    return set_collapsed(result, parent_id, False)


def create_group(name: str = DEFAULT_GROUP_NAME, group_id: Optional[str] = None) -> TreeNode:
    """Create a new, empty, expanded group."""
    return TreeNode(
        id=group_id or str(uuid.uuid4()),
        name=validate_node_name(name),
        kind=NodeKind.GROUP,
        collapsed=False,
    )


def create_service(name: str, monitor_id: str, service_id: Optional[str] = None) -> TreeNode:
    """Create a service leaf referencing a monitor."""
    return TreeNode(
        id=service_id or str(uuid.uuid4()),
        name=validate_node_name(name),
        kind=NodeKind.SERVICE,
        monitor_id=monitor_id,
    )
