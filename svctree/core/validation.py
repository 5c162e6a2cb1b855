#!/usr/bin/env python3
"""Structural validation of service group trees and flat drag lists."""

from typing import Dict, Optional, Sequence, Set

from svctree.core.logging_config import get_logger
from svctree.tree.tree_constants import (
    ERROR_MESSAGES, MAX_NODE_NAME_LENGTH, MIN_NODE_NAME_LENGTH
)
from svctree.tree.tree_types import FlattenedNode, TreeNode, ValidationResult

logger = get_logger(__name__)


def validate_node_name(name: str) -> str:
    """
    Validate and normalize a display name.

    Returns:
        The stripped name

    Raises:
        ValueError: If the name is blank or too long
    """
    stripped = name.strip() if name else ""
    if len(stripped) < MIN_NODE_NAME_LENGTH:
        raise ValueError(ERROR_MESSAGES["EMPTY_NODE_NAME"])
    if len(stripped) > MAX_NODE_NAME_LENGTH:
        raise ValueError(ERROR_MESSAGES["NODE_NAME_TOO_LONG"].format(max_length=MAX_NODE_NAME_LENGTH))
    return stripped


def validate_tree(tree: Sequence[TreeNode]) -> ValidationResult:
    """
    Check a nested tree against the model invariants.

    Errors: duplicate ids, services with children, groups with a monitor id,
    blank names. Warnings: services without a monitor id, collapsed services.
    """
    result = ValidationResult(is_valid=True)
    seen: Set[str] = set()

    stack = list(reversed(tree))
    while stack:
        node = stack.pop()

        if node.id in seen:
            result.add_error(ERROR_MESSAGES["DUPLICATE_ID"].format(node_id=node.id))
            # A repeated id may be a repeated subtree; do not walk it twice
            continue
        seen.add(node.id)

        if not node.name or not node.name.strip():
            result.add_error(f"{ERROR_MESSAGES['EMPTY_NODE_NAME']}: {node.id}")

        if node.is_service:
            if node.children:
                result.add_error(ERROR_MESSAGES["SERVICE_HAS_CHILDREN"].format(node_id=node.id))
            if not node.monitor_id:
                result.add_warning(ERROR_MESSAGES["SERVICE_WITHOUT_MONITOR"].format(node_id=node.id))
            if node.collapsed:
                result.add_warning(f"Service {node.id} is marked collapsed")
        elif node.monitor_id:
            result.add_error(ERROR_MESSAGES["GROUP_HAS_MONITOR"].format(node_id=node.id))

        if node.children:
            stack.extend(reversed(node.children))

    if not result.is_valid:
        logger.debug(f"Tree validation failed with {len(result.errors)} errors")
    return result


def validate_flattened(items: Sequence[FlattenedNode]) -> ValidationResult:
    """
    Check a flat list produced by flatten().

    Every node must appear after its parent, the parent must be a group,
    depth must be the parent's depth plus one (zero at the root) and index
    must match the position in the list.
    """
    result = ValidationResult(is_valid=True)
    seen: Dict[str, FlattenedNode] = {}

    for position, item in enumerate(items):
        if item.id in seen:
            result.add_error(ERROR_MESSAGES["DUPLICATE_ID"].format(node_id=item.id))
            continue

        if item.index != position:
            result.add_error(f"Node {item.id} has index {item.index} at position {position}")

        expected_depth: Optional[int]
        if item.parent_id is None:
            expected_depth = 0
        else:
            parent = seen.get(item.parent_id)
            if parent is None:
                result.add_error(f"Parent {item.parent_id} of {item.id} does not precede it")
                expected_depth = None
            else:
                if not parent.is_group:
                    result.add_error(ERROR_MESSAGES["PARENT_NOT_GROUP"] + f": {item.id}")
                expected_depth = parent.depth + 1

        if expected_depth is not None and item.depth != expected_depth:
            result.add_error(f"Node {item.id} has depth {item.depth}, expected {expected_depth}")

        seen[item.id] = item

    return result
