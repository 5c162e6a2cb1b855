#!/usr/bin/env python3
"""
Conversion between TreeNode trees and the persisted service group dicts.

The dict shape is the JSON the dashboard backend stores: camelCase
``monitorId``, a ``type`` of "group" or "service", optional ``children``.
"""

from typing import Any, Dict, List, Mapping, Sequence

from svctree.core.logging_config import get_logger
from svctree.core.type_definitions import ProjectionDict, ServiceGroupDict
from svctree.core.validation import validate_tree
from svctree.tree.tree_constants import ERROR_MESSAGES
from svctree.tree.tree_exceptions import TreeValidationError
from svctree.tree.tree_types import NodeKind, Projection, TreeNode

logger = get_logger(__name__)


def node_from_dict(data: Mapping[str, Any]) -> TreeNode:
    """Decode one persisted node and its subtree."""
    try:
        kind = NodeKind(data["type"])
    except ValueError:
        raise TreeValidationError(
            ERROR_MESSAGES["INVALID_NODE_TYPE"].format(node_type=data["type"]),
            "decode", data.get("id"),
        )
    except KeyError as e:
        raise TreeValidationError(f"Missing field {e.args[0]!r}", "decode", data.get("id"))

    children_data = data.get("children")
    children = [node_from_dict(child) for child in children_data] if children_data is not None else None

    try:
        return TreeNode(
            id=data["id"],
            name=data.get("name", ""),
            kind=kind,
            monitor_id=data.get("monitorId"),
            children=children,
            collapsed=bool(data.get("collapsed", False)),
        )
    except (KeyError, ValueError) as e:
        raise TreeValidationError(str(e), "decode", data.get("id"))


def tree_from_dicts(data: Sequence[Mapping[str, Any]], strict: bool = True) -> List[TreeNode]:
    """
    Decode a persisted forest.

    Args:
        data: List of service group dicts
        strict: Validate the decoded tree and raise on structural errors

    Raises:
        TreeValidationError: On malformed nodes, or invalid structure when strict
    """
    tree = [node_from_dict(item) for item in data]
    if strict:
        result = validate_tree(tree)
        if not result.is_valid:
            raise TreeValidationError(
                f"Service group tree is invalid ({len(result.errors)} errors)",
                "decode",
                validation_failures=result.errors,
            )
        for warning in result.warnings:
            logger.warning(warning)
    return tree


def node_to_dict(node: TreeNode) -> ServiceGroupDict:
    """Encode one node and its subtree."""
    data: Dict[str, Any] = {
        "id": node.id,
        "name": node.name,
        "type": node.kind.value,
    }
    if node.monitor_id is not None:
        data["monitorId"] = node.monitor_id
    if node.is_group:
        data["collapsed"] = node.collapsed
    if node.children:
        data["children"] = [node_to_dict(child) for child in node.children]
    return data  # type: ignore[return-value]


def tree_to_dicts(tree: Sequence[TreeNode]) -> List[ServiceGroupDict]:
    """Encode a forest for persistence."""
    return [node_to_dict(node) for node in tree]


def projection_to_dict(projection: Projection) -> ProjectionDict:
    """Encode a live projection for the view layer."""
    return {
        "parentId": projection.parent_id,
        "depth": projection.depth,
        "minDepth": projection.min_depth,
        "maxDepth": projection.max_depth,
    }
