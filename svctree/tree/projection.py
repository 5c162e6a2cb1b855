#!/usr/bin/env python3
"""
Live drop projection for the sortable service group tree.

Called on every pointer move while dragging. Computes the parent and depth
the active node would get if dropped over the hovered node, without touching
the flat list it is given.
"""

import math
from typing import Optional, Sequence, Set

from svctree.core.logging_config import get_logger
from svctree.core.performance import performance_timer
from svctree.tree.flatten import array_move, get_descendant_ids, index_of
from svctree.tree.tree_constants import ERROR_MESSAGES
from svctree.tree.tree_types import FlattenedNode, Projection

logger = get_logger(__name__)


def drag_depth_delta(horizontal_offset: float, indent_width: float) -> int:
    """Nesting levels implied by a horizontal pointer offset.

    Halves round towards positive infinity, like the browser's Math.round.
    """
    return math.floor(horizontal_offset / indent_width + 0.5)


def get_max_depth(previous_item: Optional[FlattenedNode]) -> int:
    """Deepest level a node may take right after previous_item."""
    if previous_item is None:
        return 0
    if previous_item.is_group:
        return previous_item.depth + 1
    # Services are leaves: only a sibling position is possible
    return previous_item.depth


def get_min_depth(next_item: Optional[FlattenedNode]) -> int:
    """Shallowest level a node may take right before next_item."""
    return next_item.depth if next_item is not None else 0


def _find_parent_id(items: Sequence[FlattenedNode], position: int, depth: int) -> Optional[str]:
    """Nearest node before position sitting exactly one level above depth."""
    if depth == 0:
        return None
    for i in range(position - 1, -1, -1):
        item = items[i]
        if item.depth == depth - 1:
            return item.id
        if item.depth < depth - 1:
            break
    return None


def resolve_over_id(
    items: Sequence[FlattenedNode],
    active_id: str,
    over_id: Optional[str],
    descendants: Optional[Set[str]] = None,
) -> Optional[str]:
    """Hovered id, with rows inside the dragged subtree mapped to the active node."""
    if descendants is None:
        descendants = get_descendant_ids(items, active_id)
    return active_id if over_id in descendants else over_id


@performance_timer("tree.project")
def project(
    items: Sequence[FlattenedNode],
    active_id: str,
    over_id: Optional[str],
    horizontal_offset: float,
    indent_width: float,
) -> Optional[Projection]:
    """
    Project where the active node would land.

    Args:
        items: Flat list from flatten(); not modified
        active_id: Node being dragged
        over_id: Node currently hovered
        horizontal_offset: Pointer travel in pixels since the drag started
        indent_width: Pixels per nesting level

    Returns:
        The projected parent and depth, or None when either id is not in
        items (the caller keeps its previous preview)
    """
    if indent_width <= 0:
        raise ValueError(ERROR_MESSAGES["INVALID_INDENT_WIDTH"].format(indent_width=indent_width))

    if index_of(items, active_id) == -1 or index_of(items, over_id) == -1:
        logger.debug(f"Skipping projection frame: active={active_id} over={over_id}")
        return None

    # The dragged subtree travels with the active node, so its rows are not neighbours
    descendants = get_descendant_ids(items, active_id)
    over_id = resolve_over_id(items, active_id, over_id, descendants)
    remaining = [item for item in items if item.id not in descendants]
    active_index = index_of(remaining, active_id)
    over_index = index_of(remaining, over_id)

    active_item = remaining[active_index]
    moved = array_move(remaining, active_index, over_index)
    previous_item = moved[over_index - 1] if over_index > 0 else None
    next_item = moved[over_index + 1] if over_index + 1 < len(moved) else None

    max_depth = get_max_depth(previous_item)
    min_depth = get_min_depth(next_item)
    projected_depth = active_item.depth + drag_depth_delta(horizontal_offset, indent_width)
    depth = min(max(projected_depth, min_depth), max_depth)

    parent_id = _find_parent_id(moved, over_index, depth)

    if _is_invalid_parent(items, active_item, parent_id, depth):
        logger.debug(
            f"Rejected drop of {active_id} under {parent_id}; "
            f"keeping parent {active_item.parent_id}"
        )
        return Projection(
            parent_id=active_item.parent_id,
            depth=active_item.depth,
            min_depth=min_depth,
            max_depth=max_depth,
        )

    return Projection(parent_id=parent_id, depth=depth, min_depth=min_depth, max_depth=max_depth)


def _is_invalid_parent(
    items: Sequence[FlattenedNode],
    active_item: FlattenedNode,
    parent_id: Optional[str],
    depth: int,
) -> bool:
    if parent_id is None:
        # A nested depth with nothing to nest under
        return depth > 0
    if parent_id == active_item.id:
        return True
    parent_index = index_of(items, parent_id)
    if parent_index == -1 or not items[parent_index].is_group:
        return True
    return parent_id in get_descendant_ids(items, active_item.id)
