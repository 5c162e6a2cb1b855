#!/usr/bin/env python3
"""
Drag session coordination for the service group tree.

Pointer events are reduced into a DragState by a pure function:

    Idle -> DragStart -> (DragMove | DragOver)* -> DragEnd -> Idle
                                              \\-> DragCancel -> Idle

Only DragEnd commits, and it replaces the tree with a new value. DragSession
wraps the reducer for a view layer that wants a stateful object and a change
callback.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from svctree.core.logging_config import get_logger
from svctree.tree.flatten import flatten, index_of, sorted_ids
from svctree.tree.projection import project, resolve_over_id
from svctree.tree.rebuild import apply_drop, rebuild
from svctree.tree.tree_constants import ERROR_MESSAGES
from svctree.tree import tree_operations
from svctree.tree.tree_exceptions import DragStateError
from svctree.tree.tree_types import DragConfig, FlattenedNode, Projection, TreeNode

logger = get_logger(__name__)


class DragPhase(Enum):
    """Phase of the drag state machine."""
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragStart:
    active_id: str


@dataclass(frozen=True)
class DragMove:
    """Horizontal pointer movement since the previous DragMove, in pixels."""
    delta_x: float


@dataclass(frozen=True)
class DragOver:
    over_id: Optional[str]


@dataclass(frozen=True)
class DragEnd:
    over_id: Optional[str]


@dataclass(frozen=True)
class DragCancel:
    pass


DragEvent = Union[DragStart, DragMove, DragOver, DragEnd, DragCancel]


@dataclass(frozen=True)
class DragState:
    """Tree plus the in-flight drag, if any."""
    tree: List[TreeNode] = field(default_factory=list)
    active_id: Optional[str] = None
    over_id: Optional[str] = None
    offset_left: float = 0.0

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self.active_id is None else DragPhase.DRAGGING


def commit_drop(
    tree: Sequence[TreeNode],
    active_id: str,
    over_id: Optional[str],
    offset_left: float,
    config: DragConfig = DragConfig(),
) -> Optional[List[TreeNode]]:
    """
    Apply a drop to the tree.

    Returns:
        The rebuilt tree, or None when nothing should change (no target,
        unknown ids, or a drop back onto the node's current place)
    """
    if over_id is None:
        return None

    items = flatten(tree, visible_only=config.visible_only)
    projection = project(items, active_id, over_id, offset_left, config.indent_width)
    if projection is None:
        return None

    # Hovering inside the dragged subtree means hovering the node's own slot
    over_id = resolve_over_id(items, active_id, over_id)
    if active_id == over_id:
        active_item = items[index_of(items, active_id)]
        if (projection.parent_id, projection.depth) == (active_item.parent_id, active_item.depth):
            return None

    moved = apply_drop(items, active_id, over_id, projection)
    if moved is None:
        return None

    logger.debug(f"Dropped {active_id} under {projection.parent_id} at depth {projection.depth}")
    return rebuild(moved, tree, restore_hidden=config.visible_only)


def preview(state: DragState, config: DragConfig = DragConfig()) -> Optional[Projection]:
    """Live projection for the current drag frame."""
    if state.active_id is None or state.over_id is None:
        return None
    items = flatten(state.tree, visible_only=config.visible_only)
    return project(items, state.active_id, state.over_id, state.offset_left, config.indent_width)


def reduce_drag(state: DragState, event: DragEvent, config: DragConfig = DragConfig()) -> DragState:
    """
    Advance the drag state machine by one event.

    Raises:
        DragStateError: On DragStart while another drag is in progress
    """
    if isinstance(event, DragStart):
        if state.active_id is not None:
            raise DragStateError(
                ERROR_MESSAGES["DRAG_ALREADY_ACTIVE"].format(active_id=state.active_id),
                state.active_id,
            )
        items = flatten(state.tree, visible_only=config.visible_only)
        if index_of(items, event.active_id) == -1:
            logger.debug(f"Ignoring drag start of unknown node {event.active_id}")
            return state
        return replace(state, active_id=event.active_id, over_id=event.active_id, offset_left=0.0)

    if isinstance(event, DragCancel):
        return DragState(tree=state.tree)

    if state.active_id is None:
        # Stray pointer events outside a drag
        return state

    if isinstance(event, DragMove):
        return replace(state, offset_left=state.offset_left + event.delta_x)

    if isinstance(event, DragOver):
        return replace(state, over_id=event.over_id)

    if isinstance(event, DragEnd):
        new_tree = commit_drop(state.tree, state.active_id, event.over_id, state.offset_left, config)
        return DragState(tree=new_tree if new_tree is not None else state.tree)

    raise TypeError(f"Unknown drag event: {event!r}")


class DragSession:
    """Stateful drag-and-drop controller for one tree view."""

    def __init__(self, tree: Sequence[TreeNode],
                 on_change: Optional[Callable[[List[TreeNode]], None]] = None,
                 config: Optional[DragConfig] = None,
                 disabled: bool = False):
        self.config = config or DragConfig()
        self.on_change = on_change
        self.disabled = disabled
        self._state = DragState(tree=list(tree))
        self._flat_source: Optional[List[TreeNode]] = None
        self._flat_items: List[FlattenedNode] = []

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def tree(self) -> List[TreeNode]:
        return self._state.tree

    @property
    def active_id(self) -> Optional[str]:
        return self._state.active_id

    @property
    def is_dragging(self) -> bool:
        return self._state.phase == DragPhase.DRAGGING

    @property
    def flattened_items(self) -> List[FlattenedNode]:
        """Flat render list for the current tree, recomputed when the tree changes."""
        if self._flat_source is not self._state.tree:
            self._flat_items = flatten(self._state.tree, visible_only=self.config.visible_only)
            self._flat_source = self._state.tree
        return self._flat_items

    @property
    def sorted_ids(self) -> List[str]:
        return sorted_ids(self.flattened_items)

    @property
    def active_item(self) -> Optional[FlattenedNode]:
        if self._state.active_id is None:
            return None
        items = self.flattened_items
        position = index_of(items, self._state.active_id)
        return items[position] if position != -1 else None

    @property
    def projected(self) -> Optional[Projection]:
        if self._state.active_id is None or self._state.over_id is None:
            return None
        return project(self.flattened_items, self._state.active_id, self._state.over_id,
                       self._state.offset_left, self.config.indent_width)

    def get_item_depth(self, node_id: str) -> int:
        """Depth to render a row at, using the live projection for the dragged row."""
        if node_id == self._state.active_id:
            projected = self.projected
            if projected is not None:
                return projected.depth
        items = self.flattened_items
        position = index_of(items, node_id)
        return items[position].depth if position != -1 else 0

    # ------------------------------------------------------------------ #
    # Pointer events
    # ------------------------------------------------------------------ #

    def dispatch(self, event: DragEvent) -> DragState:
        if self.disabled and isinstance(event, DragStart):
            return self._state
        previous_tree = self._state.tree
        self._state = reduce_drag(self._state, event, self.config)
        if self._state.tree is not previous_tree:
            self._notify()
        return self._state

    def handle_drag_start(self, active_id: str) -> None:
        self.dispatch(DragStart(active_id))

    def handle_drag_move(self, delta_x: float) -> None:
        self.dispatch(DragMove(delta_x))

    def handle_drag_over(self, over_id: Optional[str]) -> None:
        self.dispatch(DragOver(over_id))

    def handle_drag_end(self, over_id: Optional[str]) -> bool:
        """Finish the drag. Returns True if the tree changed."""
        previous_tree = self._state.tree
        self.dispatch(DragEnd(over_id))
        return self._state.tree is not previous_tree

    def handle_drag_cancel(self) -> None:
        self.dispatch(DragCancel())

    # ------------------------------------------------------------------ #
    # Direct edits
    # ------------------------------------------------------------------ #

    def replace_tree(self, tree: Sequence[TreeNode]) -> None:
        """Adopt a tree from the external store without notifying."""
        self._require_idle("replace_tree")
        self._state = DragState(tree=list(tree))

    def toggle_collapse(self, node_id: str) -> None:
        self._apply("toggle_collapse", lambda tree: tree_operations.toggle_collapse(tree, node_id))

    def rename(self, node_id: str, new_name: str) -> None:
        self._apply("rename", lambda tree: tree_operations.rename(tree, node_id, new_name))

    def delete(self, node_id: str) -> None:
        self._apply("delete", lambda tree: tree_operations.delete_subtree(tree, node_id))

    def insert_subgroup(self, parent_id: Optional[str], new_group: TreeNode) -> None:
        self._apply("insert_subgroup", lambda tree: tree_operations.insert_subgroup(tree, parent_id, new_group))

    def _apply(self, operation: str, mutate: Callable[[List[TreeNode]], List[TreeNode]]) -> None:
        self._require_idle(operation)
        self._state = DragState(tree=mutate(self.tree))
        self._notify()

    def _require_idle(self, operation: str) -> None:
        if self.is_dragging:
            raise DragStateError(
                f"Cannot {operation} while {self._state.active_id} is being dragged",
                self._state.active_id,
            )

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._state.tree)
