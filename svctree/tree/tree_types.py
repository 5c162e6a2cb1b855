#!/usr/bin/env python3
"""
Type definitions and data structures for the service group tree.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from svctree.tree.tree_constants import (
    ERROR_MESSAGES, GROUP_TYPE, INDENTATION_WIDTH, SERVICE_TYPE
)


class NodeKind(Enum):
    """Kind of tree node. Values match the persisted "type" field."""
    GROUP = GROUP_TYPE
    SERVICE = SERVICE_TYPE


@dataclass
class TreeNode:
    """A node of the persisted service group tree - either a group or a service."""
    id: str
    name: str
    kind: NodeKind
    monitor_id: Optional[str] = None           # Services only
    children: Optional[List["TreeNode"]] = None  # Groups only, display order
    collapsed: bool = False                    # UI state, groups only

    def __post_init__(self):
        """Validate node data after initialization."""
        if not self.id:
            raise ValueError(ERROR_MESSAGES["EMPTY_NODE_ID"])
        if not isinstance(self.kind, NodeKind):
            if isinstance(self.kind, str):
                self.kind = NodeKind(self.kind)
            else:
                raise ValueError(ERROR_MESSAGES["INVALID_NODE_TYPE"].format(node_type=self.kind))

    @property
    def is_group(self) -> bool:
        return self.kind == NodeKind.GROUP

    @property
    def is_service(self) -> bool:
        return self.kind == NodeKind.SERVICE


@dataclass
class FlattenedNode:
    """A tree node annotated with its position in the flat drag list."""
    id: str
    name: str
    kind: NodeKind
    parent_id: Optional[str]
    depth: int
    index: int
    monitor_id: Optional[str] = None
    collapsed: bool = False
    # Source children, kept for the view layer; the engine reads parent_id instead
    children: Optional[List[TreeNode]] = field(default=None, repr=False, compare=False)

    @property
    def is_group(self) -> bool:
        return self.kind == NodeKind.GROUP

    @property
    def is_service(self) -> bool:
        return self.kind == NodeKind.SERVICE


@dataclass(frozen=True)
class Projection:
    """Where a dragged node would land if dropped now."""
    parent_id: Optional[str]
    depth: int
    min_depth: int = 0
    max_depth: int = 0


@dataclass(frozen=True)
class DragConfig:
    """Configuration for drag projection."""
    indent_width: float = INDENTATION_WIDTH
    visible_only: bool = False  # Hide descendants of collapsed groups from dragging


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)
