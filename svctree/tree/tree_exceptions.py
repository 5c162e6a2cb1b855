#!/usr/bin/env python3
"""
Custom exception classes for the service group tree engine.

Drag-time corrections (skipped frames, clamped depths, rejected self-nesting)
never raise. These exceptions cover API misuse and invalid persisted input.
"""

# Standard library imports
from typing import Optional, List, Dict, Any

# Local imports
from svctree.tree.tree_constants import ERROR_MESSAGES


class TreeError(Exception):
    """Base exception for all tree-related errors."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 node_id: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.operation = operation
        self.node_id = node_id
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        parts = []
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.node_id:
            parts.append(f"Node: {self.node_id}")
        parts.append(f"Error: {self.message}")
        if self.context:
            context_str = ", ".join([f"{k}={v}" for k, v in self.context.items()])
            parts.append(f"Context: {context_str}")
        return " | ".join(parts)


class TreeValidationError(TreeError):
    """Raised when a tree fails structural validation."""

    def __init__(self, message: str, operation: str, node_id: Optional[str] = None,
                 validation_failures: Optional[List[str]] = None):
        super().__init__(message, operation, node_id)
        self.validation_failures = validation_failures or []


class NodeNotFoundError(TreeError):
    """Raised when a referenced node doesn't exist."""

    def __init__(self, node_id: str, operation: str = "access"):
        message = ERROR_MESSAGES["NODE_NOT_FOUND"].format(node_id=node_id)
        super().__init__(message, operation, node_id)


class NodeTypeError(TreeError):
    """Raised when a node has an incorrect kind for an operation."""

    def __init__(self, node_id: str, expected_type: str, actual_type: str, operation: str):
        message = f"Node '{node_id}' is {actual_type}, expected {expected_type}"
        super().__init__(message, operation, node_id)
        self.expected_type = expected_type
        self.actual_type = actual_type


class NodeExistsError(TreeError):
    """Raised when attempting to insert a node whose id is already in the tree."""

    def __init__(self, node_id: str, operation: str = "insert"):
        message = ERROR_MESSAGES["NODE_EXISTS"].format(node_id=node_id)
        super().__init__(message, operation, node_id)


class DragStateError(TreeError):
    """Raised when a drag event arrives in a phase that cannot accept it."""

    def __init__(self, message: str, active_id: Optional[str] = None):
        super().__init__(message, "drag", active_id)
