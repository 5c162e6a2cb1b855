#!/usr/bin/env python3
"""
Constants and configuration for the service group tree engine.
"""

# Pixels per nesting level. The monitors service tree renders rows 24px
# apart; the status page editor and the shared drag hook default to 20px.
# Pass the width of the rows actually rendered via DragConfig.
INDENTATION_WIDTH = 24  # Monitors service tree
STATUS_PAGE_INDENTATION_WIDTH = 20  # Status page group editor, drag hook default

# Validation limits
MAX_NODE_NAME_LENGTH = 255
MIN_NODE_NAME_LENGTH = 1

# Persisted "type" values
GROUP_TYPE = "group"
SERVICE_TYPE = "service"

# Default name for groups created from the toolbar
DEFAULT_GROUP_NAME = "New Group"

# Error message templates
ERROR_MESSAGES = {
    "EMPTY_NODE_ID": "Node ID cannot be empty",
    "EMPTY_NODE_NAME": "Node name cannot be empty",
    "NODE_NAME_TOO_LONG": "Node name exceeds {max_length} characters",
    "PARENT_NOT_GROUP": "Parent must be a group, not a service",
    "NODE_NOT_FOUND": "Node {node_id} does not exist",
    "NODE_EXISTS": "Node {node_id} already exists in tree",
    "DUPLICATE_ID": "Duplicate node id {node_id}",
    "SERVICE_HAS_CHILDREN": "Service {node_id} cannot have children",
    "GROUP_HAS_MONITOR": "Group {node_id} cannot reference a monitor",
    "SERVICE_WITHOUT_MONITOR": "Service {node_id} has no monitor id",
    "INVALID_NODE_TYPE": "Invalid node type: {node_type}",
    "INVALID_INDENT_WIDTH": "Indent width must be positive, got {indent_width}",
    "DRAG_ALREADY_ACTIVE": "A drag of {active_id} is already in progress",
}

# Logging configuration
LOGGER_NAME = "svctree"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_DEFAULT = "INFO"
LOG_LEVEL_DEBUG = "DEBUG"
