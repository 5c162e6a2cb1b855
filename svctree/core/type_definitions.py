#!/usr/bin/env python3
"""Type definitions for persisted service groups."""

from typing import TypedDict, List, Literal, Optional
from typing_extensions import NotRequired


class ServiceGroupDict(TypedDict):
    """Service group tree node as stored by the dashboard backend."""
    id: str
    name: str
    type: Literal["group", "service"]
    children: NotRequired[List["ServiceGroupDict"]]
    monitorId: NotRequired[Optional[str]]
    collapsed: NotRequired[bool]


class ProjectionDict(TypedDict):
    """Live drop preview handed to the view layer."""
    parentId: Optional[str]
    depth: int
    minDepth: int
    maxDepth: int
