"""Domain models"""

from starlens.models.domain import Repository, Severity, SortMode, Theme, User
from starlens.models.resource import (
    AsyncResource,
    Failed,
    NotRequested,
    Pending,
    Ready,
    RequestTag,
    ResourceTracker,
)

__all__ = [
    "Repository",
    "User",
    "SortMode",
    "Severity",
    "Theme",
    "AsyncResource",
    "NotRequested",
    "Pending",
    "Ready",
    "Failed",
    "RequestTag",
    "ResourceTracker",
]
