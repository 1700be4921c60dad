"""
Core module for reqres-users.

Contains data models, the filter hook, validation helpers and exceptions.
"""

from reqres_users.core.events import EventDispatcher, FilterUsersEvent, default_dispatcher
from reqres_users.core.exceptions import (
    CacheError,
    MalformedBodyError,
    NetworkError,
    ReqresError,
    UnexpectedShapeError,
    ValidationError,
)
from reqres_users.core.models import DisplaySettings, FetchResult, UserRecord

__all__ = [
    # Models
    "DisplaySettings",
    "FetchResult",
    "UserRecord",
    # Filter hook
    "EventDispatcher",
    "FilterUsersEvent",
    "default_dispatcher",
    # Exceptions
    "ReqresError",
    "NetworkError",
    "MalformedBodyError",
    "UnexpectedShapeError",
    "CacheError",
    "ValidationError",
]
