"""
reqres-users

Fetches the paginated user list of the Reqres demo API, caches each page,
drops every cached page as soon as upstream data changes, and renders the
result as an AJAX-paginated table widget.

Quick Start:
    >>> import asyncio
    >>> from reqres_users import fetch_users
    >>> result = asyncio.run(fetch_users(page=1, per_page=6))
    >>> print(result.total_pages)
    2

    # Or use synchronous API:
    >>> from reqres_users import fetch_users_sync
    >>> for user in fetch_users_sync(2).users:
    ...     print(user.email)
"""

__version__ = "0.1.0"

# High-level API (recommended for most users)
from reqres_users.api import (
    fetch_users,
    fetch_users_sync,
    get_api_key,
    set_api_key,
)

# Core components (for advanced usage)
from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore
from reqres_users.collectors.reqres import ReqresClient

# Filter hook
from reqres_users.core.events import EventDispatcher, FilterUsersEvent, default_dispatcher

# Exceptions
from reqres_users.core.exceptions import (
    CacheError,
    MalformedBodyError,
    NetworkError,
    ReqresError,
    UnexpectedShapeError,
    ValidationError,
)

# Data models
from reqres_users.core.models import DisplaySettings, FetchResult, UserRecord

__all__ = [
    # Version
    "__version__",
    # High-level API
    "fetch_users",
    "fetch_users_sync",
    "get_api_key",
    "set_api_key",
    # Models
    "DisplaySettings",
    "FetchResult",
    "UserRecord",
    # Core
    "CacheLayer",
    "ReqresClient",
    "StateStore",
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
