"""
High-level programmatic API for reqres-users.

This module provides simple functions for common operations.
For more control, use ReqresClient, CacheLayer and StateStore directly.

Example:
    import asyncio
    from reqres_users import fetch_users

    async def main():
        result = await fetch_users(page=1, per_page=6)
        for user in result.users:
            print(user.email)
        print(f"{result.total} users on {result.total_pages} pages")

    asyncio.run(main())
"""

import asyncio
from pathlib import Path

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore
from reqres_users.collectors.reqres import ReqresClient
from reqres_users.core.events import EventDispatcher
from reqres_users.core.models import FetchResult
from reqres_users.core.validation import validate_api_key


async def fetch_users(
    page: int = 1,
    per_page: int = ReqresClient.DEFAULT_PER_PAGE,
    cache_ttl: int = ReqresClient.DEFAULT_CACHE_TTL,
    *,
    db_path: Path | None = None,
    dispatcher: EventDispatcher | None = None,
) -> FetchResult:
    """Fetch one page of users.

    Args:
        page: 1-based API page.
        per_page: Users per page.
        cache_ttl: Seconds to cache the result (0 disables caching).
        db_path: SQLite file for cache and state. Defaults to
            ~/.reqres_users/cache.db.
        dispatcher: Optional dispatcher carrying filter listeners.

    Returns:
        FetchResult; empty on any fetch failure.

    Example:
        >>> import asyncio
        >>> from reqres_users import fetch_users
        >>> result = asyncio.run(fetch_users(2, per_page=3))
        >>> len(result.users) <= 3
        True
    """
    async with ReqresClient(
        cache=CacheLayer(db_path),
        state=StateStore(db_path),
        dispatcher=dispatcher,
    ) as client:
        return await client.get_users(page, per_page, cache_ttl)


def fetch_users_sync(
    page: int = 1,
    per_page: int = ReqresClient.DEFAULT_PER_PAGE,
    cache_ttl: int = ReqresClient.DEFAULT_CACHE_TTL,
    *,
    db_path: Path | None = None,
    dispatcher: EventDispatcher | None = None,
) -> FetchResult:
    """Synchronous wrapper for fetch_users().

    For use in non-async contexts. Runs a new event loop.
    """
    return asyncio.run(
        fetch_users(page, per_page, cache_ttl, db_path=db_path, dispatcher=dispatcher)
    )


def get_api_key(db_path: Path | None = None) -> str:
    """Return the stored API key, or "" if none was saved."""
    return str(StateStore(db_path).get(ReqresClient.STATE_KEY, "") or "")


def set_api_key(api_key: str, db_path: Path | None = None) -> str:
    """Validate, trim and store the API key sent as x-api-key.

    Returns:
        The stored (trimmed) key.

    Raises:
        ValidationError: If the key is empty or too long.
    """
    api_key = validate_api_key(api_key)
    StateStore(db_path).set(ReqresClient.STATE_KEY, api_key)
    return api_key
