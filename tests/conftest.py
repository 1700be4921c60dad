"""
Pytest fixtures and configuration for reqres-users tests.

Provides mock API responses, a mock aiohttp session and temporary
SQLite-backed cache and state stores.
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore
from reqres_users.core.events import EventDispatcher
from reqres_users.core.models import DisplaySettings, FetchResult, UserRecord

TEST_API_KEY = "test-api-key-12345"

# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def sample_user() -> UserRecord:
    """Create a sample user record."""
    return UserRecord(
        id=1,
        email="george.bluth@reqres.in",
        first_name="George",
        last_name="Bluth",
    )


@pytest.fixture
def sample_result(sample_user: UserRecord) -> FetchResult:
    """Create a sample fetch result."""
    return FetchResult(
        users=(
            sample_user,
            UserRecord(id=2, email="janet.weaver@reqres.in", first_name="Janet", last_name="Weaver"),
        ),
        total=12,
        total_pages=6,
    )


@pytest.fixture
def sample_settings() -> DisplaySettings:
    """Create sample display settings for a saved widget."""
    return DisplaySettings(
        items_per_page=2,
        cache_ttl=300,
        instance_id="0123456789abcdef",
    )


# =============================================================================
# Mock API Response Fixtures
# =============================================================================


@pytest.fixture
def mock_reqres_response() -> dict[str, Any]:
    """Create a mock Reqres API response with 2 users."""
    return {
        "page": 1,
        "per_page": 2,
        "total": 12,
        "total_pages": 6,
        "data": [
            {
                "id": 1,
                "email": "george.bluth@reqres.in",
                "first_name": "George",
                "last_name": "Bluth",
                "avatar": "https://reqres.in/img/faces/1-image.jpg",
            },
            {
                "id": "2",
                "email": "janet.weaver@reqres.in",
                "first_name": "Janet",
                "last_name": "Weaver",
                "avatar": "https://reqres.in/img/faces/2-image.jpg",
            },
        ],
        "support": {
            "url": "https://contentcaddy.io",
            "text": "Tired of writing endless social media content?",
        },
    }


@pytest.fixture
def changed_reqres_response(mock_reqres_response: dict[str, Any]) -> dict[str, Any]:
    """Same page as mock_reqres_response with one user renamed."""
    changed = json.loads(json.dumps(mock_reqres_response))
    changed["data"][1]["last_name"] = "Weaver-Bluth"
    return changed


# =============================================================================
# Mock Session Fixtures
# =============================================================================


def make_response_context(body: str, raise_error: Exception | None = None) -> MagicMock:
    """Build the async context manager returned by session.get()."""
    resp = MagicMock()
    resp.headers = {}
    resp.text = AsyncMock(return_value=body)
    if raise_error is not None:
        resp.raise_for_status.side_effect = raise_error

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


def make_session(*bodies: str) -> MagicMock:
    """Create a mock aiohttp session answering each get() with the next body."""
    session = MagicMock()
    session.get.side_effect = [make_response_context(body) for body in bodies]
    return session


@pytest.fixture
def mock_session(mock_reqres_response: dict[str, Any]) -> MagicMock:
    """Create a mock session that always returns the 2-user page."""
    session = MagicMock()
    session.get.side_effect = lambda *args, **kwargs: make_response_context(
        json.dumps(mock_reqres_response)
    )
    return session


@pytest.fixture
def mock_cache() -> MagicMock:
    """Create a mock cache layer that always misses."""
    cache = MagicMock()
    cache.get_value.return_value = None
    return cache


@pytest.fixture
def mock_state() -> MagicMock:
    """Create a mock state store holding the test API key."""
    state = MagicMock()
    state.get.return_value = TEST_API_KEY
    return state


@pytest.fixture
def dispatcher() -> EventDispatcher:
    """Create an isolated dispatcher without listeners."""
    return EventDispatcher()


# =============================================================================
# Cache Fixtures
# =============================================================================


@pytest.fixture
def tmp_cache_db(tmp_path: Path) -> Path:
    """Create a temporary cache database path."""
    return tmp_path / "test_cache.db"


@pytest.fixture
def cache_layer(tmp_cache_db: Path) -> CacheLayer:
    """Create a cache layer on a temporary database."""
    return CacheLayer(tmp_cache_db)


@pytest.fixture
def state_store(tmp_cache_db: Path) -> StateStore:
    """Create a state store sharing the temporary database."""
    return StateStore(tmp_cache_db)
