"""
Reqres API client for fetching paginated user lists.

Responses are cached per page/per_page with a caller-supplied TTL and
tagged so that every cached page can be dropped at once. A permanent,
untagged hash of each page's raw payload detects upstream changes: when
the data behind any page changes, the whole tag is invalidated, which
lets callers use long TTLs without serving stale lists.
"""

import asyncio
import hashlib
import json
import logging
from typing import Any, Optional, TYPE_CHECKING

import aiohttp

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.collectors.base import Collector
from reqres_users.core.events import EventDispatcher, FilterUsersEvent, default_dispatcher
from reqres_users.core.exceptions import (
    MalformedBodyError,
    NetworkError,
    ReqresError,
    UnexpectedShapeError,
    ValidationError,
)
from reqres_users.core.models import FetchResult, UserRecord

if TYPE_CHECKING:
    from reqres_users.cache.state import StateStore

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


class ReqresClient(Collector):
    """Async client for the Reqres users endpoint."""

    BASE_URL = "https://reqres.in/api/users"

    # State key under which the API key is persisted
    STATE_KEY = "reqres_users.api_key"

    TIMEOUT = 5

    # Attached to every cached response and to every render built from one
    CACHE_TAG = "reqres_users"

    DEFAULT_CACHE_TTL = 300
    DEFAULT_PER_PAGE = 6

    RESPONSE_PREFIX = "reqres_users:response"
    # Hash entries are stored untagged so they survive tag invalidation
    HASH_PREFIX = "reqres_users:data_hash"

    REQUIRED_FIELDS = ("data", "total", "total_pages")

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = TIMEOUT,
        cache: Optional[CacheLayer] = None,
        state: Optional["StateStore"] = None,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        """Initialize the Reqres client.

        Args:
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
            cache: Optional cache layer for responses and change hashes.
            state: Optional state store holding the API key.
            dispatcher: Dispatcher for the filter event. Defaults to the
                module-level shared dispatcher.
        """
        super().__init__(session, timeout)
        self.cache = cache
        self.state = state
        self.dispatcher = dispatcher if dispatcher is not None else default_dispatcher

    async def get_users(
        self,
        page: int,
        per_page: int,
        cache_ttl: int = DEFAULT_CACHE_TTL,
    ) -> FetchResult:
        """Fetch one page of users.

        A cached result is returned as is while its TTL lasts. Failures
        never propagate: they are logged and the empty result is returned.

        Args:
            page: 1-based API page.
            per_page: Number of users per page.
            cache_ttl: Seconds to cache the result. 0 disables both the
                response cache and change detection.

        Returns:
            FetchResult with the (possibly filtered) users and the
            upstream totals.
        """
        response_key = self.cache_key(self.RESPONSE_PREFIX, page, per_page)
        use_cache = cache_ttl > 0 and self.cache is not None

        if use_cache:
            cached = self.cache.get_value(response_key)
            if cached is not None:
                logger.debug("Cache hit for %s", response_key)
                return FetchResult.from_dict(cached)
            logger.debug("Cache miss for %s", response_key)

        try:
            payload = await self._request_page(page, per_page)
        except ReqresError as e:
            logger.error("Reqres API request failed for page %d: %s", page, e)
            return FetchResult.empty()

        users = [UserRecord.from_api_data(item) for item in payload["data"]]

        event = self.dispatcher.dispatch(FilterUsersEvent(users, page, per_page))

        result = FetchResult(
            users=tuple(event.users),
            total=int(payload["total"]),
            total_pages=int(payload["total_pages"]),
        )

        if use_cache:
            self._handle_cache_invalidation(page, per_page, payload["data"])
            self.cache.set(
                response_key,
                result.to_dict(),
                cache_ttl,
                tags=[self.CACHE_TAG],
            )

        return result

    async def _request_page(self, page: int, per_page: int) -> dict[str, Any]:
        """GET one page and return the decoded, shape-checked payload.

        Raises:
            NetworkError: On connection errors, timeouts, HTTP errors or
                oversized responses.
            MalformedBodyError: If the body is not valid UTF-8 JSON, or
                uses the NaN and Infinity extensions.
            UnexpectedShapeError: If the payload lacks a required field.
        """
        params = {"page": page, "per_page": per_page}

        try:
            async with self.session.get(
                self.BASE_URL,
                params=params,
                headers=self._build_headers(),
                timeout=self.timeout,
            ) as resp:
                resp.raise_for_status()
                self._check_response_size(resp)
                body = await resp.text()

        except UnicodeDecodeError as e:
            raise MalformedBodyError(str(e))
        except aiohttp.ClientResponseError as e:
            raise NetworkError(self.BASE_URL, e.status, details=e.message)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(self.BASE_URL, details=str(e) or type(e).__name__)
        except ValidationError as e:
            raise NetworkError(self.BASE_URL, details=str(e))

        try:
            payload = json.loads(body, parse_constant=_reject_constant)
        except ValueError as e:
            raise MalformedBodyError(str(e))

        if not isinstance(payload, dict):
            raise UnexpectedShapeError(f"expected an object, got {type(payload).__name__}")
        missing = [name for name in self.REQUIRED_FIELDS if payload.get(name) is None]
        if missing:
            raise UnexpectedShapeError(f"missing {', '.join(missing)}")
        if not isinstance(payload["data"], list):
            raise UnexpectedShapeError("'data' is not a list")
        if not all(isinstance(item, dict) for item in payload["data"]):
            raise UnexpectedShapeError("'data' contains a non-object item")
        try:
            payload["total"] = int(payload["total"])
            payload["total_pages"] = int(payload["total_pages"])
        except (TypeError, ValueError, OverflowError) as e:
            raise UnexpectedShapeError(f"non-numeric totals: {e}")

        return payload

    def _handle_cache_invalidation(
        self,
        page: int,
        per_page: int,
        raw_items: list[Any],
    ) -> None:
        """Compare the new payload hash with the stored one.

        If the data changed, invalidates the shared cache tag so every
        cached page and every render depending on it is dropped. The hash
        entry itself is permanent and untagged, so it remains the baseline
        for the next comparison. A missing baseline counts as unchanged.
        """
        new_hash = self.payload_hash(raw_items)
        hash_key = self.cache_key(self.HASH_PREFIX, page, per_page)

        previous = self.cache.get_value(hash_key)

        if previous is not None and previous != new_hash:
            logger.info(
                "Reqres data changed for page %d (per_page %d), invalidating '%s'",
                page,
                per_page,
                self.CACHE_TAG,
            )
            self.cache.invalidate_tags([self.CACHE_TAG])

        self.cache.set(hash_key, new_hash, CacheLayer.PERMANENT)

    @staticmethod
    def payload_hash(raw_items: list[Any]) -> str:
        """MD5 of the raw items serialized in upstream order."""
        serialized = json.dumps(raw_items, separators=(",", ":"), ensure_ascii=False)
        return hashlib.md5(serialized.encode("utf-8")).hexdigest()

    @staticmethod
    def cache_key(prefix: str, page: int, per_page: int) -> str:
        return CacheLayer.make_key(prefix, page, per_page)

    def _api_key(self) -> str:
        if self.state is None:
            return ""
        return str(self.state.get(self.STATE_KEY, "") or "")

    def _build_headers(self) -> dict[str, str]:
        """Build request headers carrying the stored API key."""
        headers = super()._build_headers()
        headers["x-api-key"] = self._api_key()
        return headers
