"""
Base class for data collectors.

Session ownership and request helpers shared by all collectors.
"""

from typing import Any

import aiohttp

from reqres_users import __version__
from reqres_users.core.validation import MAX_RESPONSE_SIZE, validate_response_size


class Collector:
    """Base class for data collectors.

    Collectors share session management and header building. Specific
    collectors add the request methods for their data source.
    """

    MAX_RESPONSE_SIZE = MAX_RESPONSE_SIZE

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: int = 30,
    ):
        """Initialize the collector.

        Args:
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            timeout: Request timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "Collector":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _build_headers(self) -> dict[str, str]:
        """Build common request headers.

        Override in subclasses to add authentication or other headers.
        """
        return {
            "User-Agent": f"reqres-users/{__version__}",
            "Accept": "application/json",
        }

    def _check_response_size(self, response: aiohttp.ClientResponse) -> None:
        """Check if response size is within acceptable limits.

        Raises:
            ValidationError: If the response is too large.
        """
        content_length = response.headers.get("Content-Length")
        if content_length is not None and content_length.isdigit():
            validate_response_size(int(content_length), self.MAX_RESPONSE_SIZE)
