"""
Input validation utilities for reqres-users.

Sanitizes query parameters coming back from pager links and values
submitted through the settings form, so that nothing a client sends ends
up unescaped in an HTML id or label.
"""

import re
from typing import Any

from reqres_users.core.exceptions import ValidationError

# Characters allowed in a CSS identifier after cleaning
_CSS_INVALID = re.compile(r"[^-0-9A-Z_a-z\u00a1-\uffff]")
_CSS_SEPARATORS = re.compile(r"[ _/\[\]]")
_TAG_PATTERN = re.compile(r"<[^>]*>?")

MAX_API_KEY_LENGTH = 255

# Maximum response size (10 MB)
MAX_RESPONSE_SIZE = 10 * 1024 * 1024


def clamp_int(value: Any, default: int, minimum: int) -> int:
    """Parse an integer query value, falling back to default and clamping.

    Args:
        value: Raw value (usually a query string).
        default: Value used when ``value`` is missing or not an integer.
        minimum: Lower bound applied after parsing.

    Returns:
        An integer no smaller than ``minimum``.
    """
    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, parsed)


def clean_css_identifier(identifier: str) -> str:
    """Reduce a string to a valid CSS identifier.

    Spaces, underscores, slashes and brackets become hyphens; every other
    character outside the CSS identifier range is dropped. A leading digit
    or a leading "--" is escaped with an underscore.
    """
    cleaned = _CSS_SEPARATORS.sub("-", identifier)
    cleaned = _CSS_INVALID.sub("", cleaned)
    if re.match(r"^[0-9]", cleaned) or cleaned.startswith("--"):
        cleaned = "_" + cleaned
    return cleaned


def strip_tags(text: str) -> str:
    """Remove anything that looks like markup from a label."""
    return _TAG_PATTERN.sub("", text)


def validate_api_key(api_key: str) -> str:
    """Validate an API key submitted by an administrator.

    Returns:
        The trimmed key.

    Raises:
        ValidationError: If the key is empty or too long.
    """
    api_key = (api_key or "").strip()
    if not api_key:
        raise ValidationError("api_key", "", "API key is required")
    if len(api_key) > MAX_API_KEY_LENGTH:
        raise ValidationError(
            "api_key",
            api_key[:20] + "...",
            f"API key exceeds {MAX_API_KEY_LENGTH} character limit",
        )
    if any(ord(c) < 32 or ord(c) == 127 for c in api_key):
        raise ValidationError("api_key", repr(api_key), "API key contains control characters")
    return api_key


def validate_response_size(
    content_length: int | None,
    max_size: int = MAX_RESPONSE_SIZE,
) -> None:
    """Validate that a response size is within acceptable limits.

    Args:
        content_length: The Content-Length header value (may be None).
        max_size: Maximum allowed response size in bytes.

    Raises:
        ValidationError: If the response is too large.
    """
    if content_length is not None and content_length > max_size:
        size_mb = content_length / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        raise ValidationError(
            "response_size",
            f"{size_mb:.1f} MB",
            f"Response exceeds maximum size of {max_mb:.0f} MB",
        )
