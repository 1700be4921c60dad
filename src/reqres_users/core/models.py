"""
Core data models for reqres-users.

This module defines the user record mapped from the Reqres API, the
result of a page fetch, and the per-instance display settings of the
user list widget.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping

from reqres_users.core.exceptions import ValidationError


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class UserRecord:
    """A single user as listed by the Reqres API."""

    id: int
    email: str
    first_name: str
    last_name: str

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} <{self.email}>"

    @property
    def full_name(self) -> str:
        """Return first and last name joined by a space."""
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api_data(cls, data: Mapping[str, Any]) -> "UserRecord":
        """Build a record from one item of the API 'data' list.

        Values are coerced, not validated: a missing or overflowing id
        becomes 0 and missing or null strings become "".
        """
        try:
            user_id = int(data.get("id") or 0)
        except (TypeError, ValueError, OverflowError):
            user_id = 0
        return cls(
            id=user_id,
            email=_text(data.get("email")),
            first_name=_text(data.get("first_name")),
            last_name=_text(data.get("last_name")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for caching."""
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserRecord":
        """Create from dictionary (cache retrieval)."""
        return cls.from_api_data(data)


@dataclass(frozen=True)
class FetchResult:
    """One page of users plus the totals reported upstream.

    ``total`` and ``total_pages`` are always the unfiltered upstream
    values, even when filter listeners dropped entries from ``users``.
    """

    users: tuple[UserRecord, ...] = ()
    total: int = 0
    total_pages: int = 0

    def __len__(self) -> int:
        return len(self.users)

    @property
    def is_empty(self) -> bool:
        """Return True if there are no users to display."""
        return not self.users

    @classmethod
    def empty(cls) -> "FetchResult":
        """Return the zero-result used for every failed fetch."""
        return cls(users=(), total=0, total_pages=0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for caching."""
        return {
            "users": [user.to_dict() for user in self.users],
            "total": self.total,
            "total_pages": self.total_pages,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FetchResult":
        """Create from dictionary (cache retrieval)."""
        return cls(
            users=tuple(UserRecord.from_dict(u) for u in data.get("users", [])),
            total=int(data.get("total", 0)),
            total_pages=int(data.get("total_pages", 0)),
        )


@dataclass(frozen=True)
class DisplaySettings:
    """Configuration of one user list widget instance."""

    items_per_page: int = 6
    cache_ttl: int = 300
    email_label: str = "Email"
    forename_label: str = "Forename"
    surname_label: str = "Surname"
    instance_id: str = ""

    WRAPPER_PREFIX = "reqres-users-block-"

    @property
    def wrapper_id(self) -> str:
        """HTML id of the element the AJAX pager replaces."""
        return self.WRAPPER_PREFIX + (self.instance_id or "unsaved")

    @property
    def labels(self) -> tuple[str, str, str]:
        """Column labels in table order."""
        return (self.email_label, self.forename_label, self.surname_label)

    def base_params(self) -> dict[str, Any]:
        """Query parameters shared by every pager link of this instance."""
        return {
            "wrapper_id": self.wrapper_id,
            "per_page": self.items_per_page,
            "cache_ttl": self.cache_ttl,
            "email_label": self.email_label,
            "forename_label": self.forename_label,
            "surname_label": self.surname_label,
        }

    def validate(self) -> "DisplaySettings":
        """Check value ranges and required labels.

        Raises:
            ValidationError: On the first invalid field.
        """
        if self.items_per_page < 1:
            raise ValidationError("items_per_page", str(self.items_per_page), "must be at least 1")
        if self.cache_ttl < 0:
            raise ValidationError("cache_ttl", str(self.cache_ttl), "must not be negative")
        for name in ("email_label", "forename_label", "surname_label"):
            if not getattr(self, name).strip():
                raise ValidationError(name, getattr(self, name), "label is required")
        return self

    def with_instance_id(self, instance_id: str) -> "DisplaySettings":
        """Return a copy carrying the given instance id."""
        return replace(self, instance_id=instance_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the state store."""
        return {
            "items_per_page": self.items_per_page,
            "cache_ttl": self.cache_ttl,
            "email_label": self.email_label,
            "forename_label": self.forename_label,
            "surname_label": self.surname_label,
            "instance_id": self.instance_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DisplaySettings":
        """Create from dictionary, falling back to defaults per field."""
        defaults = cls()
        return cls(
            items_per_page=int(data.get("items_per_page", defaults.items_per_page)),
            cache_ttl=int(data.get("cache_ttl", defaults.cache_ttl)),
            email_label=str(data.get("email_label", defaults.email_label)),
            forename_label=str(data.get("forename_label", defaults.forename_label)),
            surname_label=str(data.get("surname_label", defaults.surname_label)),
            instance_id=str(data.get("instance_id", "")),
        )
