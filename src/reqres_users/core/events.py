"""
Filter hook for fetched users.

After a page of users is fetched and mapped, and before it is cached and
returned, a FilterUsersEvent is dispatched. Listeners may remove or
reorder entries:

    >>> from reqres_users.core.events import default_dispatcher
    >>> def hide_example_domain(event):
    ...     event.set_users(
    ...         u for u in event.users if not u.email.endswith("@example.com")
    ...     )
    >>> default_dispatcher.add_listener(hide_example_domain)
"""

from typing import Callable, Iterable

from reqres_users.core.models import UserRecord

FILTER_USERS = "reqres_users.filter_users"


class FilterUsersEvent:
    """Carries the mapped users of one page through the listeners."""

    name = FILTER_USERS

    def __init__(self, users: Iterable[UserRecord], page: int, per_page: int):
        self._users = list(users)
        self.page = page
        self.per_page = per_page

    @property
    def users(self) -> list[UserRecord]:
        """Current user list (a copy)."""
        return list(self._users)

    def set_users(self, users: Iterable[UserRecord]) -> None:
        """Replace the user list handed to the next listener."""
        self._users = list(users)


Listener = Callable[[FilterUsersEvent], None]


class EventDispatcher:
    """Synchronous dispatcher running listeners in registration order."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> list[Listener]:
        return list(self._listeners)

    def dispatch(self, event: FilterUsersEvent) -> FilterUsersEvent:
        """Run every listener on the event and return it."""
        for listener in self._listeners:
            listener(event)
        return event


# Shared dispatcher used when a client is created without one
default_dispatcher = EventDispatcher()
