"""
HTML rendering of the user list widget.
"""

from html import escape
from typing import Any, Mapping, Sequence

from reqres_users.core.models import FetchResult
from reqres_users.web.pager import build_pager

EMPTY_MESSAGE = "No users found."


def render_table(result: FetchResult, labels: Sequence[str]) -> str:
    """Render the users as a table with the given column labels."""
    header = "".join(f"<th>{escape(label)}</th>" for label in labels)

    if result.is_empty:
        body = f'<tr class="empty"><td colspan="{len(labels)}">{escape(EMPTY_MESSAGE)}</td></tr>'
    else:
        body = "".join(
            "<tr>"
            f"<td>{escape(user.email)}</td>"
            f"<td>{escape(user.first_name)}</td>"
            f"<td>{escape(user.last_name)}</td>"
            "</tr>"
            for user in result.users
        )

    return (
        '<table class="reqres-users">'
        f"<thead><tr>{header}</tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table>"
    )


def render_user_list(
    result: FetchResult,
    current_page: int,
    wrapper_id: str,
    labels: Sequence[str],
    base_params: Mapping[str, Any],
) -> str:
    """Render the complete widget: wrapper, table and pager.

    Args:
        result: Fetched page of users.
        current_page: Zero-based page index shown.
        wrapper_id: HTML id of the wrapper element.
        labels: Email, forename and surname column labels.
        base_params: Query parameters shared by all pager links.
    """
    pager = build_pager(current_page, result.total_pages, wrapper_id, base_params)
    return (
        f'<div id="{escape(wrapper_id)}" class="reqres-user-list">'
        + render_table(result, labels)
        + pager
        + "</div>"
    )
