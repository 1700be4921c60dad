"""
AJAX pager for the user list widget.

Links point at the AJAX page endpoint and carry every display parameter,
so the endpoint can rebuild the same widget for another page without any
server-side session.
"""

from html import escape
from typing import Any, Mapping
from urllib.parse import urlencode

AJAX_PAGE_PATH = "/reqres-users/ajax/page"

PREVIOUS_LABEL = "‹ Previous"
NEXT_LABEL = "Next ›"
ARIA_LABEL = "Pagination"


def build_page_url(page: int, wrapper_id: str, base_params: Mapping[str, Any]) -> str:
    """Build the AJAX endpoint URL for a zero-based page index."""
    query = {**base_params, "page": page, "wrapper_id": wrapper_id}
    return f"{AJAX_PAGE_PATH}?{urlencode(query)}"


def _link(page: int, label: str, wrapper_id: str, base_params: Mapping[str, Any]) -> str:
    url = escape(build_page_url(page, wrapper_id, base_params))
    return f'<a href="{url}" class="use-ajax">{escape(label)}</a>'


def build_pager(
    current_page: int,
    total_pages: int,
    wrapper_id: str,
    base_params: Mapping[str, Any],
) -> str:
    """Render pager markup.

    Args:
        current_page: Zero-based current page index.
        total_pages: Total number of pages reported by the API.
        wrapper_id: HTML id of the widget wrapper the AJAX reply replaces.
        base_params: Query parameters shared by all links (per_page,
            cache_ttl, label overrides).

    Returns:
        A ``<nav>`` element, or "" when there is at most one page.
    """
    if total_pages <= 1:
        return ""

    items = []

    if current_page > 0:
        items.append(
            '<li class="pager__item pager__item--previous">'
            + _link(current_page - 1, PREVIOUS_LABEL, wrapper_id, base_params)
            + "</li>"
        )

    for i in range(total_pages):
        if i == current_page:
            items.append(f'<li class="pager__item is-active"><span>{i + 1}</span></li>')
        else:
            items.append(
                '<li class="pager__item">'
                + _link(i, str(i + 1), wrapper_id, base_params)
                + "</li>"
            )

    if current_page < total_pages - 1:
        items.append(
            '<li class="pager__item pager__item--next">'
            + _link(current_page + 1, NEXT_LABEL, wrapper_id, base_params)
            + "</li>"
        )

    return (
        f'<nav class="pager" aria-label="{escape(ARIA_LABEL)}">'
        '<ul class="pager__items js-pager__items">'
        + "".join(items)
        + "</ul></nav>"
    )
