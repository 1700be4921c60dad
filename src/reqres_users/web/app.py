"""
aiohttp web application serving the user list widget.

Routes:
    GET  /                          page embedding the widget (first page)
    GET  /reqres-users/ajax/page    AJAX pager endpoint, returns a replace command
    GET  /admin/config/reqres-users settings form
    POST /admin/config/reqres-users save API key and display settings
"""

import logging
import secrets
from html import escape
from typing import Any, Optional

import aiohttp
from aiohttp import web

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore
from reqres_users.collectors.reqres import ReqresClient
from reqres_users.core.events import EventDispatcher
from reqres_users.core.exceptions import ValidationError
from reqres_users.core.models import DisplaySettings
from reqres_users.core.validation import (
    clamp_int,
    clean_css_identifier,
    strip_tags,
    validate_api_key,
)
from reqres_users.web.pager import AJAX_PAGE_PATH
from reqres_users.web.render import render_user_list

logger = logging.getLogger(__name__)

SETTINGS_PATH = "/admin/config/reqres-users"

# State key holding the widget's display settings
DISPLAY_STATE_KEY = "reqres_users.display"

CLIENT_KEY = web.AppKey("client", ReqresClient)
STATE_KEY = web.AppKey("state", StateStore)

AJAX_SCRIPT = """
document.addEventListener("click", function (event) {
  var link = event.target.closest("a.use-ajax");
  if (!link) { return; }
  event.preventDefault();
  fetch(link.href, {headers: {"Accept": "application/json"}})
    .then(function (response) { return response.json(); })
    .then(function (commands) {
      commands.forEach(function (command) {
        if (command.command === "insert" && command.method === "replaceWith") {
          var target = document.querySelector(command.selector);
          if (target) { target.outerHTML = command.data; }
        }
      });
    });
});
"""


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title></head>"
        f"<body><main><h1>{escape(title)}</h1>{body}</main>"
        f"<script>{AJAX_SCRIPT}</script></body></html>"
    )


def load_display_settings(state: StateStore) -> DisplaySettings:
    """Return the saved display settings, or the defaults."""
    data = state.get(DISPLAY_STATE_KEY)
    if not data:
        return DisplaySettings()
    return DisplaySettings.from_dict(data)


async def index(request: web.Request) -> web.Response:
    """Render a page with the widget showing the first page of users."""
    client = request.app[CLIENT_KEY]
    settings = load_display_settings(request.app[STATE_KEY])

    result = await client.get_users(1, settings.items_per_page, settings.cache_ttl)

    widget = render_user_list(
        result,
        0,
        settings.wrapper_id,
        settings.labels,
        settings.base_params(),
    )
    response = web.Response(text=_page("Users", widget), content_type="text/html")
    response.headers["Cache-Control"] = "no-cache"
    return response


async def ajax_page(request: web.Request) -> web.Response:
    """Return a command replacing the widget wrapper with another page."""
    query = request.query

    page = clamp_int(query.get("page"), 0, 0)
    per_page = clamp_int(query.get("per_page"), ReqresClient.DEFAULT_PER_PAGE, 1)
    cache_ttl = clamp_int(query.get("cache_ttl"), ReqresClient.DEFAULT_CACHE_TTL, 0)
    labels = (
        strip_tags(query.get("email_label", "Email")),
        strip_tags(query.get("forename_label", "Forename")),
        strip_tags(query.get("surname_label", "Surname")),
    )
    wrapper_id = clean_css_identifier(strip_tags(query.get("wrapper_id", "")))

    # The API counts pages from 1, the pager from 0
    result = await request.app[CLIENT_KEY].get_users(page + 1, per_page, cache_ttl)

    base_params = {
        "wrapper_id": wrapper_id,
        "per_page": per_page,
        "cache_ttl": cache_ttl,
        "email_label": labels[0],
        "forename_label": labels[1],
        "surname_label": labels[2],
    }
    html = render_user_list(result, page, wrapper_id, labels, base_params)

    return web.json_response([
        {
            "command": "insert",
            "method": "replaceWith",
            "selector": f"#{wrapper_id}",
            "data": html,
        }
    ])


def _settings_form(
    values: dict[str, Any],
    errors: dict[str, str],
    message: str = "",
) -> str:
    def field(name: str, label: str, input_type: str = "text", extra: str = "") -> str:
        error = errors.get(name)
        error_html = f'<div class="form-item--error-message">{escape(error)}</div>' if error else ""
        return (
            f'<div class="form-item"><label for="edit-{name}">{escape(label)}</label>'
            f'<input type="{input_type}" id="edit-{name}" name="{name}" '
            f'value="{escape(str(values.get(name, "")))}" required {extra}>'
            f"{error_html}</div>"
        )

    status = f'<div class="messages messages--status">{escape(message)}</div>' if message else ""
    return (
        status
        + f'<form method="post" action="{SETTINGS_PATH}">'
        + field("api_key", "API key", extra='maxlength="255"')
        + "<p>The <code>x-api-key</code> header value sent with every Reqres API request. "
        "It is stored in the local state database only.</p>"
        + field("items_per_page", "Number of items per page", "number", 'min="1"')
        + field("cache_ttl", "Cache TTL (seconds)", "number", 'min="0"')
        + "<p>How long to cache the API response. Set to 0 to disable caching.</p>"
        + field("email_label", "Email field label")
        + field("forename_label", "Forename field label")
        + field("surname_label", "Surname field label")
        + '<button type="submit">Save</button></form>'
    )


async def settings_form(request: web.Request) -> web.Response:
    state = request.app[STATE_KEY]
    api_key = str(state.get(ReqresClient.STATE_KEY, "") or "")
    values = {"api_key": api_key, **load_display_settings(state).to_dict()}
    message = "The configuration has been saved." if request.query.get("saved") else ""
    body = _settings_form(values, {}, message)
    return web.Response(text=_page("Reqres users settings", body), content_type="text/html")


async def save_settings(request: web.Request) -> web.Response:
    """Validate and persist the API key and display settings."""
    state = request.app[STATE_KEY]
    form = await request.post()
    values = {name: str(form.get(name, "")) for name in (
        "api_key",
        "items_per_page",
        "cache_ttl",
        "email_label",
        "forename_label",
        "surname_label",
    )}
    errors: dict[str, str] = {}

    try:
        api_key = validate_api_key(values["api_key"])
    except ValidationError as e:
        errors["api_key"] = e.reason
        api_key = ""

    settings: Optional[DisplaySettings] = None
    try:
        settings = DisplaySettings(
            items_per_page=_form_int(values, "items_per_page"),
            cache_ttl=_form_int(values, "cache_ttl"),
            email_label=values["email_label"].strip(),
            forename_label=values["forename_label"].strip(),
            surname_label=values["surname_label"].strip(),
            instance_id=load_display_settings(state).instance_id,
        ).validate()
    except ValidationError as e:
        errors[e.field] = e.reason

    if errors or settings is None:
        logger.info("Rejected settings form: %s", ", ".join(sorted(errors)))
        body = _settings_form(values, errors)
        return web.Response(
            text=_page("Reqres users settings", body),
            content_type="text/html",
            status=400,
        )

    if not settings.instance_id:
        settings = settings.with_instance_id(secrets.token_hex(8))

    state.set(ReqresClient.STATE_KEY, api_key)
    state.set(DISPLAY_STATE_KEY, settings.to_dict())
    logger.info("Saved reqres users settings for instance %s", settings.instance_id)

    raise web.HTTPSeeOther(f"{SETTINGS_PATH}?saved=1")


def _form_int(values: dict[str, str], name: str) -> int:
    try:
        return int(values[name])
    except ValueError:
        raise ValidationError(name, values[name], "must be a whole number")


def create_app(
    cache: Optional[CacheLayer] = None,
    state: Optional[StateStore] = None,
    *,
    dispatcher: Optional[EventDispatcher] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> web.Application:
    """Build the web application.

    Args:
        cache: Cache layer for API responses. Defaults to the shared
            database under ~/.reqres_users.
        state: State store for the API key and display settings.
        dispatcher: Dispatcher carrying filter listeners.
        session: Optional aiohttp session for upstream requests.
    """
    cache = cache if cache is not None else CacheLayer()
    state = state if state is not None else StateStore(cache.db_path)

    app = web.Application()
    app[CLIENT_KEY] = ReqresClient(
        session=session,
        cache=cache,
        state=state,
        dispatcher=dispatcher,
    )
    app[STATE_KEY] = state

    app.router.add_get("/", index)
    app.router.add_get(AJAX_PAGE_PATH, ajax_page)
    app.router.add_get(SETTINGS_PATH, settings_form)
    app.router.add_post(SETTINGS_PATH, save_settings)

    async def close_client(app: web.Application) -> None:
        await app[CLIENT_KEY].close()

    app.on_cleanup.append(close_client)
    return app
