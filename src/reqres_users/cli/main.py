"""
Main CLI entry point for reqres-users.

Provides commands for fetching users, storing the API key, managing the
cache and serving the web widget.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from reqres_users import __version__
from reqres_users.cli.output import (
    print_cache_stats,
    print_error,
    print_info,
    print_success,
    print_users,
)
from reqres_users.collectors.reqres import ReqresClient
from reqres_users.core.exceptions import ReqresError


def run_async(coro):
    """Run an async coroutine to completion."""
    return asyncio.run(coro)


@click.group()
@click.version_option(version=__version__, prog_name="reqres-users")
@click.option(
    "--db",
    "db_path",
    envvar="REQRES_USERS_DB",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite file for cache and state (default: ~/.reqres_users/cache.db).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[Path], verbose: bool) -> None:
    """Reqres users - cached, change-aware user listing.

    Fetches users from the Reqres demo API, caches each page and drops
    all cached pages as soon as the upstream data changes.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path


@cli.command()
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="1-based page.")
@click.option(
    "--per-page",
    type=click.IntRange(min=1),
    default=ReqresClient.DEFAULT_PER_PAGE,
    help="Users per page.",
)
@click.option(
    "--cache-ttl",
    type=click.IntRange(min=0),
    default=ReqresClient.DEFAULT_CACHE_TTL,
    help="Seconds to cache the page. 0 disables caching.",
)
@click.pass_context
def users(ctx: click.Context, page: int, per_page: int, cache_ttl: int) -> None:
    """Fetch and print one page of users.

    \b
    Examples:
        reqres-users users                 # First page, 6 per page
        reqres-users users -p 2 --per-page 3
        reqres-users users --cache-ttl 0   # Bypass the cache
    """
    from reqres_users.api import fetch_users

    try:
        result = run_async(
            fetch_users(page, per_page, cache_ttl, db_path=ctx.obj.get("db_path"))
        )
    except ReqresError as e:
        print_error(f"Fetch failed: {e}")
        sys.exit(1)

    print_users(result, page)


@cli.command("set-api-key")
@click.argument("api_key")
@click.pass_context
def set_api_key(ctx: click.Context, api_key: str) -> None:
    """Store the API key sent as the x-api-key header.

    The key is kept in the local state database only.
    """
    from reqres_users.api import set_api_key as store_api_key

    try:
        store_api_key(api_key, ctx.obj.get("db_path"))
    except ReqresError as e:
        print_error(str(e))
        sys.exit(1)

    print_success("The API key has been saved.")


@cli.command()
@click.option("--clear", is_flag=True, help="Clear all cached data.")
@click.option("--stats", is_flag=True, help="Show cache statistics.")
@click.option("--cleanup", is_flag=True, help="Remove expired entries.")
@click.option(
    "--invalidate-tag",
    type=str,
    help=f"Drop every entry carrying TAG (e.g. '{ReqresClient.CACHE_TAG}').",
)
@click.pass_context
def cache(
    ctx: click.Context,
    clear: bool,
    stats: bool,
    cleanup: bool,
    invalidate_tag: Optional[str],
) -> None:
    """Manage the local cache.

    \b
    Entries:
      - reqres_users:response:*  cached pages, tagged, expire after the TTL
      - reqres_users:data_hash:* change-detection baselines, permanent

    \b
    Examples:
        reqres-users cache --stats
        reqres-users cache --invalidate-tag reqres_users
        reqres-users cache --clear
    """
    from reqres_users.cache.sqlite import CacheLayer

    cache_layer = CacheLayer(ctx.obj.get("db_path"))

    if clear:
        count = cache_layer.clear()
        print_success(f"Cache cleared. Removed {count} entries.")
    elif cleanup:
        count = cache_layer.cleanup()
        print_success(f"Cleanup complete. Removed {count} expired entries.")
    elif invalidate_tag:
        count = cache_layer.invalidate_tags([invalidate_tag])
        print_success(f"Invalidated {count} entries tagged '{invalidate_tag}'.")
    elif stats:
        print_cache_stats(cache_layer.stats())
    else:
        click.echo(ctx.get_help())


@cli.command()
@click.option("--host", envvar="REQRES_USERS_HOST", default="127.0.0.1", show_default=True)
@click.option("--port", envvar="REQRES_USERS_PORT", type=int, default=8080, show_default=True)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve the user list page, AJAX pager and settings form."""
    from aiohttp import web

    from reqres_users.cache.sqlite import CacheLayer
    from reqres_users.web.app import SETTINGS_PATH, create_app

    logging.getLogger().setLevel(logging.INFO)

    app = create_app(CacheLayer(ctx.obj.get("db_path")))
    print_info(f"Settings form at http://{host}:{port}{SETTINGS_PATH}")
    web.run_app(app, host=host, port=port, print=None)


if __name__ == "__main__":
    cli()
