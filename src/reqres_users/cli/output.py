"""
Rich terminal output helpers for CLI.

Provides functions for printing user tables, cache statistics and
status messages using the Rich library.
"""

from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from reqres_users.core.models import DisplaySettings, FetchResult

# Console instance for all output
console = Console()


def print_users(result: FetchResult, page: int, labels: tuple[str, str, str] | None = None) -> None:
    """Print one page of users as a table.

    Args:
        result: Fetched page.
        page: 1-based page shown in the title.
        labels: Column labels; defaults to the widget defaults.
    """
    if labels is None:
        labels = DisplaySettings().labels

    table = Table(
        title=f"Users (page {page} of {result.total_pages})",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", justify="right", style="dim")
    for label in labels:
        table.add_column(label)

    for user in result.users:
        table.add_row(str(user.id), user.email, user.first_name, user.last_name)

    if result.is_empty:
        console.print("[yellow]No users found.[/yellow]")
    else:
        console.print(table)

    console.print(
        f"[dim]{len(result.users)} shown, {result.total} total, "
        f"{result.total_pages} page(s)[/dim]"
    )


def print_cache_stats(stats: dict[str, Any]) -> None:
    """Print cache statistics."""
    table = Table(title="Cache Statistics", box=box.SIMPLE, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Database", stats["db_path"])
    table.add_row("Size", f"{stats['db_size_bytes'] / 1024:.1f} KB")
    table.add_row("Total entries", str(stats["total_entries"]))
    table.add_row("Valid entries", str(stats["valid_entries"]))
    table.add_row("Expired entries", str(stats["expired_entries"]))
    table.add_row("Permanent entries", str(stats["permanent_entries"]))

    for tag, count in stats["entries_by_tag"].items():
        table.add_row(f"Tagged '{tag}'", str(count))

    console.print(table)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/] {message}")
