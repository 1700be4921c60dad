"""
Command-line interface for reqres-users.

Provides Click-based CLI commands for fetching users, managing the
cache and serving the web widget.
"""

from reqres_users.cli.main import cli

__all__ = ["cli"]
