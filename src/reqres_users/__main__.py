"""
CLI entry point for running reqres_users as a module.

Usage: python -m reqres_users [OPTIONS] COMMAND [ARGS]...
"""

from reqres_users.cli.main import cli

if __name__ == "__main__":
    cli()
