"""
Styled terminal output for the CLI, built on Click.
"""

from __future__ import annotations

import click

_CHECK = "✓"
_CROSS = "✗"


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    """Print error message in red."""
    click.echo(click.style(message, fg="red"), err=True)


def warning(message: str) -> None:
    click.echo(click.style(message, fg="yellow"), err=True)


def info(message: str) -> None:
    click.echo(click.style(message, fg="cyan"))


def kv(key: str, value: object, *, key_width: int = 16, indent: int = 2) -> None:
    """
    Print an aligned key-value pair.

        Database:       sqlite:///archmarket.db
        Routes:         42
    """
    prefix = " " * indent
    padding = " " * max(1, key_width - len(key) - 1)
    click.echo(f"{prefix}{click.style(f'{key}:', fg='white')}{padding}{click.style(str(value), fg='cyan')}")
