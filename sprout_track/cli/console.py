"""
Console Streams and Command Boundary.

Stdout carries only rendered results. Status lines (success, info,
warnings, errors) go to stderr so `sprout-track ... -o json | jq` stays clean.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markup import escape

from sprout_track.core.exceptions import ApplicationError
from sprout_track.core.logging import get_logger

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    err_console.print(f"[green]✓[/green] {escape(message)}", highlight=False)


def error(message: str) -> None:
    err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)


def warning(message: str) -> None:
    err_console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)


def info(message: str) -> None:
    err_console.print(f"[blue]ℹ[/blue] {escape(message)}", highlight=False)


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """
    Convert application errors into one stderr line and exit code 1.

    Usage:
        with handle_errors("start sleep session"):
            ...
    """
    try:
        yield
    except ApplicationError as e:
        logger.debug("Command failed", action=action, code=e.code, error=e.message)
        error(e.message)
        raise typer.Exit(1) from e
