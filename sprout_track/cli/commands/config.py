"""
Configuration Commands.

Commands for the local settings file: server URL, default output format,
and resetting stored credentials.
"""

from typing import Optional

import typer

from sprout_track.cli.console import console, handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.options import OUTPUT, YES, confirmed
from sprout_track.cli.output import Field, render
from sprout_track.cli.validation import validate_output_format, validate_url

app = typer.Typer(help="Manage CLI configuration")

CONFIG_FIELDS = [
    Field("server", "Server"),
    Field("family_slug", "Family Slug"),
    Field("default_baby_id", "Default Baby ID"),
    Field("output_format", "Output Format"),
    Field("token", "Token"),
    Field("token_expires", "Token Expires"),
    Field("config_path", "Config Path"),
]

TOKEN_PREVIEW_LENGTH = 20


def _mask_token(token: str | None) -> str | None:
    if not token:
        return None
    return f"{token[:TOKEN_PREVIEW_LENGTH]}..."


@app.command("set-server")
def set_server(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Server URL, e.g. https://tracker.example.com"),
) -> None:
    """
    Set the Sprout-Track server URL.

    Only the origin is kept; any path is dropped.

    Examples:
        sprout-track config set-server https://tracker.example.com
    """
    cli = get_context(ctx)
    with handle_errors("set server"):
        server = validate_url(url)
        cli.store.update(server=server)
        cli.reset_client()
    success(f"Server set to: {server}")


@app.command("set-output")
def set_output(
    ctx: typer.Context,
    output_format: str = typer.Argument(..., metavar="FORMAT", help="json, table, or plain"),
) -> None:
    """Set the default output format."""
    cli = get_context(ctx)
    with handle_errors("set output format"):
        mode = validate_output_format(output_format)
        cli.store.update(output_format=mode)
    success(f"Default output format set to: {mode.value}")


@app.command()
def show(
    ctx: typer.Context,
    output: Optional[str] = OUTPUT,
) -> None:
    """Show the current configuration (token masked)."""
    cli = get_context(ctx)
    with handle_errors("show configuration"):
        mode = cli.resolve_mode(output)
        config = cli.store.config
        display = {
            **config.model_dump(mode="json", exclude={"cached_settings"}),
            "token": _mask_token(config.token),
            "config_path": str(cli.store.path),
        }
    render(display, mode=mode, fields=CONFIG_FIELDS)


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = YES,
) -> None:
    """Reset configuration to defaults, including authentication."""
    cli = get_context(ctx)
    if not confirmed("This will clear all configuration including authentication. Continue?", yes):
        return
    with handle_errors("reset configuration"):
        cli.store.reset()
        cli.reset_client()
    success("Configuration reset to defaults")


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the configuration file path."""
    cli = get_context(ctx)
    console.print(str(cli.store.path), markup=False, highlight=False, soft_wrap=True)
