"""
Sprout-Track CLI.

Command-line client for a Sprout-Track baby tracking server.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    sprout-track --help                                  # Show help

    # Setup
    sprout-track config set-server https://tracker.example.com
    sprout-track auth login                              # Prompts for PIN
    sprout-track baby list
    sprout-track baby select <id>                        # Default baby

    # Sessions
    sprout-track sleep start --type NAP
    sprout-track sleep end --quality GOOD
    sprout-track pump log --left 4 --right 3.5 --duration 20

    # Quick logs
    sprout-track feed log bottle --amount 4
    sprout-track diaper log wet
    sprout-track bath log --no-shampoo
    sprout-track note add "First smile"
    sprout-track measurement log weight --value 12.4

    # Output
    sprout-track sleep list -o json | jq '.[0]'
    sprout-track config set-output plain

Options:
    --verbose, -v     Enable verbose output (INFO level logging)
    --debug, -d       Enable debug mode (DEBUG level logging)
    --help            Show help message
"""

import structlog
import typer

from sprout_track.cli.commands import (
    auth_app,
    baby_app,
    bath_app,
    config_app,
    diaper_app,
    feed_app,
    measurement_app,
    medicine_log_app,
    milestone_app,
    note_app,
    pump_app,
    settings_app,
    sleep_app,
    timeline,
)
from sprout_track.cli.console import error
from sprout_track.cli.context import CliContext
from sprout_track.core.exceptions import ConfigurationError
from sprout_track.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

app = typer.Typer(
    name="sprout-track",
    help="Sprout-Track CLI - log and review baby activities from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(config_app, name="config")
app.add_typer(auth_app, name="auth")
app.add_typer(baby_app, name="baby")
app.add_typer(sleep_app, name="sleep")
app.add_typer(pump_app, name="pump")
app.add_typer(feed_app, name="feed")
app.add_typer(diaper_app, name="diaper")
app.add_typer(bath_app, name="bath")
app.add_typer(note_app, name="note")
app.add_typer(medicine_log_app, name="medicine-log")
app.add_typer(measurement_app, name="measurement")
app.add_typer(milestone_app, name="milestone")
app.add_typer(settings_app, name="settings")
app.command("timeline")(timeline)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Sprout-Track CLI.

    Track sleep, feeds, diapers, pumping, baths, notes, medicine,
    measurements and milestones against a Sprout-Track server.
    Results go to stdout; status messages and logs go to stderr.
    """
    try:
        if debug:
            setup_logging(level="DEBUG")
        elif verbose:
            setup_logging(level="INFO")
        else:
            setup_logging()
    except ConfigurationError as e:
        # Logging is not configured yet, so report without the logger.
        error(e.message)
        raise typer.Exit(1) from e

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(source="cli", command=ctx.invoked_subcommand)

    if ctx.obj is None:
        ctx.obj = CliContext.from_environment()

    logger.debug("CLI started", command=ctx.invoked_subcommand)


if __name__ == "__main__":
    app()
