"""
Shared Command Options.

Option declarations reused across command groups, so every data command
spells -o/--output, -b/--baby and -y/--yes the same way.
"""

import typer

from sprout_track.cli.console import info

OUTPUT = typer.Option(None, "--output", "-o", help="Output format (json, table, plain)")
BABY = typer.Option(None, "--baby", "-b", help="Baby ID (uses default if not specified)")
YES = typer.Option(False, "--yes", "-y", help="Skip confirmation")
START_DATE = typer.Option(None, "--start", help="Start date (ISO8601 or YYYY-MM-DD)")
END_DATE = typer.Option(None, "--end", help="End date (ISO8601 or YYYY-MM-DD)")


def confirmed(prompt: str, yes: bool) -> bool:
    """Ask before a destructive action unless --yes was given."""
    if yes or typer.confirm(prompt, default=False, err=True):
        return True
    info("Cancelled.")
    return False
