"""
Sleep Commands.

Sleep logs, including start/end tracking of an ongoing session.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, format_duration, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.sessions import SLEEP, SessionTracker
from sprout_track.cli.validation import (
    optional_string,
    require_number,
    validate_sleep_quality,
    validate_sleep_type,
)

app = typer.Typer(help="Log and manage sleep activities")

TYPE_HELP = "Sleep type (NAP, NIGHT_SLEEP)"
QUALITY_HELP = "Sleep quality (POOR, FAIR, GOOD, EXCELLENT)"


def _ended(value: Any) -> str:
    return format_date(value) if value else "Ongoing"


SLEEP_COLUMNS = [
    Column("id", "ID", width=38),
    Column("startTime", "Start", width=18, formatter=format_date),
    Column("endTime", "End", width=18, formatter=_ended),
    Column("type", "Type", width=12),
    Column("duration", "Duration", width=10, formatter=format_duration),
    Column("quality", "Quality", width=10),
]

SLEEP_FIELDS = [
    Field("id", "ID"),
    Field("startTime", "Start Time", format_date),
    Field("endTime", "End Time", _ended),
    Field("type", "Type"),
    Field("duration", "Duration", format_duration),
    Field("location", "Location"),
    Field("quality", "Quality"),
    Field("createdAt", "Created", format_date),
]

SLEEP_PLAIN = ["id", "startTime", "endTime", "type", "duration"]


def _quality(value: str | None) -> str | None:
    return validate_sleep_quality(value).value if value else None


@app.command("list")
def list_logs(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List sleep logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list sleep logs"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        filters = {
            "babyId": baby_id,
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        logs = cli.run(cli.records(SLEEP.path).list(**filters))
    render(logs, mode=mode, columns=SLEEP_COLUMNS, plain_fields=SLEEP_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Sleep log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one sleep log."""
    cli = get_context(ctx)
    with handle_errors("get sleep log"):
        mode = cli.resolve_mode(output)
        log = cli.run(cli.records(SLEEP.path).get(log_id))
    render(log, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    sleep_type: str = typer.Option(..., "--type", help=TYPE_HELP),
    start: str = typer.Option(..., "--start", help="Start time (ISO8601)"),
    end: Optional[str] = typer.Option(None, "--end", help="End time (ISO8601)"),
    location: Optional[str] = typer.Option(None, "--location", help="Sleep location"),
    quality: Optional[str] = typer.Option(None, "--quality", help=QUALITY_HELP),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a sleep log with explicit times."""
    cli = get_context(ctx)
    with handle_errors("create sleep log"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "startTime": parse_date(start),
            "type": validate_sleep_type(sleep_type).value,
            "endTime": parse_date(end) if end else None,
            "location": optional_string(location),
            "quality": _quality(quality),
        }
        log = cli.run(cli.records(SLEEP.path).create({k: v for k, v in fields.items() if v is not None}))
    success("Sleep log created")
    render(log, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def start(
    ctx: typer.Context,
    sleep_type: str = typer.Option(..., "--type", help=TYPE_HELP),
    location: Optional[str] = typer.Option(None, "--location", help="Sleep location"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Start a sleep session.

    Refused while another sleep session for the baby is still ongoing.

    Examples:
        sprout-track sleep start --type NAP
    """
    cli = get_context(ctx)
    with handle_errors("start sleep session"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        kind = validate_sleep_type(sleep_type)
        tracker = SessionTracker(cli.records(SLEEP.path), SLEEP, cli.clock)
        log = cli.run(tracker.start(baby_id, {"type": kind.value, "location": optional_string(location)}))
    success(f"Sleep started ({kind.value})")
    render(log, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def end(
    ctx: typer.Context,
    quality: Optional[str] = typer.Option(None, "--quality", help=QUALITY_HELP),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """End the ongoing sleep session."""
    cli = get_context(ctx)
    with handle_errors("end sleep session"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        fields = {"quality": _quality(quality)}
        tracker = SessionTracker(cli.records(SLEEP.path), SLEEP, cli.clock)
        log = cli.run(tracker.end(baby_id, fields))
    success(f"Sleep ended ({format_duration(log.get('duration'))})")
    render(log, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def log(
    ctx: typer.Context,
    sleep_type: str = typer.Option(..., "--type", help=TYPE_HELP),
    duration: str = typer.Option(..., "--duration", help="Duration in minutes"),
    location: Optional[str] = typer.Option(None, "--location", help="Sleep location"),
    quality: Optional[str] = typer.Option(None, "--quality", help=QUALITY_HELP),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Quick log a completed sleep that ended now.

    Examples:
        sprout-track sleep log --type NAP --duration 45
    """
    cli = get_context(ctx)
    with handle_errors("log sleep"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        minutes = require_number(duration, "Duration")
        fields = {
            "type": validate_sleep_type(sleep_type).value,
            "location": optional_string(location),
            "quality": _quality(quality),
        }
        tracker = SessionTracker(cli.records(SLEEP.path), SLEEP, cli.clock)
        record = cli.run(tracker.log(baby_id, fields, duration_minutes=minutes))
    success(f"Sleep logged ({format_duration(record.get('duration'))})")
    render(record, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Sleep log ID"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO8601)"),
    end: Optional[str] = typer.Option(None, "--end", help="End time (ISO8601)"),
    sleep_type: Optional[str] = typer.Option(None, "--type", help=TYPE_HELP),
    location: Optional[str] = typer.Option(None, "--location", help="Sleep location"),
    quality: Optional[str] = typer.Option(None, "--quality", help=QUALITY_HELP),
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a sleep log."""
    cli = get_context(ctx)
    with handle_errors("update sleep log"):
        mode = cli.resolve_mode(output)
        fields = {
            "startTime": parse_date(start) if start else None,
            "endTime": parse_date(end) if end else None,
            "type": validate_sleep_type(sleep_type).value if sleep_type else None,
            "location": optional_string(location),
            "quality": _quality(quality),
        }
        record = cli.run(
            cli.records(SLEEP.path).update(log_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Sleep log updated")
    render(record, mode=mode, fields=SLEEP_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Sleep log ID"),
    yes: bool = YES,
) -> None:
    """Delete a sleep log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this sleep log?", yes):
        return
    with handle_errors("delete sleep log"):
        cli.run(cli.records(SLEEP.path).delete(log_id))
    success("Sleep log deleted")
