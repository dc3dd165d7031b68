"""
Diaper Commands.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.dates import format_date, now, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import (
    DiaperType,
    optional_string,
    parse_boolean,
    validate_diaper_type,
)

app = typer.Typer(help="Log and manage diaper changes")
log_app = typer.Typer(help="Quick log a diaper change that happened now")
app.add_typer(log_app, name="log")

DIAPER_PATH = "/api/diaper-log"

COLOR = typer.Option(None, "--color", help="Color")
CONDITION = typer.Option(None, "--condition", help="Condition description")
TYPE_HELP = "Diaper type (WET, DIRTY, BOTH)"


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


DIAPER_COLUMNS = [
    Column("id", "ID", width=38),
    Column("time", "Time", width=18, formatter=format_date),
    Column("type", "Type", width=8),
    Column("color", "Color", width=12),
    Column("blowout", "Blowout", width=8, formatter=_yes_no),
]

DIAPER_FIELDS = [
    Field("id", "ID"),
    Field("time", "Time", format_date),
    Field("type", "Type"),
    Field("condition", "Condition"),
    Field("color", "Color"),
    Field("blowout", "Blowout", _yes_no),
    Field("createdAt", "Created", format_date),
]

DIAPER_PLAIN = ["id", "time", "type", "color", "blowout"]


def _log(
    cli: CliContext,
    diaper_type: DiaperType,
    baby: Optional[str],
    output: Optional[str],
    message: str,
    **details: Any,
) -> None:
    mode = cli.resolve_mode(output)
    fields = {
        "babyId": cli.resolve_baby_id(baby),
        "time": now(),
        "type": diaper_type.value,
        **{key: value for key, value in details.items() if value is not None},
    }
    record = cli.run(cli.records(DIAPER_PATH).create(fields))
    success(message)
    render(record, mode=mode, fields=DIAPER_FIELDS)


@app.command("list")
def list_logs(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List diaper logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list diaper logs"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        logs = cli.run(cli.records(DIAPER_PATH).list(**filters))
    render(logs, mode=mode, columns=DIAPER_COLUMNS, plain_fields=DIAPER_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Diaper log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one diaper log."""
    cli = get_context(ctx)
    with handle_errors("get diaper log"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(DIAPER_PATH).get(log_id))
    render(record, mode=mode, fields=DIAPER_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    diaper_type: str = typer.Option(..., "--type", help=TYPE_HELP),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601, default: now)"),
    condition: Optional[str] = CONDITION,
    color: Optional[str] = COLOR,
    blowout: bool = typer.Option(False, "--blowout", help="Mark as blowout"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a diaper log with an explicit time."""
    cli = get_context(ctx)
    with handle_errors("create diaper log"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": parse_date(time) if time else now(),
            "type": validate_diaper_type(diaper_type).value,
            "condition": optional_string(condition),
            "color": optional_string(color),
            "blowout": True if blowout else None,
        }
        record = cli.run(cli.records(DIAPER_PATH).create({k: v for k, v in fields.items() if v is not None}))
    success("Diaper log created")
    render(record, mode=mode, fields=DIAPER_FIELDS)


@log_app.command()
def wet(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a wet diaper."""
    cli = get_context(ctx)
    with handle_errors("log wet diaper"):
        _log(cli, DiaperType.WET, baby, output, "Wet diaper logged")


@log_app.command()
def dirty(
    ctx: typer.Context,
    color: Optional[str] = COLOR,
    condition: Optional[str] = CONDITION,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a dirty diaper."""
    cli = get_context(ctx)
    with handle_errors("log dirty diaper"):
        _log(
            cli,
            DiaperType.DIRTY,
            baby,
            output,
            "Dirty diaper logged",
            color=optional_string(color),
            condition=optional_string(condition),
        )


@log_app.command()
def both(
    ctx: typer.Context,
    color: Optional[str] = COLOR,
    condition: Optional[str] = CONDITION,
    blowout: bool = typer.Option(False, "--blowout", help="Mark as blowout"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a wet and dirty diaper."""
    cli = get_context(ctx)
    with handle_errors("log diaper"):
        _log(
            cli,
            DiaperType.BOTH,
            baby,
            output,
            f"Wet & dirty diaper logged{' (blowout)' if blowout else ''}",
            color=optional_string(color),
            condition=optional_string(condition),
            blowout=True if blowout else None,
        )


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Diaper log ID"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601)"),
    diaper_type: Optional[str] = typer.Option(None, "--type", help=TYPE_HELP),
    condition: Optional[str] = CONDITION,
    color: Optional[str] = COLOR,
    blowout: Optional[str] = typer.Option(None, "--blowout", help="Blowout status (true/false)"),
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Update a diaper log.

    Examples:
        sprout-track diaper update <id> --type BOTH --blowout false
    """
    cli = get_context(ctx)
    with handle_errors("update diaper log"):
        mode = cli.resolve_mode(output)
        fields = {
            "time": parse_date(time) if time else None,
            "type": validate_diaper_type(diaper_type).value if diaper_type else None,
            "condition": optional_string(condition),
            "color": optional_string(color),
            "blowout": parse_boolean(blowout) if blowout is not None else None,
        }
        record = cli.run(
            cli.records(DIAPER_PATH).update(log_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Diaper log updated")
    render(record, mode=mode, fields=DIAPER_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Diaper log ID"),
    yes: bool = YES,
) -> None:
    """Delete a diaper log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this diaper log?", yes):
        return
    with handle_errors("delete diaper log"):
        cli.run(cli.records(DIAPER_PATH).delete(log_id))
    success("Diaper log deleted")
