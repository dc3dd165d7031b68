"""
Bath Commands.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, now, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import optional_string, parse_boolean

app = typer.Typer(help="Log and manage baths")

BATH_PATH = "/api/bath-log"


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


BATH_COLUMNS = [
    Column("id", "ID", width=38),
    Column("time", "Time", width=18, formatter=format_date),
    Column("soapUsed", "Soap", width=6, formatter=_yes_no),
    Column("shampooUsed", "Shampoo", width=8, formatter=_yes_no),
    Column("notes", "Notes", width=30),
]

BATH_FIELDS = [
    Field("id", "ID"),
    Field("time", "Time", format_date),
    Field("soapUsed", "Soap Used", _yes_no),
    Field("shampooUsed", "Shampoo Used", _yes_no),
    Field("notes", "Notes"),
    Field("babyId", "Baby ID"),
    Field("createdAt", "Created", format_date),
]

BATH_PLAIN = ["id", "time", "soapUsed", "shampooUsed"]

NOTES = typer.Option(None, "--notes", help="Notes")


@app.command("list")
def list_logs(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List bath logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list bath logs"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        logs = cli.run(cli.records(BATH_PATH).list(**filters))
    render(logs, mode=mode, columns=BATH_COLUMNS, plain_fields=BATH_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Bath log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one bath log."""
    cli = get_context(ctx)
    with handle_errors("get bath log"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(BATH_PATH).get(log_id))
    render(record, mode=mode, fields=BATH_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601, default: now)"),
    soap: bool = typer.Option(True, "--soap/--no-soap", help="Soap was used"),
    shampoo: bool = typer.Option(True, "--shampoo/--no-shampoo", help="Shampoo was used"),
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a bath log with an explicit time."""
    cli = get_context(ctx)
    with handle_errors("create bath log"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": parse_date(time) if time else now(),
            "soapUsed": soap,
            "shampooUsed": shampoo,
        }
        text = optional_string(notes)
        if text:
            fields["notes"] = text
        record = cli.run(cli.records(BATH_PATH).create(fields))
    success("Bath log created")
    render(record, mode=mode, fields=BATH_FIELDS)


@app.command()
def log(
    ctx: typer.Context,
    soap: bool = typer.Option(True, "--soap/--no-soap", help="Soap was used"),
    shampoo: bool = typer.Option(True, "--shampoo/--no-shampoo", help="Shampoo was used"),
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Quick log a bath that happened now.

    Examples:
        sprout-track bath log --no-shampoo
    """
    cli = get_context(ctx)
    with handle_errors("log bath"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": now(),
            "soapUsed": soap,
            "shampooUsed": shampoo,
        }
        text = optional_string(notes)
        if text:
            fields["notes"] = text
        record = cli.run(cli.records(BATH_PATH).create(fields))

    details = [name for name, used in (("soap", soap), ("shampoo", shampoo)) if used]
    success(f"Bath logged ({', '.join(details)})" if details else "Bath logged")
    render(record, mode=mode, fields=BATH_FIELDS)


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Bath log ID"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601)"),
    soap: Optional[str] = typer.Option(None, "--soap", help="Soap used (true/false)"),
    shampoo: Optional[str] = typer.Option(None, "--shampoo", help="Shampoo used (true/false)"),
    notes: Optional[str] = NOTES,
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a bath log."""
    cli = get_context(ctx)
    with handle_errors("update bath log"):
        mode = cli.resolve_mode(output)
        fields = {
            "time": parse_date(time) if time else None,
            "soapUsed": parse_boolean(soap) if soap is not None else None,
            "shampooUsed": parse_boolean(shampoo) if shampoo is not None else None,
            "notes": optional_string(notes),
        }
        record = cli.run(
            cli.records(BATH_PATH).update(log_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Bath log updated")
    render(record, mode=mode, fields=BATH_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Bath log ID"),
    yes: bool = YES,
) -> None:
    """Delete a bath log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this bath log?", yes):
        return
    with handle_errors("delete bath log"):
        cli.run(cli.records(BATH_PATH).delete(log_id))
    success("Bath log deleted")
