"""
Pump Commands.

Pumping sessions. Amounts are per side; the total is always derived as
left + right before sending.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, format_duration, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.sessions import PUMP, SessionTracker
from sprout_track.cli.validation import optional_number, optional_string, require_number

app = typer.Typer(help="Log and manage pumping sessions")

UNIT_HELP = "Unit (OZ, ML, default: OZ)"


def _ended(value: Any) -> str:
    return format_date(value) if value else "Ongoing"


PUMP_COLUMNS = [
    Column("id", "ID", width=38),
    Column("startTime", "Start", width=18, formatter=format_date),
    Column("endTime", "End", width=18, formatter=_ended),
    Column("leftAmount", "Left", width=8),
    Column("rightAmount", "Right", width=8),
    Column("totalAmount", "Total", width=8),
    Column("unitAbbr", "Unit", width=6),
]

PUMP_FIELDS = [
    Field("id", "ID"),
    Field("startTime", "Start Time", format_date),
    Field("endTime", "End Time", _ended),
    Field("duration", "Duration", format_duration),
    Field("leftAmount", "Left Amount"),
    Field("rightAmount", "Right Amount"),
    Field("totalAmount", "Total Amount"),
    Field("unitAbbr", "Unit"),
    Field("notes", "Notes"),
    Field("createdAt", "Created", format_date),
]

PUMP_PLAIN = ["id", "startTime", "endTime", "leftAmount", "rightAmount", "totalAmount"]


def _unit(value: str | None) -> str | None:
    return value.strip().upper() if value and value.strip() else None


def _amounts(left: str | None, right: str | None) -> dict[str, Any]:
    fields = {
        "leftAmount": optional_number(left, "Left amount"),
        "rightAmount": optional_number(right, "Right amount"),
    }
    if fields["leftAmount"] is not None and fields["rightAmount"] is not None:
        fields["totalAmount"] = fields["leftAmount"] + fields["rightAmount"]
    return fields


def _total_text(record: dict[str, Any], unit: str | None) -> str:
    total = record.get("totalAmount")
    return f"{total} {record.get('unitAbbr') or unit or 'OZ'} total"


@app.command("list")
def list_logs(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List pump logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list pump logs"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        logs = cli.run(cli.records(PUMP.path).list(**filters))
    render(logs, mode=mode, columns=PUMP_COLUMNS, plain_fields=PUMP_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Pump log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one pump log."""
    cli = get_context(ctx)
    with handle_errors("get pump log"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(PUMP.path).get(log_id))
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    start: str = typer.Option(..., "--start", help="Start time (ISO8601)"),
    end: Optional[str] = typer.Option(None, "--end", help="End time (ISO8601)"),
    left: Optional[str] = typer.Option(None, "--left", help="Left side amount"),
    right: Optional[str] = typer.Option(None, "--right", help="Right side amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help=UNIT_HELP),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a pump log with explicit times."""
    cli = get_context(ctx)
    with handle_errors("create pump log"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "startTime": parse_date(start),
            "endTime": parse_date(end) if end else None,
            **_amounts(left, right),
            "unitAbbr": _unit(unit),
            "notes": optional_string(notes),
        }
        record = cli.run(cli.records(PUMP.path).create({k: v for k, v in fields.items() if v is not None}))
    success("Pump log created")
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def start(
    ctx: typer.Context,
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Start a pumping session.

    Refused while another pumping session for the baby is still ongoing.
    """
    cli = get_context(ctx)
    with handle_errors("start pump session"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        tracker = SessionTracker(cli.records(PUMP.path), PUMP, cli.clock)
        record = cli.run(tracker.start(baby_id, {"notes": optional_string(notes)}))
    success("Pump session started")
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def end(
    ctx: typer.Context,
    left: str = typer.Option(..., "--left", help="Left side amount"),
    right: str = typer.Option(..., "--right", help="Right side amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help=UNIT_HELP),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    End the ongoing pumping session.

    Examples:
        sprout-track pump end --left 4 --right 3.5
    """
    cli = get_context(ctx)
    with handle_errors("end pump session"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        fields = {
            "leftAmount": require_number(left, "Left amount"),
            "rightAmount": require_number(right, "Right amount"),
            "unitAbbr": _unit(unit),
            "notes": optional_string(notes),
        }
        tracker = SessionTracker(cli.records(PUMP.path), PUMP, cli.clock)
        record = cli.run(tracker.end(baby_id, fields))
    success(f"Pump session ended ({_total_text(record, fields['unitAbbr'])})")
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def log(
    ctx: typer.Context,
    left: str = typer.Option(..., "--left", help="Left side amount"),
    right: str = typer.Option(..., "--right", help="Right side amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help=UNIT_HELP),
    duration: Optional[str] = typer.Option(None, "--duration", help="Duration in minutes (default: 15)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Quick log a completed pumping session that ended now.

    Examples:
        sprout-track pump log --left 4 --right 3.5 --duration 20
    """
    cli = get_context(ctx)
    with handle_errors("log pump session"):
        mode = cli.resolve_mode(output)
        baby_id = cli.resolve_baby_id(baby)
        fields = {
            "leftAmount": require_number(left, "Left amount"),
            "rightAmount": require_number(right, "Right amount"),
            "unitAbbr": _unit(unit),
            "notes": optional_string(notes),
        }
        minutes = optional_number(duration, "Duration")
        tracker = SessionTracker(cli.records(PUMP.path), PUMP, cli.clock)
        record = cli.run(tracker.log(baby_id, fields, duration_minutes=minutes))
    success(f"Pump logged ({_total_text(record, fields['unitAbbr'])})")
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Pump log ID"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO8601)"),
    end: Optional[str] = typer.Option(None, "--end", help="End time (ISO8601)"),
    left: Optional[str] = typer.Option(None, "--left", help="Left side amount"),
    right: Optional[str] = typer.Option(None, "--right", help="Right side amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help=UNIT_HELP),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a pump log. The total is recomputed only when both sides are given."""
    cli = get_context(ctx)
    with handle_errors("update pump log"):
        mode = cli.resolve_mode(output)
        fields = {
            "startTime": parse_date(start) if start else None,
            "endTime": parse_date(end) if end else None,
            **_amounts(left, right),
            "unitAbbr": _unit(unit),
            "notes": optional_string(notes),
        }
        record = cli.run(
            cli.records(PUMP.path).update(log_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Pump log updated")
    render(record, mode=mode, fields=PUMP_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Pump log ID"),
    yes: bool = YES,
) -> None:
    """Delete a pump log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this pump log?", yes):
        return
    with handle_errors("delete pump log"):
        cli.run(cli.records(PUMP.path).delete(log_id))
    success("Pump log deleted")
