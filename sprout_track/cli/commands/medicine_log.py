"""
Medicine Log Commands.

Doses given to a baby. Each log points at a medicine defined on the
server by its ID.
"""

from typing import Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, now, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import optional_number, optional_string, require_number, require_string

app = typer.Typer(help="Log medicine administration")

MEDICINE_LOG_PATH = "/api/medicine-log"

UNIT = typer.Option(None, "--unit", help="Unit abbreviation (e.g., ML, MG)")
NOTES = typer.Option(None, "--notes", help="Notes")

MEDICINE_LOG_COLUMNS = [
    Column("id", "ID", width=38),
    Column("time", "Time", width=18, formatter=format_date),
    Column("medicineId", "Medicine ID", width=38),
    Column("doseAmount", "Dose", width=8),
    Column("unitAbbr", "Unit", width=6),
]

MEDICINE_LOG_FIELDS = [
    Field("id", "ID"),
    Field("time", "Time", format_date),
    Field("medicineId", "Medicine ID"),
    Field("doseAmount", "Dose Amount"),
    Field("unitAbbr", "Unit"),
    Field("notes", "Notes"),
    Field("babyId", "Baby ID"),
    Field("createdAt", "Created", format_date),
]

MEDICINE_LOG_PLAIN = ["id", "time", "medicineId", "doseAmount", "unitAbbr"]


@app.command("list")
def list_logs(
    ctx: typer.Context,
    medicine: Optional[str] = typer.Option(None, "--medicine", help="Filter by medicine ID"),
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List medicine logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list medicine logs"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "medicineId": optional_string(medicine),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        logs = cli.run(cli.records(MEDICINE_LOG_PATH).list(**filters))
    render(logs, mode=mode, columns=MEDICINE_LOG_COLUMNS, plain_fields=MEDICINE_LOG_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Medicine log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one medicine log."""
    cli = get_context(ctx)
    with handle_errors("get medicine log"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(MEDICINE_LOG_PATH).get(log_id))
    render(record, mode=mode, fields=MEDICINE_LOG_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    medicine: str = typer.Option(..., "--medicine", help="Medicine ID"),
    dose: str = typer.Option(..., "--dose", help="Dose amount"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601, default: now)"),
    unit: Optional[str] = UNIT,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Record a dose.

    Without --time the dose is stamped now.

    Examples:
        sprout-track medicine-log create --medicine <id> --dose 2.5 --unit ML
        sprout-track medicine-log create --medicine <id> --dose 5 --time 2024-01-15T08:00:00Z
    """
    cli = get_context(ctx)
    with handle_errors("create medicine log"):
        mode = cli.resolve_mode(output)
        amount = require_number(dose, "Dose")
        unit_abbr = optional_string(unit)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "medicineId": require_string(medicine, "Medicine ID"),
            "time": parse_date(time) if time else now(),
            "doseAmount": amount,
            "unitAbbr": unit_abbr,
            "notes": optional_string(notes),
        }
        record = cli.run(
            cli.records(MEDICINE_LOG_PATH).create({k: v for k, v in fields.items() if v is not None})
        )
    success(f"Medicine logged ({amount} {unit_abbr})" if unit_abbr else f"Medicine logged ({amount})")
    render(record, mode=mode, fields=MEDICINE_LOG_FIELDS)


# Quick form of create.
app.command("log", help="Quick log a dose given now.")(create)


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Medicine log ID"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601)"),
    dose: Optional[str] = typer.Option(None, "--dose", help="Dose amount"),
    unit: Optional[str] = UNIT,
    notes: Optional[str] = NOTES,
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a medicine log."""
    cli = get_context(ctx)
    with handle_errors("update medicine log"):
        mode = cli.resolve_mode(output)
        fields = {
            "time": parse_date(time) if time else None,
            "doseAmount": optional_number(dose, "Dose"),
            "unitAbbr": optional_string(unit),
            "notes": optional_string(notes),
        }
        record = cli.run(
            cli.records(MEDICINE_LOG_PATH).update(log_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Medicine log updated")
    render(record, mode=mode, fields=MEDICINE_LOG_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Medicine log ID"),
    yes: bool = YES,
) -> None:
    """Delete a medicine log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this medicine log?", yes):
        return
    with handle_errors("delete medicine log"):
        cli.run(cli.records(MEDICINE_LOG_PATH).delete(log_id))
    success("Medicine log deleted")
