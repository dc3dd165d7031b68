"""
Measurement Commands.

Growth and temperature readings. Measurements are stamped with a calendar
date rather than a time. The quick log subcommands fill in the family's
default unit from the cached server settings.
"""

from typing import Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.dates import format_date, format_day, parse_day
from sprout_track.cli.options import BABY, OUTPUT, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import (
    MeasurementType,
    optional_number,
    optional_string,
    require_number,
    validate_measurement_type,
)

app = typer.Typer(help="Log and manage measurements")
log_app = typer.Typer(help="Quick log a measurement")
app.add_typer(log_app, name="log")

MEASUREMENT_PATH = "/api/measurement"

TYPE_HELP = "Measurement type (HEIGHT, WEIGHT, HEAD_CIRCUMFERENCE, TEMPERATURE)"

VALUE = typer.Option(..., "--value", help="Measurement value")
QUICK_UNIT = typer.Option(None, "--unit", help="Unit (uses server default if not specified)")
DATE = typer.Option(None, "--date", help="Date (YYYY-MM-DD, default: today)")
NOTES = typer.Option(None, "--notes", help="Notes")

# Settings attribute and fallback unit per quick-logged type
DEFAULT_UNITS = {
    MeasurementType.HEIGHT: ("default_height_unit", "IN"),
    MeasurementType.HEAD_CIRCUMFERENCE: ("default_height_unit", "IN"),
    MeasurementType.WEIGHT: ("default_weight_unit", "LB"),
    MeasurementType.TEMPERATURE: ("default_temp_unit", "F"),
}

MEASUREMENT_COLUMNS = [
    Column("id", "ID", width=38),
    Column("date", "Date", width=12, formatter=format_day),
    Column("type", "Type", width=20),
    Column("value", "Value", width=8),
    Column("unit", "Unit", width=6),
]

MEASUREMENT_FIELDS = [
    Field("id", "ID"),
    Field("date", "Date", format_day),
    Field("type", "Type"),
    Field("value", "Value"),
    Field("unit", "Unit"),
    Field("notes", "Notes"),
    Field("babyId", "Baby ID"),
    Field("createdAt", "Created", format_date),
]

MEASUREMENT_PLAIN = ["id", "date", "type", "value", "unit"]


def _today(cli: CliContext) -> str:
    return cli.clock().date().isoformat()


def _default_unit(cli: CliContext, kind: MeasurementType) -> str:
    attribute, fallback = DEFAULT_UNITS[kind]
    cached = cli.store.config.cached_settings
    return getattr(cached, attribute, None) or fallback


def _save(
    cli: CliContext,
    kind: MeasurementType,
    value: str,
    unit: str,
    date: Optional[str],
    notes: Optional[str],
    baby: Optional[str],
) -> dict:
    fields = {
        "babyId": cli.resolve_baby_id(baby),
        "date": parse_day(date) if date else _today(cli),
        "type": kind.value,
        "value": require_number(value, "Value"),
        "unit": unit.upper(),
    }
    text = optional_string(notes)
    if text:
        fields["notes"] = text
    return cli.run(cli.records(MEASUREMENT_PATH).create(fields))


def _quick_log(
    cli: CliContext,
    kind: MeasurementType,
    label: str,
    value: str,
    unit: Optional[str],
    date: Optional[str],
    notes: Optional[str],
    baby: Optional[str],
    output: Optional[str],
) -> None:
    mode = cli.resolve_mode(output)
    record = _save(cli, kind, value, optional_string(unit) or _default_unit(cli, kind), date, notes, baby)
    separator = "°" if kind is MeasurementType.TEMPERATURE else " "
    success(f"{label} logged: {record.get('value')}{separator}{record.get('unit')}")
    render(record, mode=mode, fields=MEASUREMENT_FIELDS)


@app.command("list")
def list_measurements(
    ctx: typer.Context,
    measurement_type: Optional[str] = typer.Option(None, "--type", help=f"Filter by type. {TYPE_HELP}"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """List measurements for a baby."""
    cli = get_context(ctx)
    with handle_errors("list measurements"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "type": validate_measurement_type(measurement_type).value if measurement_type else None,
        }
        measurements = cli.run(cli.records(MEASUREMENT_PATH).list(**filters))
    render(measurements, mode=mode, columns=MEASUREMENT_COLUMNS, plain_fields=MEASUREMENT_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    measurement_id: str = typer.Argument(..., metavar="ID", help="Measurement ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one measurement."""
    cli = get_context(ctx)
    with handle_errors("get measurement"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(MEASUREMENT_PATH).get(measurement_id))
    render(record, mode=mode, fields=MEASUREMENT_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    measurement_type: str = typer.Option(..., "--type", help=TYPE_HELP),
    value: str = VALUE,
    unit: str = typer.Option(..., "--unit", help="Unit (IN, CM, LB, KG, F, C)"),
    date: Optional[str] = DATE,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a measurement of any type."""
    cli = get_context(ctx)
    with handle_errors("create measurement"):
        mode = cli.resolve_mode(output)
        kind = validate_measurement_type(measurement_type)
        record = _save(cli, kind, value, unit, date, notes, baby)
    success(f"Measurement created: {record.get('value')} {record.get('unit')}")
    render(record, mode=mode, fields=MEASUREMENT_FIELDS)


@log_app.command()
def height(
    ctx: typer.Context,
    value: str = VALUE,
    unit: Optional[str] = QUICK_UNIT,
    date: Optional[str] = DATE,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Log a height.

    Examples:
        sprout-track measurement log height --value 24.5
    """
    cli = get_context(ctx)
    with handle_errors("log height"):
        _quick_log(cli, MeasurementType.HEIGHT, "Height", value, unit, date, notes, baby, output)


@log_app.command()
def weight(
    ctx: typer.Context,
    value: str = VALUE,
    unit: Optional[str] = QUICK_UNIT,
    date: Optional[str] = DATE,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a weight."""
    cli = get_context(ctx)
    with handle_errors("log weight"):
        _quick_log(cli, MeasurementType.WEIGHT, "Weight", value, unit, date, notes, baby, output)


@log_app.command()
def head(
    ctx: typer.Context,
    value: str = VALUE,
    unit: Optional[str] = QUICK_UNIT,
    date: Optional[str] = DATE,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a head circumference."""
    cli = get_context(ctx)
    with handle_errors("log head circumference"):
        _quick_log(
            cli, MeasurementType.HEAD_CIRCUMFERENCE, "Head circumference", value, unit, date, notes, baby, output
        )


@log_app.command()
def temp(
    ctx: typer.Context,
    value: str = VALUE,
    unit: Optional[str] = QUICK_UNIT,
    date: Optional[str] = DATE,
    notes: Optional[str] = NOTES,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a temperature."""
    cli = get_context(ctx)
    with handle_errors("log temperature"):
        _quick_log(cli, MeasurementType.TEMPERATURE, "Temperature", value, unit, date, notes, baby, output)


@app.command()
def update(
    ctx: typer.Context,
    measurement_id: str = typer.Argument(..., metavar="ID", help="Measurement ID"),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    measurement_type: Optional[str] = typer.Option(None, "--type", help=TYPE_HELP),
    value: Optional[str] = typer.Option(None, "--value", help="Measurement value"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit"),
    notes: Optional[str] = NOTES,
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a measurement."""
    cli = get_context(ctx)
    with handle_errors("update measurement"):
        mode = cli.resolve_mode(output)
        unit_text = optional_string(unit)
        fields = {
            "date": parse_day(date) if date else None,
            "type": validate_measurement_type(measurement_type).value if measurement_type else None,
            "value": optional_number(value, "Value"),
            "unit": unit_text.upper() if unit_text else None,
            "notes": optional_string(notes),
        }
        record = cli.run(
            cli.records(MEASUREMENT_PATH).update(measurement_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Measurement updated")
    render(record, mode=mode, fields=MEASUREMENT_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    measurement_id: str = typer.Argument(..., metavar="ID", help="Measurement ID"),
    yes: bool = YES,
) -> None:
    """Delete a measurement."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this measurement?", yes):
        return
    with handle_errors("delete measurement"):
        cli.run(cli.records(MEASUREMENT_PATH).delete(measurement_id))
    success("Measurement deleted")
