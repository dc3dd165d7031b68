"""
Feed Commands.

Feed logs are instantaneous events stamped with a single time. The quick
log subcommands (feed log breast|bottle|solids) stamp the current time and
fill in the family's default units from the cached server settings.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, info, success
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.dates import (
    format_date,
    format_duration_seconds,
    format_relative,
    now,
    parse_date,
    round_half_up,
)
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import (
    FeedType,
    optional_number,
    optional_string,
    require_number,
    require_string,
    validate_breast_side,
    validate_feed_type,
)

app = typer.Typer(help="Log and manage feedings")
log_app = typer.Typer(help="Quick log a feeding that happened now")
app.add_typer(log_app, name="log")

FEED_PATH = "/api/feed-log"

FALLBACK_BOTTLE_UNIT = "OZ"
FALLBACK_SOLIDS_UNIT = "TBSP"

FEED_COLUMNS = [
    Column("id", "ID", width=38),
    Column("time", "Time", width=18, formatter=format_date),
    Column("type", "Type", width=8),
    Column("amount", "Amount", width=8),
    Column("unitAbbr", "Unit", width=6),
    Column("side", "Side", width=6),
    Column("feedDuration", "Duration", width=10, formatter=format_duration_seconds),
]

FEED_FIELDS = [
    Field("id", "ID"),
    Field("time", "Time", format_date),
    Field("type", "Type"),
    Field("amount", "Amount"),
    Field("unitAbbr", "Unit"),
    Field("side", "Side"),
    Field("food", "Food"),
    Field("feedDuration", "Duration", format_duration_seconds),
    Field("bottleType", "Bottle Type"),
    Field("notes", "Notes"),
    Field("createdAt", "Created", format_date),
]

FEED_PLAIN = ["id", "time", "type", "amount", "unitAbbr"]


def _present(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def _default_unit(cli: CliContext, attribute: str, fallback: str) -> str:
    cached = cli.store.config.cached_settings
    return getattr(cached, attribute, None) or fallback


def _create(cli: CliContext, mode_output: Optional[str], fields: dict[str, Any], message: str) -> None:
    mode = cli.resolve_mode(mode_output)
    record = cli.run(cli.records(FEED_PATH).create(_present(fields)))
    success(message)
    render(record, mode=mode, fields=FEED_FIELDS)


@app.command("list")
def list_logs(
    ctx: typer.Context,
    feed_type: Optional[str] = typer.Option(None, "--type", help="Filter by type (BREAST, BOTTLE, SOLIDS)"),
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List feed logs for a baby."""
    cli = get_context(ctx)
    with handle_errors("list feed logs"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
            "type": validate_feed_type(feed_type).value if feed_type else None,
        }
        logs = cli.run(cli.records(FEED_PATH).list(**filters))
    render(logs, mode=mode, columns=FEED_COLUMNS, plain_fields=FEED_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Feed log ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one feed log."""
    cli = get_context(ctx)
    with handle_errors("get feed log"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(FEED_PATH).get(log_id))
    render(record, mode=mode, fields=FEED_FIELDS)


@app.command()
def last(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Show the most recent feed log (first in server order)."""
    cli = get_context(ctx)
    with handle_errors("get last feed log"):
        mode = cli.resolve_mode(output)
        logs = cli.run(cli.records(FEED_PATH).list(babyId=cli.resolve_baby_id(baby)))
    if not logs:
        info("No feed logs found.")
        return
    render(logs[0], mode=mode, fields=FEED_FIELDS)
    info(f"Fed {format_relative(logs[0].get('time'), cli.clock())}")


@app.command()
def create(
    ctx: typer.Context,
    feed_type: str = typer.Option(..., "--type", help="Feed type (BREAST, BOTTLE, SOLIDS)"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601, default: now)"),
    amount: Optional[str] = typer.Option(None, "--amount", help="Amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit abbreviation (e.g., OZ, ML)"),
    side: Optional[str] = typer.Option(None, "--side", help="Breast side (LEFT, RIGHT)"),
    duration: Optional[str] = typer.Option(None, "--duration", help="Feed duration in seconds"),
    food: Optional[str] = typer.Option(None, "--food", help="Food description (for solids)"),
    bottle_type: Optional[str] = typer.Option(None, "--bottle-type", help="Bottle type (formula, breast milk, etc.)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a feed log with every field explicit."""
    cli = get_context(ctx)
    with handle_errors("create feed log"):
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": parse_date(time) if time else now(),
            "type": validate_feed_type(feed_type).value,
            "amount": optional_number(amount, "Amount"),
            "unitAbbr": optional_string(unit),
            "side": validate_breast_side(side).value if side else None,
            "feedDuration": optional_number(duration, "Duration"),
            "food": optional_string(food),
            "bottleType": optional_string(bottle_type),
            "notes": optional_string(notes),
        }
        _create(cli, output, fields, "Feed log created")


@log_app.command()
def breast(
    ctx: typer.Context,
    side: str = typer.Option(..., "--side", help="Breast side (LEFT, RIGHT)"),
    duration: Optional[str] = typer.Option(None, "--duration", help="Duration in minutes"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Log a breastfeeding.

    Examples:
        sprout-track feed log breast --side LEFT --duration 15
    """
    cli = get_context(ctx)
    with handle_errors("log breastfeeding"):
        breast_side = validate_breast_side(side)
        minutes = optional_number(duration, "Duration")
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": now(),
            "type": FeedType.BREAST.value,
            "side": breast_side.value,
            "feedDuration": round_half_up(minutes * 60) if minutes is not None else None,
            "notes": optional_string(notes),
        }
        _create(cli, output, fields, f"Breastfeeding logged ({breast_side.value} side)")


@log_app.command()
def bottle(
    ctx: typer.Context,
    amount: str = typer.Option(..., "--amount", help="Amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit (uses server default if not specified)"),
    bottle_type: Optional[str] = typer.Option(None, "--type", help="Bottle type (formula, breast milk, etc.)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a bottle feeding."""
    cli = get_context(ctx)
    with handle_errors("log bottle feeding"):
        quantity = require_number(amount, "Amount")
        unit_abbr = optional_string(unit) or _default_unit(cli, "default_bottle_unit", FALLBACK_BOTTLE_UNIT)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": now(),
            "type": FeedType.BOTTLE.value,
            "amount": quantity,
            "unitAbbr": unit_abbr,
            "bottleType": optional_string(bottle_type),
            "notes": optional_string(notes),
        }
        _create(cli, output, fields, f"Bottle feeding logged ({quantity} {unit_abbr})")


@log_app.command()
def solids(
    ctx: typer.Context,
    food: str = typer.Option(..., "--food", help="Food description"),
    amount: Optional[str] = typer.Option(None, "--amount", help="Amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit (uses server default if not specified)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Log a solid food feeding."""
    cli = get_context(ctx)
    with handle_errors("log solid food"):
        description = require_string(food, "Food")
        quantity = optional_number(amount, "Amount")
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": now(),
            "type": FeedType.SOLIDS.value,
            "food": description,
            "notes": optional_string(notes),
        }
        if quantity is not None:
            fields["amount"] = quantity
            fields["unitAbbr"] = optional_string(unit) or _default_unit(
                cli, "default_solids_unit", FALLBACK_SOLIDS_UNIT
            )
        _create(cli, output, fields, f"Solid food logged: {description}")


@app.command()
def update(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Feed log ID"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601)"),
    amount: Optional[str] = typer.Option(None, "--amount", help="Amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit abbreviation"),
    side: Optional[str] = typer.Option(None, "--side", help="Breast side (LEFT, RIGHT)"),
    duration: Optional[str] = typer.Option(None, "--duration", help="Feed duration in seconds"),
    food: Optional[str] = typer.Option(None, "--food", help="Food description"),
    bottle_type: Optional[str] = typer.Option(None, "--bottle-type", help="Bottle type"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a feed log."""
    cli = get_context(ctx)
    with handle_errors("update feed log"):
        mode = cli.resolve_mode(output)
        fields = {
            "time": parse_date(time) if time else None,
            "amount": optional_number(amount, "Amount"),
            "unitAbbr": optional_string(unit),
            "side": validate_breast_side(side).value if side else None,
            "feedDuration": optional_number(duration, "Duration"),
            "food": optional_string(food),
            "bottleType": optional_string(bottle_type),
            "notes": optional_string(notes),
        }
        record = cli.run(cli.records(FEED_PATH).update(log_id, _present(fields)))
    success("Feed log updated")
    render(record, mode=mode, fields=FEED_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    log_id: str = typer.Argument(..., metavar="ID", help="Feed log ID"),
    yes: bool = YES,
) -> None:
    """Delete a feed log."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this feed log?", yes):
        return
    with handle_errors("delete feed log"):
        cli.run(cli.records(FEED_PATH).delete(log_id))
    success("Feed log deleted")
