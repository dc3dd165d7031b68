"""
Baby Commands.

Manage baby profiles and the default baby used by the tracking commands.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date
from sprout_track.cli.options import OUTPUT, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import (
    optional_string,
    parse_boolean,
    require_string,
    validate_gender,
)

app = typer.Typer(help="Manage babies")

BABY_PATH = "/api/baby"


def _birth_date(value: Any) -> str:
    return format_date(value, "%Y-%m-%d")


def _active(value: Any) -> str:
    return "No" if value else "Yes"


BABY_COLUMNS = [
    Column("id", "ID", width=38),
    Column("firstName", "First Name", width=15),
    Column("lastName", "Last Name", width=15),
    Column("birthDate", "Birth Date", width=12, formatter=_birth_date),
    Column("gender", "Gender", width=8),
    Column("inactive", "Active", width=8, formatter=_active),
]

BABY_FIELDS = [
    Field("id", "ID"),
    Field("firstName", "First Name"),
    Field("lastName", "Last Name"),
    Field("birthDate", "Birth Date", _birth_date),
    Field("gender", "Gender"),
    Field("inactive", "Active", _active),
    Field("feedWarningTime", "Feed Warning"),
    Field("diaperWarningTime", "Diaper Warning"),
    Field("createdAt", "Created", format_date),
]

BABY_PLAIN = ["id", "firstName", "lastName", "birthDate"]


def _full_name(baby: dict[str, Any]) -> str:
    return " ".join(part for part in (baby.get("firstName"), baby.get("lastName")) if part)


@app.command("list")
def list_babies(
    ctx: typer.Context,
    active: bool = typer.Option(False, "--active", help="Show only active babies"),
    output: Optional[str] = OUTPUT,
) -> None:
    """List all babies."""
    cli = get_context(ctx)
    with handle_errors("list babies"):
        mode = cli.resolve_mode(output)
        filters = {"active": True} if active else {}
        babies = cli.run(cli.records(BABY_PATH).list(**filters))
    render(babies, mode=mode, columns=BABY_COLUMNS, plain_fields=BABY_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    baby_id: str = typer.Argument(..., metavar="ID", help="Baby ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one baby."""
    cli = get_context(ctx)
    with handle_errors("get baby"):
        mode = cli.resolve_mode(output)
        baby = cli.run(cli.records(BABY_PATH).get(baby_id))
    render(baby, mode=mode, fields=BABY_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    first_name: str = typer.Option(..., "--first-name", help="First name"),
    birth_date: str = typer.Option(..., "--birth-date", help="Birth date (YYYY-MM-DD)"),
    last_name: Optional[str] = typer.Option(None, "--last-name", help="Last name"),
    gender: Optional[str] = typer.Option(None, "--gender", help="Gender (MALE or FEMALE)"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a new baby."""
    cli = get_context(ctx)
    with handle_errors("create baby"):
        mode = cli.resolve_mode(output)
        fields = {
            "firstName": require_string(first_name, "First name"),
            "lastName": optional_string(last_name) or "",
            "birthDate": require_string(birth_date, "Birth date"),
        }
        if gender:
            fields["gender"] = validate_gender(gender).value
        baby = cli.run(cli.records(BABY_PATH).create(fields))
    success(f"Baby created: {_full_name(baby)}")
    render(baby, mode=mode, fields=BABY_FIELDS)


@app.command()
def update(
    ctx: typer.Context,
    baby_id: str = typer.Argument(..., metavar="ID", help="Baby ID"),
    first_name: Optional[str] = typer.Option(None, "--first-name", help="First name"),
    last_name: Optional[str] = typer.Option(None, "--last-name", help="Last name"),
    birth_date: Optional[str] = typer.Option(None, "--birth-date", help="Birth date (YYYY-MM-DD)"),
    gender: Optional[str] = typer.Option(None, "--gender", help="Gender (MALE or FEMALE)"),
    inactive: Optional[str] = typer.Option(None, "--inactive", help="Set inactive status (true/false)"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Update baby information."""
    cli = get_context(ctx)
    with handle_errors("update baby"):
        mode = cli.resolve_mode(output)
        fields: dict[str, Any] = {}
        if first_name:
            fields["firstName"] = first_name
        if last_name:
            fields["lastName"] = last_name
        if birth_date:
            fields["birthDate"] = birth_date
        if gender:
            fields["gender"] = validate_gender(gender).value
        if inactive is not None:
            fields["inactive"] = parse_boolean(inactive)
        baby = cli.run(cli.records(BABY_PATH).update(baby_id, fields))
    success(f"Baby updated: {_full_name(baby)}")
    render(baby, mode=mode, fields=BABY_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    baby_id: str = typer.Argument(..., metavar="ID", help="Baby ID"),
    yes: bool = YES,
) -> None:
    """Delete a baby. Clears the default baby if it was this one."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this baby? This cannot be undone.", yes):
        return
    with handle_errors("delete baby"):
        cli.run(cli.records(BABY_PATH).delete(baby_id))
        if cli.store.config.default_baby_id == baby_id:
            cli.store.update(default_baby_id=None)
    success("Baby deleted")


@app.command()
def select(
    ctx: typer.Context,
    baby_id: str = typer.Argument(..., metavar="ID", help="Baby ID"),
) -> None:
    """Set the default baby for tracking commands."""
    cli = get_context(ctx)
    with handle_errors("select baby"):
        baby = cli.run(cli.records(BABY_PATH).get(baby_id))
        cli.store.update(default_baby_id=baby_id)
    success(f"Default baby set to: {_full_name(baby)}")


@app.command()
def unselect(ctx: typer.Context) -> None:
    """Clear the default baby."""
    cli = get_context(ctx)
    with handle_errors("unselect baby"):
        cli.store.update(default_baby_id=None)
    success("Default baby cleared")
