"""
Milestone Commands.
"""

from typing import Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, format_day, parse_day
from sprout_track.cli.options import BABY, OUTPUT, YES, confirmed
from sprout_track.cli.output import Column, Field, render
from sprout_track.cli.validation import optional_string, require_string, validate_milestone_category

app = typer.Typer(help="Log and manage milestones")

MILESTONE_PATH = "/api/milestone"

CATEGORY_HELP = "Category (MOTOR, COGNITIVE, SOCIAL, LANGUAGE, CUSTOM)"
DESCRIPTION = typer.Option(None, "--description", help="Description")

MILESTONE_COLUMNS = [
    Column("id", "ID", width=38),
    Column("date", "Date", width=12, formatter=format_day),
    Column("title", "Title", width=30),
    Column("category", "Category", width=12),
    Column("ageInDays", "Age (days)", width=10),
]

MILESTONE_FIELDS = [
    Field("id", "ID"),
    Field("date", "Date", format_day),
    Field("title", "Title"),
    Field("description", "Description"),
    Field("category", "Category"),
    Field("ageInDays", "Age (days)"),
    Field("babyId", "Baby ID"),
    Field("createdAt", "Created", format_date),
]

MILESTONE_PLAIN = ["id", "date", "title", "category"]


@app.command("list")
def list_milestones(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", help=f"Filter by category. {CATEGORY_HELP}"),
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """List milestones for a baby."""
    cli = get_context(ctx)
    with handle_errors("list milestones"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "category": validate_milestone_category(category).value if category else None,
        }
        milestones = cli.run(cli.records(MILESTONE_PATH).list(**filters))
    render(milestones, mode=mode, columns=MILESTONE_COLUMNS, plain_fields=MILESTONE_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    milestone_id: str = typer.Argument(..., metavar="ID", help="Milestone ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one milestone."""
    cli = get_context(ctx)
    with handle_errors("get milestone"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(MILESTONE_PATH).get(milestone_id))
    render(record, mode=mode, fields=MILESTONE_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Milestone title"),
    category: str = typer.Option(..., "--category", help=CATEGORY_HELP),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD, default: today)"),
    description: Optional[str] = DESCRIPTION,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Record a milestone.

    Examples:
        sprout-track milestone create --title "Rolled over" --category MOTOR
    """
    cli = get_context(ctx)
    with handle_errors("create milestone"):
        mode = cli.resolve_mode(output)
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "date": parse_day(date) if date else cli.clock().date().isoformat(),
            "title": require_string(title, "Title"),
            "category": validate_milestone_category(category).value,
        }
        text = optional_string(description)
        if text:
            fields["description"] = text
        record = cli.run(cli.records(MILESTONE_PATH).create(fields))
    success(f"Milestone created: {record.get('title')}")
    render(record, mode=mode, fields=MILESTONE_FIELDS)


@app.command()
def update(
    ctx: typer.Context,
    milestone_id: str = typer.Argument(..., metavar="ID", help="Milestone ID"),
    title: Optional[str] = typer.Option(None, "--title", help="Milestone title"),
    description: Optional[str] = DESCRIPTION,
    category: Optional[str] = typer.Option(None, "--category", help=CATEGORY_HELP),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a milestone."""
    cli = get_context(ctx)
    with handle_errors("update milestone"):
        mode = cli.resolve_mode(output)
        fields = {
            "title": optional_string(title),
            "description": optional_string(description),
            "category": validate_milestone_category(category).value if category else None,
            "date": parse_day(date) if date else None,
        }
        record = cli.run(
            cli.records(MILESTONE_PATH).update(milestone_id, {k: v for k, v in fields.items() if v is not None})
        )
    success(f"Milestone updated: {record.get('title')}")
    render(record, mode=mode, fields=MILESTONE_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    milestone_id: str = typer.Argument(..., metavar="ID", help="Milestone ID"),
    yes: bool = YES,
) -> None:
    """Delete a milestone."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this milestone?", yes):
        return
    with handle_errors("delete milestone"):
        cli.run(cli.records(MILESTONE_PATH).delete(milestone_id))
    success("Milestone deleted")
