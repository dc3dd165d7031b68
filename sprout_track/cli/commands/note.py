"""
Note Commands.

Free-text notes attached to a baby at a point in time.
"""

from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors, success
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.dates import format_date, now, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE, YES, confirmed
from sprout_track.cli.output import Column, Field, render, truncate
from sprout_track.cli.validation import optional_string, require_string

app = typer.Typer(help="Log and manage notes")

NOTE_PATH = "/api/note"

CATEGORY = typer.Option(None, "--category", help="Category")


def _short(value: Any) -> str:
    return truncate(str(value), 37) if value else "-"


NOTE_COLUMNS = [
    Column("id", "ID", width=38),
    Column("time", "Time", width=18, formatter=format_date),
    Column("category", "Category", width=15),
    Column("content", "Content", width=40, formatter=_short),
]

NOTE_FIELDS = [
    Field("id", "ID"),
    Field("time", "Time", format_date),
    Field("category", "Category"),
    Field("content", "Content"),
    Field("babyId", "Baby ID"),
    Field("createdAt", "Created", format_date),
]

NOTE_PLAIN = ["id", "time", "category", "content"]


def _create(cli: CliContext, fields: dict[str, Any], output: Optional[str], message: str) -> None:
    mode = cli.resolve_mode(output)
    record = cli.run(cli.records(NOTE_PATH).create({k: v for k, v in fields.items() if v is not None}))
    success(message)
    render(record, mode=mode, fields=NOTE_FIELDS)


@app.command("list")
def list_notes(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """List notes for a baby."""
    cli = get_context(ctx)
    with handle_errors("list notes"):
        mode = cli.resolve_mode(output)
        filters = {
            "babyId": cli.resolve_baby_id(baby),
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        notes = cli.run(cli.records(NOTE_PATH).list(**filters))
    render(notes, mode=mode, columns=NOTE_COLUMNS, plain_fields=NOTE_PLAIN)


@app.command()
def get(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., metavar="ID", help="Note ID"),
    output: Optional[str] = OUTPUT,
) -> None:
    """Show one note."""
    cli = get_context(ctx)
    with handle_errors("get note"):
        mode = cli.resolve_mode(output)
        record = cli.run(cli.records(NOTE_PATH).get(note_id))
    render(record, mode=mode, fields=NOTE_FIELDS)


@app.command()
def create(
    ctx: typer.Context,
    content: str = typer.Option(..., "--content", help="Note content"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601, default: now)"),
    category: Optional[str] = CATEGORY,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Create a note with an explicit time."""
    cli = get_context(ctx)
    with handle_errors("create note"):
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": parse_date(time) if time else now(),
            "content": require_string(content, "Content"),
            "category": optional_string(category),
        }
        _create(cli, fields, output, "Note created")


@app.command()
def add(
    ctx: typer.Context,
    content: str = typer.Argument(..., help="Note content"),
    category: Optional[str] = CATEGORY,
    baby: Optional[str] = BABY,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Quick add a note stamped now.

    Examples:
        sprout-track note add "First smile at grandma"
    """
    cli = get_context(ctx)
    with handle_errors("add note"):
        fields = {
            "babyId": cli.resolve_baby_id(baby),
            "time": now(),
            "content": require_string(content, "Content"),
            "category": optional_string(category),
        }
        _create(cli, fields, output, "Note added")


@app.command()
def update(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., metavar="ID", help="Note ID"),
    content: Optional[str] = typer.Option(None, "--content", help="Note content"),
    time: Optional[str] = typer.Option(None, "--time", help="Time (ISO8601)"),
    category: Optional[str] = CATEGORY,
    output: Optional[str] = OUTPUT,
) -> None:
    """Update a note."""
    cli = get_context(ctx)
    with handle_errors("update note"):
        mode = cli.resolve_mode(output)
        fields = {
            "content": optional_string(content),
            "time": parse_date(time) if time else None,
            "category": optional_string(category),
        }
        record = cli.run(
            cli.records(NOTE_PATH).update(note_id, {k: v for k, v in fields.items() if v is not None})
        )
    success("Note updated")
    render(record, mode=mode, fields=NOTE_FIELDS)


@app.command()
def delete(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., metavar="ID", help="Note ID"),
    yes: bool = YES,
) -> None:
    """Delete a note."""
    cli = get_context(ctx)
    if not confirmed("Are you sure you want to delete this note?", yes):
        return
    with handle_errors("delete note"):
        cli.run(cli.records(NOTE_PATH).delete(note_id))
    success("Note deleted")
