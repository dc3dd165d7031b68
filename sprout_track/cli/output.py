"""
Output Formatting.

Renders a record or an ordered sequence of records in one of three modes:

    json   - indented JSON, used verbatim whenever a mode lacks descriptors
    table  - bordered grid for sequences, aligned "label: value" lines for a record
    plain  - separator-joined lines for sequences, "label: value" for a record

The formatter knows nothing about babies or feeds. Commands pass descriptors
(Field, Column, or a list of plain keys) whose keys are dotted paths into the
record; missing or null paths render as a placeholder instead of raising.

Usage:
    from sprout_track.cli.output import Column, Field, render

    render(logs, mode=OutputMode.TABLE, columns=[Column("id", "ID")])
    render(log, mode=OutputMode.PLAIN, fields=[Field("id", "ID")])
"""

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from rich import box
from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from sprout_track.cli.console import console as stdout_console
from sprout_track.core.config_schema import OutputMode

NO_DATA = "No data found."

Formatter = Callable[[Any], str]


class _Missing:
    """Marker for a dotted path that does not resolve."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class Field:
    """One labelled value of a single-record display."""

    key: str
    label: str
    formatter: Formatter | None = None


@dataclass(frozen=True)
class Column:
    """One column of a tabular sequence display."""

    key: str
    header: str
    width: int | None = None
    align: Literal["left", "center", "right"] = "left"
    formatter: Formatter | None = None


def resolve_path(data: Any, path: str) -> Any:
    """
    Walk a dot-separated path through nested mappings and lists.

    Returns MISSING as soon as a segment is absent, null, or the current
    value cannot be indexed by it. Never raises.
    """
    current = data
    for segment in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        if isinstance(current, Mapping):
            current = current.get(segment, MISSING)
        elif _is_sequence(current) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else MISSING
        else:
            return MISSING
    return current


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_absent(value: Any) -> bool:
    return value is None or value is MISSING


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _scalar_text(value: Any) -> str:
    if _is_absent(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Mapping) or _is_sequence(value):
        return _compact_json(value)
    return str(value)


def format_table_value(value: Any) -> str:
    """Default cell formatter for table mode."""
    if _is_absent(value):
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if _is_sequence(value):
        return ", ".join(_scalar_text(item) for item in value)
    if isinstance(value, Mapping):
        return _compact_json(value)
    return _scalar_text(value)


def format_plain_value(value: Any) -> str:
    """Default value formatter for plain mode."""
    if _is_absent(value):
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if _is_sequence(value):
        return ",".join(_scalar_text(item) for item in value)
    if isinstance(value, Mapping):
        return _compact_json(value)
    return _scalar_text(value)


def _apply(formatter: Formatter | None, value: Any) -> str:
    if formatter is not None:
        return formatter(None if value is MISSING else value)
    return format_table_value(value)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def format_table(data: Sequence[Mapping[str, Any]], columns: Sequence[Column]) -> RenderableType:
    """Build a bordered grid, or the no-data sentinel for an empty sequence."""
    if len(data) == 0:
        return NO_DATA

    table = Table(box=box.SQUARE, header_style="cyan", border_style="grey50")
    for column in columns:
        table.add_column(column.header, width=column.width, justify=column.align, overflow="fold")

    for item in data:
        table.add_row(*(Text(_apply(column.formatter, resolve_path(item, column.key))) for column in columns))

    return table


def format_key_value(data: Mapping[str, Any], fields: Sequence[Field]) -> str:
    width = max((len(field.label) for field in fields), default=0) + 2
    lines = [
        f"{field.label.ljust(width)}: {_apply(field.formatter, resolve_path(data, field.key))}"
        for field in fields
    ]
    return "\n".join(lines)


def format_plain(data: Sequence[Mapping[str, Any]], keys: Sequence[str], separator: str = "\t") -> str:
    if len(data) == 0:
        return NO_DATA

    lines = [separator.join(format_plain_value(resolve_path(item, key)) for key in keys) for item in data]
    return "\n".join(lines)


def format_plain_single(data: Mapping[str, Any], fields: Sequence[Field]) -> str:
    return "\n".join(f"{field.label}: {format_plain_value(resolve_path(data, field.key))}" for field in fields)


def format_output(
    data: Any,
    *,
    mode: OutputMode,
    fields: Sequence[Field] | None = None,
    columns: Sequence[Column] | None = None,
    plain_fields: Sequence[str] | None = None,
    separator: str = "\t",
) -> RenderableType:
    """
    Produce the renderable for data in the given mode.

    Falls back to JSON whenever the descriptor the mode needs is None.
    Sequence order is the caller's; nothing is sorted here.
    """
    if mode == OutputMode.JSON:
        return format_json(data)

    many = _is_sequence(data)

    if mode == OutputMode.TABLE:
        if many and columns is not None:
            return format_table(data, columns)
        if not many and fields is not None:
            return format_key_value(data, fields)
        return format_json(data)

    if many and plain_fields is not None:
        return format_plain(data, plain_fields, separator)
    if not many and fields is not None:
        return format_plain_single(data, fields)
    return format_json(data)


def render(
    data: Any,
    *,
    mode: OutputMode,
    fields: Sequence[Field] | None = None,
    columns: Sequence[Column] | None = None,
    plain_fields: Sequence[str] | None = None,
    separator: str = "\t",
    console: Console | None = None,
) -> None:
    """Write the formatted data to stdout as one block."""
    renderable = format_output(
        data,
        mode=mode,
        fields=fields,
        columns=columns,
        plain_fields=plain_fields,
        separator=separator,
    )
    target = console or stdout_console
    if isinstance(renderable, str):
        # Rich would expand tabs and wrap; text output must stay byte-exact for pipes.
        target.file.write(f"{renderable}\n")
        target.file.flush()
    else:
        target.print(renderable)


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
