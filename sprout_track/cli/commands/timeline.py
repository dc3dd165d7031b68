"""
Timeline Command.

The timeline endpoint returns a mix of activity records. Outside JSON mode
each item is reduced to a type/time/summary row.
"""

from collections.abc import Callable
from typing import Any, Optional

import typer

from sprout_track.cli.console import handle_errors
from sprout_track.cli.context import get_context
from sprout_track.cli.dates import format_date, parse_date
from sprout_track.cli.options import BABY, END_DATE, OUTPUT, START_DATE
from sprout_track.cli.output import Column, format_plain_value, render, truncate
from sprout_track.cli.validation import (
    DiaperType,
    FeedType,
    SleepType,
    optional_number,
)
from sprout_track.core.config_schema import OutputMode

TIMELINE_PATH = "/api/timeline"
DEFAULT_LIMIT = 20
SUMMARY_LENGTH = 45

TIMELINE_COLUMNS = [
    Column("type", "Type", width=12),
    Column("time", "Time", width=18, formatter=format_date),
    Column("summary", "Summary", width=50),
]

TIMELINE_PLAIN = ["type", "time", "summary"]

_FEED_TYPES = {member.value for member in FeedType}
_SLEEP_TYPES = {member.value for member in SleepType}
_DIAPER_TYPES = {member.value for member in DiaperType}

Item = dict[str, Any]


def _text(value: Any) -> str:
    return format_plain_value(value)


def _feed(item: Item) -> str:
    if item.get("type") == FeedType.BREAST.value:
        return f"Breast ({_text(item.get('side'))})"
    if item.get("type") == FeedType.BOTTLE.value:
        return f"Bottle {_text(item.get('amount'))} {_text(item.get('unitAbbr'))}".rstrip()
    return f"Solids: {_text(item.get('food'))}"


def _sleep(item: Item) -> str:
    if item.get("endTime"):
        duration = item.get("duration")
        return f"{_text(item.get('type'))} ({duration if duration is not None else '?'} min)"
    return f"{_text(item.get('type'))} (ongoing)"


def _diaper(item: Item) -> str:
    summary = _text(item.get("type"))
    if item.get("blowout"):
        summary += " (blowout)"
    if item.get("color"):
        summary += f" - {item['color']}"
    return summary


def _bath(item: Item) -> str:
    products = [name for name, key in (("soap", "soapUsed"), ("shampoo", "shampooUsed")) if item.get(key)]
    return f"Bath ({', '.join(products)})" if products else "Bath"


def _pump(item: Item) -> str:
    total = item.get("totalAmount")
    return f"Pump: {total if total is not None else '?'} {item.get('unitAbbr') or 'OZ'} total"


def _other(item: Item) -> str:
    return truncate(format_plain_value(item), SUMMARY_LENGTH)


# kind -> (time key, summarizer)
SUMMARIZERS: dict[str, tuple[str, Callable[[Item], str]]] = {
    "feed": ("time", _feed),
    "sleep": ("startTime", _sleep),
    "diaper": ("time", _diaper),
    "bath": ("time", _bath),
    "pump": ("startTime", _pump),
}


def activity_kind(item: Item) -> str:
    """
    Classify a timeline item.

    The timeline mixes record types and the type field means different
    things per activity, so the kind is taken from an explicit activityType
    when present and otherwise inferred from the record's shape.
    """
    explicit = item.get("activityType")
    if isinstance(explicit, str) and explicit:
        return explicit.lower()
    if "soapUsed" in item or "shampooUsed" in item:
        return "bath"
    if "leftAmount" in item or "rightAmount" in item or "totalAmount" in item:
        return "pump"
    item_type = item.get("type")
    if item_type in _FEED_TYPES:
        return "feed"
    if item_type in _SLEEP_TYPES:
        return "sleep"
    if item_type in _DIAPER_TYPES:
        return "diaper"
    return "unknown"


def summarize(item: Item) -> Item:
    """Reduce one timeline item to {type, time, summary}."""
    kind = activity_kind(item)
    if kind in SUMMARIZERS:
        time_key, summarizer = SUMMARIZERS[kind]
        return {"type": kind, "time": item.get(time_key), "summary": summarizer(item)}
    time = item.get("time") or item.get("startTime") or item.get("date")
    return {"type": kind, "time": time, "summary": _other(item)}


def timeline(
    ctx: typer.Context,
    baby: Optional[str] = BABY,
    limit: Optional[str] = typer.Option(None, "--limit", help=f"Limit number of results (default: {DEFAULT_LIMIT})"),
    start: Optional[str] = START_DATE,
    end: Optional[str] = END_DATE,
    output: Optional[str] = OUTPUT,
) -> None:
    """
    View the combined activity timeline.

    Examples:
        sprout-track timeline --limit 10
        sprout-track timeline -o json | jq '.[0]'
    """
    cli = get_context(ctx)
    with handle_errors("fetch timeline"):
        mode = cli.resolve_mode(output)
        count = optional_number(limit, "Limit")
        params = {
            "babyId": cli.resolve_baby_id(baby),
            "limit": DEFAULT_LIMIT if count is None else count,
            "startDate": parse_date(start) if start else None,
            "endDate": parse_date(end) if end else None,
        }
        cli.require_auth()
        items = cli.run(cli.client.get(TIMELINE_PATH, params=params)) or []

    if mode == OutputMode.JSON:
        render(items, mode=mode)
        return
    render(
        [summarize(item) for item in items],
        mode=mode,
        columns=TIMELINE_COLUMNS,
        plain_fields=TIMELINE_PLAIN,
    )
