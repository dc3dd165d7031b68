"""
Date and Duration Helpers.

Timestamps travel to and from the server as ISO 8601 UTC strings with
millisecond precision and a Z suffix (2024-01-15T14:30:00.000Z).
"""

import math
import re
from datetime import datetime, timedelta, timezone

from sprout_track.core.exceptions import ValidationError

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now() -> str:
    return to_iso(utc_now())


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 string from the server; None when it is not one."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str) -> str:
    """
    Normalize user input to an ISO 8601 UTC string.

    Accepts "now", a full ISO 8601 timestamp, or YYYY-MM-DD (local midnight).
    """
    if value.strip().lower() == "now":
        return now()

    if _DATE_ONLY.match(value):
        try:
            midnight = datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            midnight = None
        if midnight is not None:
            return to_iso(midnight.astimezone())

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            f"Invalid date format: {value}. "
            "Use ISO8601 format (e.g., 2024-01-15T14:30:00Z) or YYYY-MM-DD"
        ) from None
    return to_iso(parsed)


def format_date(value: str | None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Server timestamp in local time; unparseable input is returned as is."""
    if value is None:
        return "-"
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)
    return parsed.astimezone().strftime(fmt)


def format_relative(value: str | None, reference: datetime | None = None) -> str:
    """Rough distance to now, e.g. "3 hours ago" or "in 5 minutes"."""
    if value is None:
        return "-"
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)

    delta = (reference or utc_now()) - parsed
    seconds = abs(delta.total_seconds())
    if seconds < 60:
        text = "less than a minute"
    else:
        for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
            if seconds >= size:
                count = int(round_half_up(seconds / size))
                text = f"{count} {unit}{'' if count == 1 else 's'}"
                break
    return f"{text} ago" if delta.total_seconds() >= 0 else f"in {text}"


def format_duration(minutes: float | None) -> str:
    """Minutes as "1h 30m", "2h", or "45m"."""
    if minutes is None:
        return "-"
    minutes = int(minutes)
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def format_duration_seconds(seconds: float | None) -> str:
    """Seconds as "5m 30s", "5m", or "45s"."""
    if seconds is None:
        return "-"
    seconds = int(seconds)
    mins, secs = divmod(seconds, 60)
    if mins > 0:
        return f"{mins}m {secs}s" if secs > 0 else f"{mins}m"
    return f"{secs}s"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def minutes_between(start: datetime, end: datetime) -> int:
    """Elapsed whole minutes, halves rounded up."""
    return round_half_up((end - start) / timedelta(minutes=1))


def parse_day(value: str) -> str:
    """Validate a calendar date given as YYYY-MM-DD."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").strftime("%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"Invalid date: {value}. Use YYYY-MM-DD") from None


def format_day(value: str | None) -> str:
    """Calendar date of a server value; date-only strings pass through."""
    if value is None:
        return "-"
    if _DATE_ONLY.match(value):
        return value
    return format_date(value, "%Y-%m-%d")
