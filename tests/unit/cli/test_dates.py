"""Unit tests for date and duration helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from sprout_track.cli.dates import (
    format_date,
    format_day,
    format_duration,
    format_duration_seconds,
    format_relative,
    minutes_between,
    parse_date,
    parse_day,
    parse_timestamp,
    round_half_up,
    to_iso,
)
from sprout_track.core.exceptions import ValidationError


class TestIso:
    """Tests for the wire timestamp format."""

    def test_utc_has_milliseconds_and_z(self) -> None:
        value = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
        assert to_iso(value) == "2024-01-15T14:30:00.000Z"

    def test_offset_is_converted_to_utc(self) -> None:
        value = datetime(2024, 1, 15, 9, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert to_iso(value) == "2024-01-15T14:30:00.000Z"

    def test_parse_timestamp(self) -> None:
        parsed = parse_timestamp("2024-01-15T14:30:00.000Z")
        assert parsed == datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)

    def test_parse_timestamp_invalid(self) -> None:
        assert parse_timestamp("yesterday") is None


class TestParseDate:
    """Tests for user supplied dates."""

    def test_full_timestamp(self) -> None:
        assert parse_date("2024-01-15T14:30:00Z") == "2024-01-15T14:30:00.000Z"

    def test_now(self) -> None:
        assert parse_date("now").endswith("Z")

    def test_date_only_is_local_midnight(self) -> None:
        expected = to_iso(datetime(2024, 1, 15).astimezone())
        assert parse_date("2024-01-15") == expected

    @pytest.mark.parametrize("value", ["15/01/2024", "tomorrow", ""])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValidationError, match="Invalid date format"):
            parse_date(value)


class TestCalendarDays:
    """Tests for date-only values."""

    def test_parse_day_normalizes(self) -> None:
        assert parse_day(" 2024-01-05 ") == "2024-01-05"

    @pytest.mark.parametrize("value", ["2024-13-01", "01/05/2024", "today"])
    def test_parse_day_rejects(self, value: str) -> None:
        with pytest.raises(ValidationError, match="Use YYYY-MM-DD"):
            parse_day(value)

    def test_format_day_passthrough(self) -> None:
        assert format_day("2024-01-15") == "2024-01-15"
        assert format_day(None) == "-"

    def test_format_day_from_timestamp(self) -> None:
        value = "2024-01-15T12:00:00.000Z"
        expected = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc).astimezone().strftime("%Y-%m-%d")
        assert format_day(value) == expected


class TestFormatting:
    """Tests for human readable dates and durations."""

    def test_format_date_none(self) -> None:
        assert format_date(None) == "-"

    def test_format_date_unparseable_passthrough(self) -> None:
        assert format_date("garbage") == "garbage"

    def test_format_date_local(self) -> None:
        value = "2024-01-15T14:30:00.000Z"
        expected = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc).astimezone().strftime("%Y-%m-%d %H:%M")
        assert format_date(value) == expected

    @pytest.mark.parametrize(
        ("minutes", "text"),
        [(None, "-"), (0, "0m"), (45, "45m"), (60, "1h"), (90, "1h 30m"), (125.7, "2h 5m")],
    )
    def test_format_duration(self, minutes, text: str) -> None:
        assert format_duration(minutes) == text

    @pytest.mark.parametrize(
        ("seconds", "text"),
        [(None, "-"), (45, "45s"), (300, "5m"), (330, "5m 30s")],
    )
    def test_format_duration_seconds(self, seconds, text: str) -> None:
        assert format_duration_seconds(seconds) == text

    def test_format_relative(self) -> None:
        reference = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
        assert format_relative("2024-01-15T11:30:00.000Z", reference) == "3 hours ago"
        assert format_relative("2024-01-15T14:31:00.000Z", reference) == "in 1 minute"
        assert format_relative("2024-01-15T14:29:50.000Z", reference) == "less than a minute ago"


class TestRounding:
    """Tests for minute rounding."""

    @pytest.mark.parametrize(("value", "rounded"), [(0.49, 0), (0.5, 1), (1.5, 2), (2.4, 2)])
    def test_round_half_up(self, value: float, rounded: int) -> None:
        assert round_half_up(value) == rounded

    def test_minutes_between(self) -> None:
        start = datetime(2024, 1, 15, 13, 0, tzinfo=timezone.utc)
        assert minutes_between(start, start + timedelta(minutes=44, seconds=40)) == 45
        assert minutes_between(start, start + timedelta(seconds=29)) == 0
