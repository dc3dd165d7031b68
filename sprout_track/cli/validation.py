"""
Input Validation.

Enum and format checks applied to command options before any network
call. Every failure raises ValidationError with a message naming the
accepted values.
"""

import math
import re
from enum import Enum
from typing import TypeVar
from urllib.parse import urlsplit

from sprout_track.core.config_schema import OutputMode
from sprout_track.core.exceptions import ValidationError


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class SleepType(str, Enum):
    NAP = "NAP"
    NIGHT_SLEEP = "NIGHT_SLEEP"


class SleepQuality(str, Enum):
    POOR = "POOR"
    FAIR = "FAIR"
    GOOD = "GOOD"
    EXCELLENT = "EXCELLENT"


class FeedType(str, Enum):
    BREAST = "BREAST"
    BOTTLE = "BOTTLE"
    SOLIDS = "SOLIDS"


class BreastSide(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class DiaperType(str, Enum):
    WET = "WET"
    DIRTY = "DIRTY"
    BOTH = "BOTH"


class MeasurementType(str, Enum):
    HEIGHT = "HEIGHT"
    WEIGHT = "WEIGHT"
    HEAD_CIRCUMFERENCE = "HEAD_CIRCUMFERENCE"
    TEMPERATURE = "TEMPERATURE"


class MilestoneCategory(str, Enum):
    MOTOR = "MOTOR"
    COGNITIVE = "COGNITIVE"
    SOCIAL = "SOCIAL"
    LANGUAGE = "LANGUAGE"
    CUSTOM = "CUSTOM"


EnumT = TypeVar("EnumT", bound=Enum)


def _choose(enum_cls: type[EnumT], value: str, label: str) -> EnumT:
    normalized = value.strip().upper().replace("-", "_")
    try:
        return enum_cls(normalized)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label}: {value}. Must be one of: {allowed}") from None


def validate_gender(value: str) -> Gender:
    return _choose(Gender, value, "gender")


def validate_sleep_type(value: str) -> SleepType:
    return _choose(SleepType, value, "sleep type")


def validate_sleep_quality(value: str) -> SleepQuality:
    return _choose(SleepQuality, value, "sleep quality")


def validate_feed_type(value: str) -> FeedType:
    return _choose(FeedType, value, "feed type")


def validate_breast_side(value: str) -> BreastSide:
    return _choose(BreastSide, value, "breast side")


def validate_diaper_type(value: str) -> DiaperType:
    return _choose(DiaperType, value, "diaper type")


def validate_measurement_type(value: str) -> MeasurementType:
    return _choose(MeasurementType, value, "measurement type")


def validate_milestone_category(value: str) -> MilestoneCategory:
    return _choose(MilestoneCategory, value, "milestone category")


def validate_output_format(value: str) -> OutputMode:
    try:
        return OutputMode(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid output format: {value}. Must be json, table, or plain") from None


def require_string(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{name} is required")
    return value.strip()


def optional_string(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def require_number(value: str | None, name: str) -> int | float:
    """Parse a numeric option; integral values come back as int."""
    try:
        number = float(value) if value is not None else math.nan
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a valid number")
    return int(number) if number.is_integer() else number


def optional_number(value: str | None, name: str) -> int | float | None:
    if value is None or not value.strip():
        return None
    return require_number(value, name)


def parse_boolean(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"Invalid boolean: {value}. Use true or false")


def validate_url(value: str) -> str:
    """Accept an http(s) URL and reduce it to its origin."""
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError(f"Invalid URL: {value}. Must be a valid HTTP/HTTPS URL")
    return f"{parts.scheme}://{parts.netloc}"


def validate_pin(value: str) -> str:
    if not re.fullmatch(r"\d+", value):
        raise ValidationError("PIN must contain only digits")
    return value
