"""
Configuration Schemas.

Pydantic models defining the structure of the local settings file
(config.yaml in the CLI's app directory). Used by ConfigStore to validate
the file at load time, so a hand-edited file with wrong types fails with a
clear message instead of a KeyError deep in a command.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutputMode(str, Enum):
    """Rendering style for command results."""

    JSON = "json"
    TABLE = "table"
    PLAIN = "plain"


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


class CachedSettings(_StrictBase):
    """Unit defaults mirrored from the server's family settings."""

    default_bottle_unit: str | None = None
    default_solids_unit: str | None = None
    default_height_unit: str | None = None
    default_weight_unit: str | None = None
    default_temp_unit: str | None = None
    cached_at: datetime | None = None


class CliConfig(_StrictBase):
    """Everything the CLI persists between invocations."""

    server: str = ""
    token: str | None = None
    token_expires: datetime | None = None
    family_slug: str | None = None
    default_baby_id: str | None = None
    output_format: OutputMode = OutputMode.TABLE
    cached_settings: CachedSettings | None = Field(default=None)

    @field_validator("server")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")
