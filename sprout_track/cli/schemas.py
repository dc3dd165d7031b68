"""
API Schemas.

Pydantic views of the payloads the CLI depends on structurally. Everything
else passes through as a plain mapping; these models only pin down the
fields the client logic reads, and allow the rest.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    """camelCase on the wire, extra fields kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ApiEnvelope(_ApiModel):
    """
    Standard response envelope.

    All endpoints answer {success, data?, error?}; some error paths use
    message instead of error.
    """

    success: bool = False
    data: Any = None
    error: str | None = None
    message: str | None = None


class SessionRecord(_ApiModel):
    """Fields shared by every session-tracked log."""

    id: str
    baby_id: str | None = Field(default=None, alias="babyId")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime | None = Field(default=None, alias="endTime")

class SleepLog(SessionRecord):
    duration: int | None = None
    type: str | None = None
    location: str | None = None
    quality: str | None = None


class PumpLog(SessionRecord):
    duration: int | None = None
    left_amount: float | None = Field(default=None, alias="leftAmount")
    right_amount: float | None = Field(default=None, alias="rightAmount")
    total_amount: float | None = Field(default=None, alias="totalAmount")
    unit_abbr: str | None = Field(default=None, alias="unitAbbr")
    notes: str | None = None


class AuthResponse(_ApiModel):
    id: str | None = None
    name: str | None = None
    role: str | None = None
    token: str
    family_slug: str | None = Field(default=None, alias="familySlug")


class ServerSettings(_ApiModel):
    """Family settings as returned by /api/settings."""

    id: str | None = None
    family_name: str | None = Field(default=None, alias="familyName")
    default_bottle_unit: str | None = Field(default=None, alias="defaultBottleUnit")
    default_solids_unit: str | None = Field(default=None, alias="defaultSolidsUnit")
    default_height_unit: str | None = Field(default=None, alias="defaultHeightUnit")
    default_weight_unit: str | None = Field(default=None, alias="defaultWeightUnit")
    default_temp_unit: str | None = Field(default=None, alias="defaultTempUnit")
