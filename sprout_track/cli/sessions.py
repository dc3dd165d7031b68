"""
Session Lifecycle.

Start/end tracking for activities that span time (sleep, pumping).

A session is open while its record has no endTime. At most one session per
baby and kind may be open; the check is a list-then-write against the
server, so two processes racing on the same baby can still both succeed.

Usage:
    tracker = SessionTracker(ctx.records(SLEEP.path), SLEEP)
    await tracker.start(baby_id, {"type": "NAP"})
    await tracker.end(baby_id, {"quality": "GOOD"})
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sprout_track.cli.dates import minutes_between, to_iso, utc_now
from sprout_track.cli.records import RecordStore
from sprout_track.cli.schemas import PumpLog, SessionRecord, SleepLog
from sprout_track.core.exceptions import (
    ExternalServiceError,
    NoOpenSessionError,
    SessionConflictError,
    ValidationError,
)
from sprout_track.core.logging import get_logger

logger = get_logger(__name__)

Record = dict[str, Any]


def _present(fields: Record) -> Record:
    return {key: value for key, value in fields.items() if value is not None}


def _close_sleep(record: SessionRecord, ended_at: datetime, fields: Record) -> Record:
    return {
        "endTime": to_iso(ended_at),
        "duration": minutes_between(record.start_time, ended_at),
        **_present({"quality": fields.get("quality")}),
    }


def _log_sleep(started_at: datetime, ended_at: datetime, fields: Record) -> Record:
    return {
        "startTime": to_iso(started_at),
        "endTime": to_iso(ended_at),
        "duration": minutes_between(started_at, ended_at),
        **_present(fields),
    }


def _pump_amounts(fields: Record) -> Record:
    left = fields.get("leftAmount") or 0
    right = fields.get("rightAmount") or 0
    return {"leftAmount": left, "rightAmount": right, "totalAmount": left + right}


def _close_pump(record: SessionRecord, ended_at: datetime, fields: Record) -> Record:
    return {
        "endTime": to_iso(ended_at),
        **_pump_amounts(fields),
        **_present({"unitAbbr": fields.get("unitAbbr"), "notes": fields.get("notes")}),
    }


def _log_pump(started_at: datetime, ended_at: datetime, fields: Record) -> Record:
    return {
        "startTime": to_iso(started_at),
        "endTime": to_iso(ended_at),
        **_pump_amounts(fields),
        "unitAbbr": fields.get("unitAbbr") or "OZ",
        **_present({"notes": fields.get("notes")}),
    }


@dataclass(frozen=True)
class ActivityKind:
    """
    One session-tracked activity.

    close builds the update payload that ends an open record; closed_fields
    builds the create payload for a session logged after the fact.
    """

    name: str
    path: str
    model: type[SessionRecord]
    close: Callable[[SessionRecord, datetime, Record], Record]
    closed_fields: Callable[[datetime, datetime, Record], Record]
    default_duration: int | None = None


SLEEP = ActivityKind(
    name="sleep",
    path="/api/sleep-log",
    model=SleepLog,
    close=_close_sleep,
    closed_fields=_log_sleep,
)

PUMP = ActivityKind(
    name="pump",
    path="/api/pump-log",
    model=PumpLog,
    close=_close_pump,
    closed_fields=_log_pump,
    default_duration=15,
)


class SessionTracker:
    """Enforces at most one open session per baby for one activity kind."""

    def __init__(
        self,
        store: RecordStore,
        kind: ActivityKind,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.kind = kind
        self.clock = clock

    async def find_open(self, baby_id: str) -> Record | None:
        """First record for the baby, in server order, without an endTime."""
        records = await self.store.list(babyId=baby_id)
        for record in records:
            if record.get("endTime") is None:
                return record
        return None

    async def start(
        self,
        baby_id: str,
        fields: Record,
        started_at: datetime | None = None,
    ) -> Record:
        """
        Open a new session.

        Raises:
            SessionConflictError: If a session for this baby is already open
        """
        existing = await self.find_open(baby_id)
        if existing is not None:
            raise SessionConflictError(self.kind.name, existing.get("id"))

        payload = {
            "babyId": baby_id,
            "startTime": to_iso(started_at or self.clock()),
            **_present(fields),
        }
        record = await self.store.create(payload)
        logger.info("Session started", kind=self.kind.name, baby_id=baby_id, record_id=record.get("id"))
        return record

    async def end(self, baby_id: str, fields: Record) -> Record:
        """
        Close the open session.

        Raises:
            NoOpenSessionError: If no session for this baby is open
        """
        existing = await self.find_open(baby_id)
        if existing is None:
            raise NoOpenSessionError(self.kind.name)

        try:
            open_record = self.kind.model.model_validate(existing)
        except PydanticValidationError as e:
            raise ExternalServiceError(f"Invalid {self.kind.name} record from server: {e}") from e

        payload = self.kind.close(open_record, self.clock(), fields)
        record = await self.store.update(open_record.id, payload)
        logger.info("Session ended", kind=self.kind.name, baby_id=baby_id, record_id=open_record.id)
        return record

    async def log(
        self,
        baby_id: str,
        fields: Record,
        duration_minutes: float | None = None,
    ) -> Record:
        """
        Record a session that already finished, ending now.

        Does not look at open sessions.

        Raises:
            ValidationError: If no duration is given and the kind has no default
        """
        duration = duration_minutes if duration_minutes is not None else self.kind.default_duration
        if duration is None:
            raise ValidationError("Duration is required (--duration <minutes>)")
        if duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        ended_at = self.clock()
        started_at = ended_at - timedelta(minutes=duration)
        payload = {"babyId": baby_id, **self.kind.closed_fields(started_at, ended_at, fields)}
        record = await self.store.create(payload)
        logger.info("Session logged", kind=self.kind.name, baby_id=baby_id, duration=duration)
        return record
