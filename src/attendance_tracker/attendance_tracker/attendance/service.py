from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..common.datetime_utils import day_bounds, now_local
from ..common.geo import format_location, require_location
from ..core.constants import (
    DEFAULT_FACIAL_STATUS,
    MAX_BRANCH_LENGTH,
    MAX_FACIAL_STATUS_LENGTH,
    MAX_LOCATION_LENGTH,
)
from ..core.enums import AttendanceStatus, TravelFlag, WorkModality
from ..core.exceptions import MalformedLocation, SessionConflictError, StorageError, ValidationError
from .factory import TravelStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .session import AttendanceSession
from .timekeeping import (
    ZERO,
    elapsed_worked,
    finalize_total_time,
    format_duration,
    format_interval,
    lunch_elapsed,
    to_hours,
)

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance session state machine.

    Each transition validates its guard against the cached session, computes
    the changed fields, persists exactly those through the repository and
    then caches whatever the repository echoes back. A failed storage call
    leaves the session untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        travel_factory: TravelStrategyFactory | None = None,
        default_facial_status: str = DEFAULT_FACIAL_STATUS,
    ):
        self._attendance = attendance
        self._travel = travel_factory or TravelStrategyFactory()
        self._default_facial_status = default_facial_status

    def load_session(self, user_id: int | str, *, now: datetime | None = None) -> AttendanceSession:
        now = now or now_local()
        start, end = day_bounds(now.date())
        records = self._attendance.query_records(str(user_id), start, end)
        return AttendanceSession(
            user_id=str(user_id),
            day=now.date(),
            records=sorted(records, key=lambda r: r.clock_in),
        )

    def clock_in(
        self,
        session: AttendanceSession,
        *,
        work_modality: WorkModality | str,
        location_in: str | None = None,
        branch_location: str | None = None,
        facial_status: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()

        if session.open_record is not None:
            self._reject(session, "clock-in", SessionConflictError("You are already clocked in"))
        modality = self._parse_modality(session, work_modality)
        facial_status = _clean(facial_status)
        if facial_status and len(facial_status) > MAX_FACIAL_STATUS_LENGTH:
            self._reject(
                session,
                "clock-in",
                ValidationError(f"facial_status must be at most {MAX_FACIAL_STATUS_LENGTH} characters"),
            )

        fields = {
            "user_id": session.user_id,
            "clock_in": now,
            "clock_out": None,
            "lunch_break_start": None,
            "lunch_break_end": None,
            "work_modality": modality.value,
            "location_in": self._location(session, "location_in", location_in),
            "branch_location": (
                _clean(branch_location, MAX_BRANCH_LENGTH) if modality == WorkModality.OFFICE else None
            ),
            "facial_status": facial_status or self._default_facial_status,
            "status": AttendanceStatus.OPEN.value,
            "updated_at": now,
        }
        record = self._persist(session, "clock-in", lambda: self._attendance.create_record(fields))
        logger.info("user=%s clocked in (%s) record=%s", session.user_id, modality.value, record.attendance_id)
        return record

    def start_lunch(self, session: AttendanceSession, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._require_open(session, "lunch-start")

        if record.used_lunch_break:
            self._reject(session, "lunch-start", ValidationError("Lunch break already used for this session"))
        if record.is_on_lunch:
            self._reject(session, "lunch-start", ValidationError("Lunch break already in progress"))
        self._require_not_before(session, "lunch-start", now, record.clock_in)

        fields = {"lunch_break_start": now, "updated_at": now}
        updated = self._persist(
            session, "lunch-start", lambda: self._attendance.update_record(record.attendance_id, fields)
        )
        logger.info("user=%s started lunch record=%s", session.user_id, updated.attendance_id)
        return updated

    def end_lunch(self, session: AttendanceSession, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._require_open(session, "lunch-end")

        if record.lunch_break_start is None:
            self._reject(session, "lunch-end", ValidationError("Lunch break has not started"))
        if record.lunch_break_end is not None:
            self._reject(session, "lunch-end", ValidationError("Lunch break already ended"))
        self._require_not_before(session, "lunch-end", now, record.lunch_break_start)

        fields = {"lunch_break_end": now, "updated_at": now}
        updated = self._persist(
            session, "lunch-end", lambda: self._attendance.update_record(record.attendance_id, fields)
        )
        logger.info("user=%s ended lunch record=%s", session.user_id, updated.attendance_id)
        return updated

    def clock_out(
        self,
        session: AttendanceSession,
        *,
        location_out: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        record = self._require_open(session, "clock-out")
        latest = record.lunch_break_end or record.lunch_break_start or record.clock_in
        self._require_not_before(session, "clock-out", now, latest)

        # A lunch break still running at clock-out ends now.
        lunch_break_end = record.lunch_break_end
        if record.is_on_lunch:
            lunch_break_end = now
        total = finalize_total_time(replace(record, lunch_break_end=lunch_break_end), now)

        fields = {
            "clock_out": now,
            "lunch_break_end": lunch_break_end,
            "total_time": format_interval(total),
            "total_hours": to_hours(total),
            "location_out": self._location(session, "location_out", location_out),
            "status": AttendanceStatus.COMPLETED.value,
            "updated_at": now,
        }
        updated = self._persist(
            session, "clock-out", lambda: self._attendance.update_record(record.attendance_id, fields)
        )
        logger.info(
            "user=%s clocked out record=%s total=%s travel=%s",
            session.user_id,
            updated.attendance_id,
            fields["total_time"],
            self.classify(updated).value,
        )
        return updated

    def classify(self, record: AttendanceRecord) -> TravelFlag:
        return self._travel.for_record(record).classify(record)

    def elapsed_display(self, session: AttendanceSession, *, now: datetime | None = None) -> str:
        record = session.open_record
        if record is None:
            return format_duration(ZERO)
        return format_duration(elapsed_worked(record, now or now_local()))

    def lunch_elapsed_display(self, session: AttendanceSession, *, now: datetime | None = None) -> str:
        record = session.open_record
        if record is None:
            return format_duration(ZERO)
        return format_duration(lunch_elapsed(record, now or now_local()))

    def get_today_ui(self, session: AttendanceSession, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        return {
            "user_id": session.user_id,
            "day": session.day.isoformat(),
            "state": session.state.value,
            "elapsed": self.elapsed_display(session, now=now),
            "lunch_elapsed": self.lunch_elapsed_display(session, now=now),
            "records": [self.to_ui(r) for r in session.records],
        }

    def to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "attendance_id": r.attendance_id,
            "clock_in": r.clock_in.isoformat(),
            "clock_out": r.clock_out.isoformat() if r.clock_out else None,
            "lunch_break_start": r.lunch_break_start.isoformat() if r.lunch_break_start else None,
            "lunch_break_end": r.lunch_break_end.isoformat() if r.lunch_break_end else None,
            "total_time": format_interval(r.total_time) if r.total_time is not None else None,
            "total_display": format_duration(r.total_time) if r.total_time is not None else None,
            "total_hours": r.total_hours,
            "work_modality": r.work_modality.value if r.work_modality else None,
            "branch_location": r.branch_location,
            "location_in": r.location_in,
            "location_out": r.location_out,
            "facial_status": r.facial_status,
            "status": r.status.value if r.status else None,
            "travel": self.classify(r).value,
        }

    def _require_open(self, session: AttendanceSession, action: str) -> AttendanceRecord:
        record = session.open_record
        if record is None:
            self._reject(session, action, ValidationError("You are not clocked in"))
        return record

    def _require_not_before(self, session: AttendanceSession, action: str, now: datetime, bound: datetime) -> None:
        if now < bound:
            self._reject(session, action, ValidationError(f"Time {now.isoformat()} precedes {bound.isoformat()}"))

    def _parse_modality(self, session: AttendanceSession, value: Any) -> WorkModality:
        try:
            return WorkModality(value)
        except ValueError:
            self._reject(session, "clock-in", ValidationError(f"Unknown work modality: {value!r}"))

    @staticmethod
    def _location(session: AttendanceSession, field_name: str, value: str | None) -> str | None:
        """Normalize a 'lat,lng' string; malformed text is kept (trimmed) and only logged."""
        if value is None or not str(value).strip():
            return None
        try:
            return format_location(require_location(str(value), field_name))
        except MalformedLocation as e:
            logger.warning("user=%s %s", session.user_id, e)
            return _clean(value, MAX_LOCATION_LENGTH)

    @staticmethod
    def _reject(session: AttendanceSession, action: str, error: ValidationError) -> None:
        logger.warning("user=%s %s rejected: %s", session.user_id, action, error)
        raise error

    @staticmethod
    def _persist(session: AttendanceSession, action: str, call) -> AttendanceRecord:
        try:
            record = call()
        except StorageError as e:
            logger.error("user=%s %s failed in storage: %s", session.user_id, action, e)
            raise
        session.remember(record)
        return record


def _clean(value: str | None, max_length: int | None = None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()[:max_length]
    return value or None
