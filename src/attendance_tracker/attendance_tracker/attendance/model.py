from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_datetime
from ..core.constants import DEFAULT_FACIAL_STATUS
from ..core.enums import AttendanceStatus, WorkModality
from .timekeeping import parse_interval


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one work session.

    Note: a plain data object. Storage echoes a fresh instance back after
    every transition; instances are never mutated in place.
    """

    attendance_id: str
    user_id: str
    clock_in: datetime
    clock_out: Optional[datetime] = None
    lunch_break_start: Optional[datetime] = None
    lunch_break_end: Optional[datetime] = None
    total_time: Optional[timedelta] = None
    total_hours: Optional[float] = None
    location_in: Optional[str] = None
    location_out: Optional[str] = None
    branch_location: Optional[str] = None
    work_modality: Optional[WorkModality] = None
    facial_status: str = DEFAULT_FACIAL_STATUS
    status: Optional[AttendanceStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    @property
    def is_on_lunch(self) -> bool:
        return self.lunch_break_start is not None and self.lunch_break_end is None

    @property
    def used_lunch_break(self) -> bool:
        return self.lunch_break_start is not None and self.lunch_break_end is not None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceRecord":
        total_time = row.get("total_time")
        if total_time is not None and not isinstance(total_time, timedelta):
            total_time = parse_interval(total_time)
        modality = row.get("work_modality")
        status = row.get("status")
        total_hours = row.get("total_hours")
        return cls(
            attendance_id=str(row["attendance_id"]),
            user_id=str(row["user_id"]),
            clock_in=parse_iso_datetime(row["clock_in"]),
            clock_out=parse_iso_datetime(row.get("clock_out")),
            lunch_break_start=parse_iso_datetime(row.get("lunch_break_start")),
            lunch_break_end=parse_iso_datetime(row.get("lunch_break_end")),
            total_time=total_time,
            total_hours=float(total_hours) if total_hours is not None else None,
            location_in=row.get("location_in"),
            location_out=row.get("location_out"),
            branch_location=row.get("branch_location"),
            work_modality=WorkModality(modality) if modality else None,
            facial_status=row.get("facial_status") or DEFAULT_FACIAL_STATUS,
            status=AttendanceStatus(status) if status else None,
            created_at=parse_iso_datetime(row.get("created_at")),
            updated_at=parse_iso_datetime(row.get("updated_at")),
        )
