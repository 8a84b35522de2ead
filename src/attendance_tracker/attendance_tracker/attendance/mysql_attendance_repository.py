from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Mapping, Sequence

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, user_id, clock_in, clock_out, lunch_break_start, lunch_break_end,
           total_time, total_hours, location_in, location_out, branch_location,
           work_modality, facial_status, status, created_at, updated_at
    FROM attendance
"""

WRITABLE_COLUMNS = frozenset(
    {
        "user_id",
        "clock_in",
        "clock_out",
        "lunch_break_start",
        "lunch_break_end",
        "total_time",
        "total_hours",
        "location_in",
        "location_out",
        "branch_location",
        "work_modality",
        "facial_status",
        "status",
        "updated_at",
    }
)


def _checked_columns(fields: Mapping[str, Any]) -> list[str]:
    unknown = set(fields) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unknown attendance columns: {sorted(unknown)}")
    return sorted(fields)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_record(self, fields: Mapping[str, Any]) -> AttendanceRecord:
        columns = _checked_columns(fields)
        attendance_id = str(uuid.uuid4())
        placeholders = ", ".join(["%s"] * (len(columns) + 1))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO attendance (attendance_id, {', '.join(columns)}) VALUES ({placeholders})",
                (attendance_id, *[fields[c] for c in columns]),
            )
            return self._fetch(cur, attendance_id)

    def update_record(self, attendance_id: str, fields: Mapping[str, Any]) -> AttendanceRecord:
        columns = _checked_columns(fields)
        if not columns:
            raise ValueError("No attendance columns to update")
        assignments = ", ".join(f"{c}=%s" for c in columns)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance SET {assignments} WHERE attendance_id=%s",
                (*[fields[c] for c in columns], attendance_id),
            )
            return self._fetch(cur, attendance_id)

    def query_records(self, user_id: str, day_start: datetime, day_end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE user_id=%s AND (clock_in BETWEEN %s AND %s OR clock_out IS NULL)
                ORDER BY clock_in ASC
                """,
                (user_id, day_start, day_end),
            )
            return [AttendanceRecord.from_row(r) for r in fetchall(cur)]

    @staticmethod
    def _fetch(cur, attendance_id: str) -> AttendanceRecord:
        cur.execute(_SELECT + " WHERE attendance_id=%s", (attendance_id,))
        row = fetchone(cur)
        if not row:
            raise StorageError(f"Attendance record {attendance_id} not found")
        return AttendanceRecord.from_row(row)
