from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

import pytest

from attendance_tracker.attendance.model import AttendanceRecord
from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.core.exceptions import StorageError


class InMemoryAttendance:
    """Storage collaborator double: keeps rows as dicts and echoes records back."""

    def __init__(self):
        self.rows: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_with: StorageError | None = None
        self._id = 0

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def create_record(self, fields: Mapping[str, Any]) -> AttendanceRecord:
        self.calls.append(("create", dict(fields)))
        self._maybe_fail()
        self._id += 1
        row = {"attendance_id": str(self._id), "created_at": fields.get("clock_in"), **fields}
        self.rows[row["attendance_id"]] = row
        return AttendanceRecord.from_row(row)

    def update_record(self, attendance_id: str, fields: Mapping[str, Any]) -> AttendanceRecord:
        self.calls.append(("update", dict(fields)))
        self._maybe_fail()
        row = self.rows.get(attendance_id)
        if row is None:
            raise StorageError(f"Attendance record {attendance_id} not found")
        row = {**row, **fields}
        self.rows[attendance_id] = row
        return AttendanceRecord.from_row(row)

    def query_records(self, user_id: str, day_start: datetime, day_end: datetime):
        self._maybe_fail()
        return [
            AttendanceRecord.from_row(r)
            for r in self.rows.values()
            if r["user_id"] == user_id and (day_start <= r["clock_in"] <= day_end or r.get("clock_out") is None)
        ]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance_repo) -> AttendanceService:
    return AttendanceService(attendance_repo)
