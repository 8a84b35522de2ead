from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage collaborator for attendance records.

    Note (DIP): the service depends on this interface, never on a concrete
    database. Implementations raise StorageError on failure and return the
    row as stored, which becomes the source of truth for the caller.
    """

    def create_record(self, fields: Mapping[str, Any]) -> AttendanceRecord:
        raise NotImplementedError

    def update_record(self, attendance_id: str, fields: Mapping[str, Any]) -> AttendanceRecord:
        raise NotImplementedError

    def query_records(self, user_id: str, day_start: datetime, day_end: datetime) -> Sequence[AttendanceRecord]:
        """Records whose clock_in falls in the window, plus any still-open record."""
        raise NotImplementedError
