from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import SessionState
from .model import AttendanceRecord


@dataclass
class AttendanceSession:
    """Per-user context: the cached records for one day.

    Owned by a single caller; the service replaces cached records only after
    storage has echoed a transition back.
    """

    user_id: str
    day: date
    records: list[AttendanceRecord] = field(default_factory=list)

    @property
    def open_record(self) -> Optional[AttendanceRecord]:
        for record in reversed(self.records):
            if record.is_open:
                return record
        return None

    @property
    def current_record(self) -> Optional[AttendanceRecord]:
        """The open record, else the most recently started one."""
        open_record = self.open_record
        if open_record is not None:
            return open_record
        if not self.records:
            return None
        return max(self.records, key=lambda r: r.clock_in)

    @property
    def state(self) -> SessionState:
        record = self.current_record
        if record is None:
            return SessionState.NO_OPEN_SESSION
        if not record.is_open:
            return SessionState.CLOSED
        if record.is_on_lunch:
            return SessionState.ON_LUNCH
        return SessionState.CLOCKED_IN

    def remember(self, record: AttendanceRecord) -> None:
        """Insert or replace a record echoed back by storage."""
        for i, existing in enumerate(self.records):
            if existing.attendance_id == record.attendance_id:
                self.records[i] = record
                return
        self.records.append(record)
