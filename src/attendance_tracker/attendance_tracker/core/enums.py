from __future__ import annotations

from enum import Enum


class WorkModality(str, Enum):
    """Where the employee is expected to be during the session."""

    WFH = "wfh"
    OFFICE = "office"


class AttendanceStatus(str, Enum):
    """Record status stored alongside the timestamps."""

    OPEN = "open"
    COMPLETED = "completed"


class SessionState(str, Enum):
    NO_OPEN_SESSION = "no_open_session"
    CLOCKED_IN = "clocked_in"
    ON_LUNCH = "on_lunch"
    CLOSED = "closed"


class TravelFlag(str, Enum):
    """Outcome of classifying a closed record's clock-out location."""

    TRAVEL = "travel"
    POSSIBLE_TRAVEL = "possible_travel"
    NONE = "none"
