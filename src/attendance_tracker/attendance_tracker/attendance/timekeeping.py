"""Worked-time accounting for a single attendance record.

Every function here is a pure function of ``(record, now)``; callers that
want a live clock poll them on their own timer.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .model import AttendanceRecord

ZERO = timedelta(0)

_INTERVAL_PART = re.compile(r"(\d+)\s*(hour|minute|second)s?", re.IGNORECASE)


def _non_negative(value: timedelta) -> timedelta:
    return max(value, ZERO)


def lunch_duration(record: "AttendanceRecord", now: datetime) -> timedelta:
    """Length of the lunch break; an unterminated break runs until ``now``."""
    if record.lunch_break_start is None:
        return ZERO
    end = record.lunch_break_end or now
    return _non_negative(end - record.lunch_break_start)


def lunch_elapsed(record: "AttendanceRecord", now: datetime) -> timedelta:
    if not record.is_on_lunch or record.clock_out is not None:
        return ZERO
    return _non_negative(now - record.lunch_break_start)


def elapsed_worked(record: "AttendanceRecord", now: datetime) -> timedelta:
    """Worked time of an open session observed at ``now``.

    Zero for a closed record or one without ``clock_in``.
    """
    if record.clock_in is None or record.clock_out is not None:
        return ZERO
    return _non_negative(now - record.clock_in - lunch_duration(record, now))


def finalize_total_time(record: "AttendanceRecord", now: datetime) -> timedelta:
    """Total worked time at clock-out.

    The end bound is ``record.clock_out`` when already stamped, else ``now``;
    a lunch break that was never ended is closed at that bound.
    """
    if record.clock_in is None:
        return ZERO
    end = record.clock_out or now
    return _non_negative(end - record.clock_in - lunch_duration(record, end))


def _split(value: timedelta) -> tuple[int, int, int]:
    total_seconds = max(int(value.total_seconds()), 0)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return hours, minutes, seconds


def format_duration(value: timedelta) -> str:
    """Display form, e.g. ``"7h 30m 0s"``."""
    hours, minutes, seconds = _split(value)
    return f"{hours}h {minutes}m {seconds}s"


def format_interval(value: timedelta) -> str:
    """Storage form, e.g. ``"7 hours 30 minutes"``; zero renders as ``"0 seconds"``."""
    parts = []
    for amount, unit in zip(_split(value), ("hour", "minute", "second")):
        if amount:
            parts.append(f"{amount} {unit}" + ("" if amount == 1 else "s"))
    return " ".join(parts) or "0 seconds"


def parse_interval(text: Optional[str]) -> Optional[timedelta]:
    """Read a value written by :func:`format_interval` back into a timedelta."""
    if text is None or not str(text).strip():
        return None

    matches = _INTERVAL_PART.findall(str(text))
    if not matches:
        raise ValueError(f"Invalid interval string: {text!r}")

    kwargs = {"hours": 0, "minutes": 0, "seconds": 0}
    for amount, unit in matches:
        kwargs[unit.lower() + "s"] += int(amount)
    return timedelta(**kwargs)


def to_hours(value: timedelta) -> float:
    """Legacy total-hours metric, rounded to two decimals."""
    return round(value.total_seconds() / 3600, 2)
