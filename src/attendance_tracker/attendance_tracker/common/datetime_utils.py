from __future__ import annotations

from datetime import date, datetime, time


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easily.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of ``day``; used as the window for today's records."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def parse_iso_datetime(value):
    """Accept a datetime, an ISO-8601 string, or None."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
