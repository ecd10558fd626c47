"""
Naive date/slot arithmetic.

Dates are plain calendar dates, slots are "HH:MM" strings. No timezone is
carried anywhere; "now" is always passed in by the caller.
"""

from datetime import date, datetime, timedelta

from .config import time_str_to_minutes


def as_date(value) -> date:
    """
    Calendar date from a date, a datetime or a "YYYY-MM-DD" string.

    Raises:
        TypeError: value is none of those.
        ValueError: string is not an ISO date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"expected a date or 'YYYY-MM-DD' string, got {type(value).__name__}")


def slot_datetime(target_date: date, slot: str) -> datetime:
    """Naive datetime of slot start on target_date."""
    return datetime.combine(target_date, datetime.min.time()) + timedelta(
        minutes=time_str_to_minutes(slot)
    )


def is_slot_in_past(target_date: date, slot: str, now: datetime) -> bool:
    """A slot that starts at or before now is in the past."""
    return slot_datetime(target_date, slot) <= now


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def date_range(start: date, days: int) -> list[date]:
    """
    Consecutive dates starting at start.

    Returns empty list if days < 1.
    """
    return [add_days(start, i) for i in range(max(days, 0))]
