"""
Calendar helpers for report windows: injectable clock, trailing 12-month default
window, week-of-month and the label formats used by chart buckets.
"""
import calendar
from datetime import date, datetime
from typing import Protocol

DEFAULT_WINDOW_MONTHS = 12

# Fixed English abbreviations; dashboard labels must not depend on the server locale.
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    def today(self) -> date:
        return datetime.now().date()


class FixedClock:
    """Clock pinned to one day. Used by tests and scripted reports."""

    def __init__(self, day: date):
        self._day = day

    def today(self) -> date:
        return self._day


_system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency; override in tests to pin 'today'."""
    return _system_clock


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def default_window(today: date, months: int = DEFAULT_WINDOW_MONTHS) -> tuple[date, date]:
    """
    Trailing window of `months` full calendar months ending at the end of today's month.
    For today=2024-06-15 and months=12: (2023-07-01, 2024-06-30).
    """
    start_year, start_month = add_months(today.year, today.month, -(months - 1))
    return date(start_year, start_month, 1), month_end(today.year, today.month)


def week_of_month(day_of_month: int) -> int:
    """Days 1-7 -> 1, 8-14 -> 2, ... 29-31 -> 5. Not an ISO week."""
    if not 1 <= day_of_month <= 31:
        raise ValueError(f"day_of_month out of range: {day_of_month}")
    return (day_of_month - 1) // 7 + 1


def month_label(d: date) -> str:
    return f"{MONTH_ABBR[d.month - 1]} {d.year}"


def week_label(d: date) -> str:
    return f"Week {week_of_month(d.day)} - {month_label(d)}"


def to_date(value) -> date:
    """Normalize a store value (date, datetime or ISO string) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
