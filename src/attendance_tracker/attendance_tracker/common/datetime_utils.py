from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta

from ..core.constants import DATE_FORMAT, REFERENCE_DATE, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_clock_time(value: str) -> time:
    """Parse HH:MM (24-hour) string into time."""
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def format_clock_time(value: time | None) -> str | None:
    return value.strftime(TIME_FORMAT) if value is not None else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def clock_time(moment: datetime) -> time:
    """Time-of-day at minute precision, as stored on day-records."""
    return moment.time().replace(second=0, microsecond=0)


def elapsed_minutes(start: time, end: time) -> float:
    """Minutes from start to end on the same (reference) day.

    Negative when end is earlier than start; shifts crossing midnight are not supported.
    """
    delta = datetime.combine(REFERENCE_DATE, end) - datetime.combine(REFERENCE_DATE, start)
    return delta.total_seconds() / 60


def week_bounds(day: date) -> tuple[date, date]:
    """Sunday..Saturday window containing day."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)
