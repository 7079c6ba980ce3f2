from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Business classification of a day-record, set independently of check-in state."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"


class DayState(str, Enum):
    """Live position of a day-record in the check-in/break/check-out cycle."""

    NOT_STARTED = "not_started"
    CHECKED_IN = "checked_in"
    ON_BREAK = "on_break"
    CHECKED_OUT = "checked_out"
