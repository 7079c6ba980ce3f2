from __future__ import annotations

from datetime import time

from ...common.datetime_utils import elapsed_minutes
from ...core.constants import STANDARD_WORK_HOURS
from .base import HoursCalculator


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: (out - in) - break, in hours, rounded to 2 decimals.

    Not clamped: a check-out before the check-in gives negative hours.
    Overtime is whatever exceeds ``standard_hours``, never below zero.
    """

    def __init__(self, standard_hours: float = STANDARD_WORK_HOURS):
        self._standard_hours = float(standard_hours)

    def total_hours(self, *, check_in: time, check_out: time, break_minutes: float) -> float:
        hours = elapsed_minutes(check_in, check_out) / 60
        hours -= float(break_minutes or 0) / 60
        return round(hours, 2)

    def overtime_hours(self, total_hours: float) -> float:
        return round(max(0.0, float(total_hours or 0) - self._standard_hours), 2)
