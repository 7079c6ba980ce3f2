from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import clock_time, now_local
from ..common.validators import require_non_empty
from ..core.exceptions import AlreadyCheckedInError, DuplicateRecordError, RecordNotFoundError
from . import timekeeping
from .calculator.base import HoursCalculator
from .calculator.standard_calculator import StandardHoursCalculator
from .model import AttendanceRecord, BreakOutResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Employee self-service actions on today's day-record.

    Each action loads the record for (employee_id, now.date()), applies one
    transition from ``timekeeping`` and writes the result back in a single
    statement. ``now`` defaults to the injected clock (server time).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: HoursCalculator | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._clock = clock
        self._calculator = calculator or StandardHoursCalculator()

    def check_in(
        self,
        employee_id: str,
        *,
        employee_name: str = "",
        department: Optional[str] = None,
        supervisor_id: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        employee_id = require_non_empty(employee_id, "employee_id")
        employee_name = require_non_empty(employee_name, "employee_name")
        now = now or self._clock()
        today = now.date()

        record = timekeeping.start_day(
            self._attendance.get_for_employee_and_date(employee_id, today),
            employee_id=employee_id,
            employee_name=employee_name,
            department=department,
            supervisor_id=supervisor_id,
            work_date=today,
            at=clock_time(now),
        )
        try:
            created = self._attendance.create(record)
        except DuplicateRecordError:
            # A concurrent check-in won the unique key.
            logger.warning("Concurrent check-in rejected for %s on %s", employee_id, today)
            raise AlreadyCheckedInError("Already checked in today")

        logger.info("Checked in %s at %s", employee_id, created.check_in_time)
        return created

    def check_out(self, employee_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        employee_id = require_non_empty(employee_id, "employee_id")
        now = now or self._clock()

        record = timekeeping.end_day(
            self._attendance.get_for_employee_and_date(employee_id, now.date()),
            at=clock_time(now),
            calculator=self._calculator,
        )
        self._persist(record)
        logger.info("Checked out %s, total_hours=%s", employee_id, record.total_hours)
        return record

    def break_in(self, employee_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        employee_id = require_non_empty(employee_id, "employee_id")
        now = now or self._clock()

        record = timekeeping.start_break(
            self._attendance.get_for_employee_and_date(employee_id, now.date()),
            at=clock_time(now),
        )
        self._persist(record)
        logger.info("Break started for %s at %s", employee_id, record.break_start_time)
        return record

    def break_out(self, employee_id: str, *, now: datetime | None = None) -> BreakOutResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        now = now or self._clock()

        result = timekeeping.end_break(
            self._attendance.get_for_employee_and_date(employee_id, now.date()),
            at=clock_time(now),
        )
        self._persist(result.record)
        logger.info("Break ended for %s after %s min", employee_id, result.segment_minutes)
        return result

    def get_today_status(self, employee_id: str, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        """Today's record, or None when the employee has not started the day."""
        now = now or self._clock()
        return self._attendance.get_for_employee_and_date(employee_id, now.date())

    def _persist(self, record: AttendanceRecord) -> None:
        if not self._attendance.save(record):
            raise RecordNotFoundError("Attendance record not found")
