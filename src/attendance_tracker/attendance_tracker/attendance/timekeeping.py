"""Day-record state transitions.

Pure functions: they take the current record (or None) and a time-of-day and
return the next record, raising a domain error when the transition is not
allowed. Loading and persisting is left to AttendanceService.

    not_started -> checked_in -> on_break -> checked_in -> checked_out
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import elapsed_minutes
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AlreadyOnBreakError,
    NoRecordFoundError,
    NotCheckedInError,
    NotOnBreakError,
)
from .calculator.base import HoursCalculator
from .model import AttendanceRecord, BreakOutResult


def start_day(
    existing: Optional[AttendanceRecord],
    *,
    employee_id: str,
    employee_name: str,
    department: Optional[str],
    supervisor_id: Optional[str],
    work_date: date,
    at: time,
) -> AttendanceRecord:
    if existing is not None:
        raise AlreadyCheckedInError("Already checked in today")

    return AttendanceRecord(
        employee_id=employee_id,
        employee_name=employee_name,
        department=department,
        supervisor_id=supervisor_id,
        work_date=work_date,
        status=AttendanceStatus.PRESENT,
        check_in_time=at,
        is_checked_in=True,
        total_hours=0.0,
    )


def end_day(record: Optional[AttendanceRecord], *, at: time, calculator: HoursCalculator) -> AttendanceRecord:
    # An open break is not closed here; its minutes are simply not counted.
    if record is None:
        raise NoRecordFoundError("No check-in record found for today")
    if record.check_out_time is not None:
        raise AlreadyCheckedOutError("Already checked out today")
    if record.check_in_time is None:
        raise NotCheckedInError("No check-in time recorded for today")

    total_hours = calculator.total_hours(
        check_in=record.check_in_time,
        check_out=at,
        break_minutes=record.break_minutes,
    )
    return replace(
        record,
        check_out_time=at,
        total_hours=total_hours,
        overtime_hours=calculator.overtime_hours(total_hours),
        is_checked_in=False,
    )


def start_break(record: Optional[AttendanceRecord], *, at: time) -> AttendanceRecord:
    if record is None:
        raise NoRecordFoundError("No attendance record found")
    if record.is_on_break:
        raise AlreadyOnBreakError("Already on break")
    if not record.is_checked_in:
        raise NotCheckedInError("Not currently checked in")

    return replace(record, break_start_time=at, is_on_break=True)


def end_break(record: Optional[AttendanceRecord], *, at: time) -> BreakOutResult:
    if record is None:
        raise NoRecordFoundError("No attendance record found")
    if not record.is_on_break or record.break_start_time is None:
        raise NotOnBreakError("Not currently on break")

    segment = round(elapsed_minutes(record.break_start_time, at))
    updated = replace(
        record,
        break_end_time=at,
        break_minutes=int(record.break_minutes or 0) + segment,
        is_on_break=False,
    )
    return BreakOutResult(record=updated, segment_minutes=segment)
