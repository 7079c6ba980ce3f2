from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Optional

from ..common.datetime_utils import format_clock_time
from ..core.constants import DATE_FORMAT
from ..core.enums import AttendanceStatus, DayState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    employee_id: str
    employee_name: str
    work_date: date
    department: Optional[str] = None
    supervisor_id: Optional[str] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    is_checked_in: bool = False
    is_on_break: bool = False
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    break_minutes: int = 0
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    note: Optional[str] = None
    attendance_id: Optional[int] = None

    @property
    def state(self) -> DayState:
        if self.check_out_time is not None:
            return DayState.CHECKED_OUT
        if self.is_on_break:
            return DayState.ON_BREAK
        if self.is_checked_in:
            return DayState.CHECKED_IN
        return DayState.NOT_STARTED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department": self.department,
            "supervisor_id": self.supervisor_id,
            "date": self.work_date.strftime(DATE_FORMAT),
            "status": self.status.value,
            "check_in_time": format_clock_time(self.check_in_time),
            "check_out_time": format_clock_time(self.check_out_time),
            "is_checked_in": self.is_checked_in,
            "is_on_break": self.is_on_break,
            "break_start_time": format_clock_time(self.break_start_time),
            "break_end_time": format_clock_time(self.break_end_time),
            "break_time": self.break_minutes,
            "total_hours": self.total_hours,
            "overtime": self.overtime_hours,
            "note": self.note,
        }


@dataclass(frozen=True)
class BreakOutResult:
    record: AttendanceRecord
    segment_minutes: int

    @property
    def duration_label(self) -> str:
        return f"{self.segment_minutes} minutes"
