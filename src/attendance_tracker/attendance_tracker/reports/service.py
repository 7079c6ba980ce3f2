from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_clock_time, month_bounds, now_local, week_bounds
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DATE_FORMAT, DAYS_PER_WEEK, DEFAULT_PAGE_SIZE, HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

EXPORT_FIELDS = [
    "date",
    "employee_id",
    "employee_name",
    "department",
    "status",
    "check_in",
    "check_out",
    "break_minutes",
    "total_hours",
    "overtime_hours",
    "note",
]


def _percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def _sum_hours(records: Sequence[AttendanceRecord]) -> float:
    return round(sum(float(r.total_hours or 0) for r in records), 2)


def _sum_overtime(records: Sequence[AttendanceRecord]) -> float:
    return round(sum(float(r.overtime_hours or 0) for r in records), 2)


def _history_range(start_date: Optional[date], end_date: Optional[date]) -> tuple[Optional[date], Optional[date]]:
    """Date filter for history queries: applied only when both bounds are given."""
    if start_date is None or end_date is None:
        return None, None
    if end_date < start_date:
        raise ValidationError("end_date cannot be before start_date")
    return start_date, end_date


@dataclass(frozen=True)
class Page:
    items: list[AttendanceRecord]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass(frozen=True)
class TeamAttendance:
    work_date: date
    records: list[AttendanceRecord]


@dataclass(frozen=True)
class WeeklySummary:
    week_start: date
    week_end: date
    records: list[AttendanceRecord]
    present_days: int
    absent_days: int
    half_days: int
    leave_days: int
    total_hours: float
    total_overtime: float
    average_hours: float
    total_days: int = DAYS_PER_WEEK

    def summary(self) -> dict:
        return {
            "total_days": self.total_days,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "half_days": self.half_days,
            "leave_days": self.leave_days,
            "total_hours": self.total_hours,
            "total_overtime": self.total_overtime,
            "average_hours": self.average_hours,
        }


@dataclass(frozen=True)
class EmployeeSummary:
    employee_id: str
    total_days: int
    present_days: int
    absent_days: int
    total_hours: float
    total_overtime: float
    average_hours: float
    attendance_rate: int


@dataclass(frozen=True)
class TeamStatistics:
    supervisor_id: str
    work_date: date
    total_employees: int
    present_employees: int
    checked_in_employees: int
    on_break_employees: int
    attendance_rate: int
    average_hours: float


@dataclass(frozen=True)
class MonthlyReport:
    employee_id: str
    year: int
    month: int
    records: list[AttendanceRecord]
    summary: EmployeeSummary


@dataclass(frozen=True)
class DepartmentRow:
    name: str
    total_employees: int
    present: int
    total_records: int
    attendance_rate: int


@dataclass(frozen=True)
class ExportData:
    start: date
    end: date
    rows: list[dict] = field(default_factory=list)


class AttendanceReportService:
    """Read-only queries and aggregations over day-records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        history_limit: int = HISTORY_LIMIT,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._clock = clock
        self._history_limit = int(history_limit)
        self._default_page_size = int(default_page_size)

    def today(self) -> date:
        return self._clock().date()

    def get_history(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        start_date, end_date = _history_range(start_date, end_date)
        return list(
            self._attendance.find_history(
                employee_id=employee_id or None,
                start_date=start_date,
                end_date=end_date,
                limit=self._history_limit,
            )
        )

    def get_team_attendance(
        self,
        *,
        supervisor_id: Optional[str] = None,
        work_date: Optional[date] = None,
        now: datetime | None = None,
    ) -> TeamAttendance:
        work_date = work_date or (now or self._clock()).date()
        records = self._attendance.find_for_date(work_date, supervisor_id=supervisor_id or None)
        return TeamAttendance(work_date=work_date, records=list(records))

    def get_all_attendance(
        self,
        *,
        page: int | str = 1,
        limit: int | str | None = None,
        work_date: Optional[date] = None,
        department: Optional[str] = None,
    ) -> Page:
        page = require_positive_int(page, "page")
        limit = require_positive_int(limit if limit is not None else self._default_page_size, "limit")

        items, total = self._attendance.find_page(
            offset=(page - 1) * limit,
            limit=limit,
            work_date=work_date,
            department=department or None,
        )
        return Page(items=list(items), page=page, limit=limit, total=int(total))

    def get_weekly_summary(
        self,
        *,
        employee_id: Optional[str] = None,
        week_start: Optional[date] = None,
        now: datetime | None = None,
    ) -> WeeklySummary:
        start, end = week_bounds(week_start or (now or self._clock()).date())
        records = list(self._attendance.find_in_range(start_date=start, end_date=end, employee_id=employee_id or None))

        counts = Counter(r.status for r in records)
        present = counts[AttendanceStatus.PRESENT]
        half = counts[AttendanceStatus.HALF_DAY]
        total_hours = _sum_hours(records)
        worked_days = present + half

        return WeeklySummary(
            week_start=start,
            week_end=end,
            records=records,
            present_days=present,
            absent_days=counts[AttendanceStatus.ABSENT],
            half_days=half,
            leave_days=counts[AttendanceStatus.LEAVE],
            total_hours=total_hours,
            total_overtime=_sum_overtime(records),
            average_hours=round(total_hours / worked_days, 2) if worked_days else 0.0,
        )

    def get_employee_summary(
        self,
        employee_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> EmployeeSummary:
        employee_id = require_non_empty(employee_id, "employee_id")
        start_date, end_date = _history_range(start_date, end_date)
        # Totals cover every matching record, not just the capped history page.
        records = self._attendance.find_history(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            limit=None,
        )
        return self._summarise(employee_id, list(records))

    def get_team_statistics(
        self,
        supervisor_id: str,
        *,
        work_date: Optional[date] = None,
        now: datetime | None = None,
    ) -> TeamStatistics:
        supervisor_id = require_non_empty(supervisor_id, "supervisor_id")
        team = self.get_team_attendance(supervisor_id=supervisor_id, work_date=work_date, now=now)
        records = team.records

        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        total_hours = _sum_hours(records)
        return TeamStatistics(
            supervisor_id=supervisor_id,
            work_date=team.work_date,
            total_employees=len(records),
            present_employees=present,
            checked_in_employees=sum(1 for r in records if r.is_checked_in),
            on_break_employees=sum(1 for r in records if r.is_on_break),
            attendance_rate=_percent(present, len(records)),
            average_hours=round(total_hours / present, 2) if present else 0.0,
        )

    def get_monthly_report(self, employee_id: str, *, year: int | str, month: int | str) -> MonthlyReport:
        employee_id = require_non_empty(employee_id, "employee_id")
        year = require_positive_int(year, "year")
        month = require_positive_int(month, "month")
        start, end = month_bounds(year, month)

        records = list(self._attendance.find_in_range(start_date=start, end_date=end, employee_id=employee_id))
        return MonthlyReport(
            employee_id=employee_id,
            year=year,
            month=month,
            records=records,
            summary=self._summarise(employee_id, records),
        )

    def get_department_summary(self, *, start_date: date, end_date: date) -> list[DepartmentRow]:
        if end_date < start_date:
            raise ValidationError("end_date cannot be before start_date")

        by_department: dict[str, list[AttendanceRecord]] = {}
        for r in self._attendance.find_in_range(start_date=start_date, end_date=end_date):
            by_department.setdefault(r.department or "Unassigned", []).append(r)

        rows = []
        for name, records in sorted(by_department.items()):
            present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
            rows.append(
                DepartmentRow(
                    name=name,
                    total_employees=len({r.employee_id for r in records}),
                    present=present,
                    total_records=len(records),
                    attendance_rate=_percent(present, len(records)),
                )
            )
        return rows

    def build_export(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> ExportData:
        if end < start:
            raise ValidationError("end cannot be before start")

        records = self._attendance.find_in_range(
            start_date=start,
            end_date=end,
            employee_id=employee_id or None,
            department=department or None,
        )
        rows = [
            {
                "date": r.work_date.strftime(DATE_FORMAT),
                "employee_id": r.employee_id,
                "employee_name": r.employee_name,
                "department": r.department or "-",
                "status": r.status.value,
                "check_in": format_clock_time(r.check_in_time) or "-",
                "check_out": format_clock_time(r.check_out_time) or "-",
                "break_minutes": r.break_minutes,
                "total_hours": f"{r.total_hours:.2f}",
                "overtime_hours": f"{r.overtime_hours:.2f}",
                "note": r.note or "",
            }
            for r in records
        ]
        return ExportData(start=start, end=end, rows=rows)

    @staticmethod
    def _summarise(employee_id: str, records: list[AttendanceRecord]) -> EmployeeSummary:
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        total_hours = _sum_hours(records)
        return EmployeeSummary(
            employee_id=employee_id,
            total_days=len(records),
            present_days=present,
            absent_days=sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
            total_hours=total_hours,
            total_overtime=_sum_overtime(records),
            average_hours=round(total_hours / present, 2) if present else 0.0,
            attendance_rate=_percent(present, len(records)),
        )
