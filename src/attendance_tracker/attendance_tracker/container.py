from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.admin_service import AttendanceAdminService
from .attendance.calculator.standard_calculator import StandardHoursCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_PAGE_SIZE, HISTORY_LIMIT
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    admin_service: AttendanceAdminService
    report_service: AttendanceReportService

    conn: Optional[DatabaseConnection] = None


def build_services(
    attendance_repo: AttendanceRepository,
    *,
    clock: Callable[[], datetime] = now_local,
    history_limit: int = HISTORY_LIMIT,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services around any repository implementation."""

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        attendance_service=AttendanceService(
            attendance_repo,
            calculator=StandardHoursCalculator(),
            clock=clock,
        ),
        admin_service=AttendanceAdminService(attendance_repo),
        report_service=AttendanceReportService(
            attendance_repo,
            history_limit=history_limit,
            default_page_size=default_page_size,
            clock=clock,
        ),
    )


def build_container(
    *,
    db_config: dict,
    history_limit: int = HISTORY_LIMIT,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(
        MySQLAttendanceRepository(conn),
        history_limit=history_limit,
        default_page_size=default_page_size,
        conn=conn,
    )
