from __future__ import annotations

from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_decimal, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

# Domain attribute names double as column names.
WRITABLE_COLUMNS = (
    "employee_id",
    "employee_name",
    "department",
    "supervisor_id",
    "work_date",
    "status",
    "check_in_time",
    "check_out_time",
    "is_checked_in",
    "is_on_break",
    "break_start_time",
    "break_end_time",
    "break_minutes",
    "total_hours",
    "overtime_hours",
    "note",
)

SELECT_COLUMNS = "attendance_id, " + ", ".join(WRITABLE_COLUMNS)


def _to_db(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        department=r.get("department"),
        supervisor_id=r.get("supervisor_id"),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        is_checked_in=bool(r.get("is_checked_in")),
        is_on_break=bool(r.get("is_on_break")),
        break_start_time=normalize_mysql_time(r.get("break_start_time")),
        break_end_time=normalize_mysql_time(r.get("break_end_time")),
        break_minutes=int(r.get("break_minutes") or 0),
        total_hours=normalize_mysql_decimal(r.get("total_hours")),
        overtime_hours=normalize_mysql_decimal(r.get("overtime_hours")),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SELECT_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {SELECT_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        placeholders = ",".join(["%s"] * len(WRITABLE_COLUMNS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO attendance_records({', '.join(WRITABLE_COLUMNS)}) VALUES({placeholders})",
                tuple(_to_db(getattr(record, col)) for col in WRITABLE_COLUMNS),
            )
            new_id = int(cur.lastrowid)
        return replace(record, attendance_id=new_id)

    def save(self, record: AttendanceRecord) -> bool:
        if record.attendance_id is None:
            raise ValueError("Cannot save a record without attendance_id")
        assignments = ", ".join(f"{col}=%s" for col in WRITABLE_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {assignments} WHERE attendance_id=%s",
                tuple(_to_db(getattr(record, col)) for col in WRITABLE_COLUMNS) + (int(record.attendance_id),),
            )
            return cur.rowcount > 0

    def update_fields(self, attendance_id: int, fields: Mapping[str, Any]) -> Optional[AttendanceRecord]:
        unknown = set(fields) - set(WRITABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Not writable: {sorted(unknown)}")

        with db_cursor(self._conn_factory) as (_, cur):
            if fields:
                assignments = ", ".join(f"{col}=%s" for col in fields)
                cur.execute(
                    f"UPDATE attendance_records SET {assignments} WHERE attendance_id=%s",
                    tuple(_to_db(v) for v in fields.values()) + (int(attendance_id),),
                )
            cur.execute(
                f"SELECT {SELECT_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_history(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        sql = f"""
            SELECT {SELECT_COLUMNS}
            FROM attendance_records
            WHERE {" AND ".join(clauses)}
            ORDER BY work_date DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_for_date(self, work_date: date, *, supervisor_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        clauses = ["work_date=%s"]
        params: list[object] = [work_date]
        if supervisor_id:
            clauses.append("supervisor_id=%s")
            params.append(supervisor_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SELECT_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY check_in_time ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_page(
        self,
        *,
        offset: int,
        limit: int,
        work_date: Optional[date] = None,
        department: Optional[str] = None,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        clauses = ["1=1"]
        params: list[object] = []
        if work_date is not None:
            clauses.append("work_date=%s")
            params.append(work_date)
        if department:
            clauses.append("department=%s")
            params.append(department)
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {SELECT_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, check_in_time ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total

    def find_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if department:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SELECT_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date ASC, check_in_time ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
