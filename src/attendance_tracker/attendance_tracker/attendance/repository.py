from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Day-record store keyed by (employee_id, work_date).

    Implementations must enforce uniqueness of that pair and raise
    DuplicateRecordError when an insert or update would break it.
    """

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert and return the record with its assigned attendance_id."""

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> bool:
        """Write every field of an existing record in one statement."""

        raise NotImplementedError

    def update_fields(self, attendance_id: int, fields: Mapping[str, Any]) -> Optional[AttendanceRecord]:
        """Admin-only partial override; returns the updated record or None if missing."""

        raise NotImplementedError

    def find_history(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_for_date(self, work_date: date, *, supervisor_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_page(
        self,
        *,
        offset: int,
        limit: int,
        work_date: Optional[date] = None,
        department: Optional[str] = None,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        raise NotImplementedError

    def find_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records with start_date <= work_date <= end_date, oldest first."""

        raise NotImplementedError
