from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.container import build_services
from src.attendance_tracker.attendance_tracker.core.exceptions import DuplicateRecordError


def _check_in_key(r: AttendanceRecord):
    # MySQL sorts NULL first in ascending order.
    return (r.check_in_time is not None, r.check_in_time or time.min)


class InMemoryAttendance:
    """Dict-backed repository with the same unique key as the MySQL table."""

    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _key_taken(self, employee_id: str, work_date: date, *, ignore_id: Optional[int] = None) -> bool:
        return any(
            r.employee_id == employee_id and r.work_date == work_date and r.attendance_id != ignore_id
            for r in self._by_id.values()
        )

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_id.values())

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._by_id.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(int(attendance_id))

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        if self._key_taken(record.employee_id, record.work_date):
            raise DuplicateRecordError("Attendance record already exists for this date")
        self._id += 1
        created = replace(record, attendance_id=self._id)
        self._by_id[self._id] = created
        return created

    def save(self, record: AttendanceRecord) -> bool:
        if record.attendance_id not in self._by_id:
            return False
        self._by_id[record.attendance_id] = record
        return True

    def update_fields(self, attendance_id: int, fields: Mapping[str, Any]) -> Optional[AttendanceRecord]:
        current = self._by_id.get(int(attendance_id))
        if current is None:
            return None
        updated = replace(current, **fields)
        if self._key_taken(updated.employee_id, updated.work_date, ignore_id=current.attendance_id):
            raise DuplicateRecordError("Attendance record already exists for this date")
        self._by_id[current.attendance_id] = updated
        return updated

    def find_history(self, *, employee_id=None, start_date=None, end_date=None, limit=None):
        items = [
            r
            for r in self._by_id.values()
            if (not employee_id or r.employee_id == employee_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def find_for_date(self, work_date: date, *, supervisor_id=None):
        items = [
            r
            for r in self._by_id.values()
            if r.work_date == work_date and (not supervisor_id or r.supervisor_id == supervisor_id)
        ]
        items.sort(key=_check_in_key)
        return items

    def find_page(self, *, offset: int, limit: int, work_date=None, department=None):
        items = [
            r
            for r in self._by_id.values()
            if (work_date is None or r.work_date == work_date) and (not department or r.department == department)
        ]
        items.sort(key=_check_in_key)
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[offset : offset + limit], len(items)

    def find_in_range(self, *, start_date: date, end_date: date, employee_id=None, department=None):
        items = [
            r
            for r in self._by_id.values()
            if start_date <= r.work_date <= end_date
            and (not employee_id or r.employee_id == employee_id)
            and (not department or r.department == department)
        ]
        items.sort(key=lambda r: (r.work_date, _check_in_key(r)))
        return items


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int = 0) -> None:
        self.now = self.now.replace(hour=hour, minute=minute)


def _make_record(**overrides) -> AttendanceRecord:
    values = {
        "employee_id": "E1",
        "employee_name": "Alice",
        "department": "Ops",
        "work_date": date(2026, 2, 2),
    }
    values.update(overrides)
    return AttendanceRecord(**values)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 8, 0, 0)


@pytest.fixture
def repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def container(repo, clock):
    return build_services(repo, clock=clock)


@pytest.fixture
def client(container, monkeypatch):
    from src.attendance_tracker.attendance_tracker.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


@pytest.fixture
def make_record():
    return _make_record
