"""Privileged overrides for supervisors and admins.

These operations bypass the check-in/break/check-out transitions entirely and
write caller-supplied values as given, so they live apart from
AttendanceService.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.validators import require_fields
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError, RecordNotFoundError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MANUAL_ENTRY_REQUIRED = ("employee_id", "employee_name", "date", "check_in_time")


def _optional(parse: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def wrapper(value: Any) -> Any:
        if value is None or value == "":
            return None
        return parse(value)

    return wrapper


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Expected text, got {value!r}")
    return value.strip()


def _status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Invalid status {value!r} (expected one of: {allowed})")


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValidationError(f"Expected true/false, got {value!r}")


def _minutes(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid minutes: {value!r}")
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid minutes: {value!r}")


def _hours(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid hours: {value!r}")
    try:
        return round(float(value), 2)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid hours: {value!r}")


# payload key -> (record attribute, parser)
FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "employee_id": ("employee_id", _text),
    "employee_name": ("employee_name", _text),
    "department": ("department", _optional(_text)),
    "supervisor_id": ("supervisor_id", _optional(_text)),
    "date": ("work_date", parse_iso_date),
    "status": ("status", _status),
    "check_in_time": ("check_in_time", _optional(parse_clock_time)),
    "check_out_time": ("check_out_time", _optional(parse_clock_time)),
    "is_checked_in": ("is_checked_in", _flag),
    "is_on_break": ("is_on_break", _flag),
    "break_start_time": ("break_start_time", _optional(parse_clock_time)),
    "break_end_time": ("break_end_time", _optional(parse_clock_time)),
    "break_time": ("break_minutes", _minutes),
    "total_hours": ("total_hours", _hours),
    "overtime": ("overtime_hours", _hours),
    "note": ("note", _optional(_text)),
}

# Columns that may not be cleared by a patch.
NON_NULLABLE = {
    "employee_id",
    "employee_name",
    "work_date",
    "status",
    "is_checked_in",
    "is_on_break",
    "break_minutes",
    "total_hours",
    "overtime_hours",
}


def parse_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a request payload into record attribute values."""

    unknown = sorted(k for k in payload if k not in FIELDS and k != "id")
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")

    out: dict[str, Any] = {}
    for key, value in payload.items():
        if key == "id":
            continue
        attr, parse = FIELDS[key]
        if value is None and attr in NON_NULLABLE:
            raise ValidationError(f"{key} cannot be empty")
        out[attr] = parse(value) if value is not None else None
    return out


def parse_attendance_id(value: Any) -> int:
    try:
        attendance_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Invalid attendance ID")
    if attendance_id < 1:
        raise ValidationError("Invalid attendance ID")
    return attendance_id


class AttendanceAdminService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def manual_entry(self, payload: Mapping[str, Any]) -> AttendanceRecord:
        require_fields(payload, MANUAL_ENTRY_REQUIRED)
        fields = {k: v for k, v in parse_fields(payload).items() if v is not None}
        record = AttendanceRecord(**fields)

        if self._attendance.get_for_employee_and_date(record.employee_id, record.work_date):
            raise DuplicateRecordError("Attendance record already exists for this date")

        created = self._attendance.create(record)
        logger.info("Manual attendance recorded for %s on %s", created.employee_id, created.work_date)
        return created

    def update_attendance(self, attendance_id: Any, payload: Mapping[str, Any]) -> AttendanceRecord:
        attendance_id = parse_attendance_id(attendance_id)
        fields = parse_fields(payload)

        updated = self._attendance.update_fields(attendance_id, fields)
        if updated is None:
            raise RecordNotFoundError("Attendance record not found")

        logger.info("Attendance %s updated: %s", attendance_id, ", ".join(sorted(fields)) or "no changes")
        return updated
