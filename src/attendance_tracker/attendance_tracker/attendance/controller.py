from __future__ import annotations

from flask import Flask

from ..common.responses import json_action, json_body, ok
from ..container import Container
from ..core.enums import DayState

URL_PREFIX = "/api/attendance"


def register(app: Flask, container: Container) -> None:
    """Employee actions (check-in/out, breaks, today's status) and admin overrides."""

    service = container.attendance_service
    admin = container.admin_service

    @app.route(f"{URL_PREFIX}/checkin", methods=["POST"], endpoint="attendance_checkin")
    @json_action
    def checkin():
        data = json_body()
        record = service.check_in(
            data.get("employee_id", ""),
            employee_name=data.get("employee_name", ""),
            department=data.get("department"),
            supervisor_id=data.get("supervisor_id"),
        )
        return ok(message="Checked in successfully", data=record.to_dict())

    @app.route(f"{URL_PREFIX}/checkout", methods=["POST"], endpoint="attendance_checkout")
    @json_action
    def checkout():
        record = service.check_out(json_body().get("employee_id", ""))
        return ok(message="Checked out successfully", data=record.to_dict())

    @app.route(f"{URL_PREFIX}/breakin", methods=["POST"], endpoint="attendance_breakin")
    @json_action
    def breakin():
        record = service.break_in(json_body().get("employee_id", ""))
        return ok(message="Break started", data=record.to_dict())

    @app.route(f"{URL_PREFIX}/breakout", methods=["POST"], endpoint="attendance_breakout")
    @json_action
    def breakout():
        result = service.break_out(json_body().get("employee_id", ""))
        return ok(
            message="Break ended",
            break_duration=result.duration_label,
            data=result.record.to_dict(),
        )

    @app.route(f"{URL_PREFIX}/status/<employee_id>", methods=["GET"], endpoint="attendance_status")
    @json_action
    def today_status(employee_id: str):
        record = service.get_today_status(employee_id)
        if record is None:
            return ok(data=None, state=DayState.NOT_STARTED.value, message="No attendance record for today")
        return ok(data=record.to_dict(), state=record.state.value)

    # ===== ADMIN / SUPERVISOR OVERRIDES =====

    @app.route(f"{URL_PREFIX}/manual", methods=["POST"], endpoint="attendance_manual")
    @json_action
    def manual_entry():
        record = admin.manual_entry(json_body())
        return ok(201, message="Manual attendance recorded successfully", data=record.to_dict())

    @app.route(f"{URL_PREFIX}/<attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @json_action
    def update_attendance(attendance_id: str):
        record = admin.update_attendance(attendance_id, json_body())
        return ok(message="Attendance updated successfully", data=record.to_dict())
