from __future__ import annotations

import csv
import io
from dataclasses import asdict
from datetime import date
from typing import Optional

from flask import Flask, request

from ..attendance.controller import URL_PREFIX
from ..common.datetime_utils import parse_iso_date
from ..common.responses import json_action, ok
from ..container import Container
from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError
from .service import EXPORT_FIELDS, ExportData


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _date_arg(name: str) -> Optional[date]:
        value = (request.args.get(name) or "").strip()
        return parse_iso_date(value) if value else None

    def _text_arg(name: str) -> Optional[str]:
        return (request.args.get(name) or "").strip() or None

    def _records(records) -> list[dict]:
        return [r.to_dict() for r in records]

    def _write_report_csv(*, data: ExportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route(f"{URL_PREFIX}/history", methods=["GET"], endpoint="attendance_history")
    @json_action
    def history():
        records = reports.get_history(
            employee_id=_text_arg("employee_id"),
            start_date=_date_arg("start_date"),
            end_date=_date_arg("end_date"),
        )
        return ok(data=_records(records), count=len(records))

    @app.route(f"{URL_PREFIX}/team", methods=["GET"], endpoint="attendance_team")
    @json_action
    def team():
        result = reports.get_team_attendance(supervisor_id=_text_arg("supervisor_id"), work_date=_date_arg("date"))
        return ok(
            data=_records(result.records),
            count=len(result.records),
            date=result.work_date.strftime(DATE_FORMAT),
        )

    @app.route(f"{URL_PREFIX}/", methods=["GET"], endpoint="attendance_all")
    @json_action
    def all_attendance():
        page = reports.get_all_attendance(
            page=request.args.get("page", 1),
            limit=request.args.get("limit"),
            work_date=_date_arg("date"),
            department=_text_arg("department"),
        )
        return ok(data=_records(page.items), pagination=page.pagination())

    @app.route(f"{URL_PREFIX}/weekly-summary", methods=["GET"], endpoint="attendance_weekly_summary")
    @json_action
    def weekly_summary():
        week = reports.get_weekly_summary(employee_id=_text_arg("employee_id"), week_start=_date_arg("week_start"))
        return ok(
            data={
                "week_start": week.week_start.strftime(DATE_FORMAT),
                "week_end": week.week_end.strftime(DATE_FORMAT),
                "attendance": _records(week.records),
                "summary": week.summary(),
            }
        )

    @app.route(f"{URL_PREFIX}/employees/<employee_id>/summary", methods=["GET"], endpoint="attendance_employee_summary")
    @json_action
    def employee_summary(employee_id: str):
        summary = reports.get_employee_summary(
            employee_id,
            start_date=_date_arg("start_date"),
            end_date=_date_arg("end_date"),
        )
        return ok(data=asdict(summary))

    @app.route(f"{URL_PREFIX}/employees/<employee_id>/monthly", methods=["GET"], endpoint="attendance_employee_monthly")
    @json_action
    def employee_monthly(employee_id: str):
        today = reports.today()
        report = reports.get_monthly_report(
            employee_id,
            year=request.args.get("year", today.year),
            month=request.args.get("month", today.month),
        )
        return ok(
            data={
                "employee_id": report.employee_id,
                "year": report.year,
                "month": report.month,
                "records": _records(report.records),
                "summary": asdict(report.summary),
            }
        )

    @app.route(f"{URL_PREFIX}/team/stats", methods=["GET"], endpoint="attendance_team_stats")
    @json_action
    def team_stats():
        stats = reports.get_team_statistics(_text_arg("supervisor_id") or "", work_date=_date_arg("date"))
        data = asdict(stats)
        data["work_date"] = stats.work_date.strftime(DATE_FORMAT)
        return ok(data=data)

    @app.route(f"{URL_PREFIX}/departments", methods=["GET"], endpoint="attendance_departments")
    @json_action
    def departments():
        today = reports.today()
        rows = reports.get_department_summary(
            start_date=_date_arg("start_date") or today.replace(day=1),
            end_date=_date_arg("end_date") or today,
        )
        return ok(data=[asdict(row) for row in rows])

    @app.route(f"{URL_PREFIX}/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @json_action
    def export_csv():
        start = _date_arg("start_date")
        end = _date_arg("end_date")
        if not start or not end:
            raise ValidationError("start_date and end_date are required")

        data = reports.build_export(
            start=start,
            end=end,
            department=_text_arg("department"),
            employee_id=_text_arg("employee_id"),
        )
        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)
