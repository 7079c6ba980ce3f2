from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError
from src.attendance_tracker.attendance_tracker.reports.service import AttendanceReportService


@pytest.fixture
def reports(repo, clock):
    return AttendanceReportService(repo, history_limit=100, default_page_size=50, clock=clock)


def test_history_newest_first_and_filtered(repo, reports, make_record):
    for day in (1, 3, 2):
        repo.create(make_record(work_date=date(2026, 2, day)))
    repo.create(make_record(employee_id="E2", work_date=date(2026, 2, 2)))

    rows = reports.get_history(employee_id="E1")
    assert [r.work_date.day for r in rows] == [3, 2, 1]

    rows = reports.get_history(employee_id="E1", start_date=date(2026, 2, 2), end_date=date(2026, 2, 3))
    assert [r.work_date.day for r in rows] == [3, 2]

    rows = reports.get_history(start_date=date(2026, 2, 1), end_date=date(2026, 2, 2))
    assert len(rows) == 3


def test_history_needs_both_bounds_to_filter(repo, reports, make_record):
    for day in (1, 2, 3):
        repo.create(make_record(work_date=date(2026, 2, day)))

    assert len(reports.get_history(employee_id="E1", start_date=date(2026, 2, 3))) == 3
    assert len(reports.get_history(employee_id="E1", end_date=date(2026, 2, 1))) == 3


def test_history_rejects_inverted_range(reports):
    with pytest.raises(ValidationError):
        reports.get_history(start_date=date(2026, 2, 5), end_date=date(2026, 2, 1))


def test_history_is_capped(repo, clock, make_record):
    for i in range(5):
        repo.create(make_record(work_date=date(2026, 1, 1) + timedelta(days=i)))

    reports = AttendanceReportService(repo, history_limit=3, clock=clock)
    assert len(reports.get_history()) == 3


def test_team_attendance_defaults_to_today(repo, reports, make_record):
    repo.create(make_record(employee_id="E1", supervisor_id="S1", check_in_time=time(9, 30)))
    repo.create(make_record(employee_id="E2", supervisor_id="S1", check_in_time=time(8, 45)))
    repo.create(make_record(employee_id="E3", supervisor_id="S2", check_in_time=time(8, 0)))
    repo.create(make_record(employee_id="E4", supervisor_id="S1", work_date=date(2026, 2, 1)))

    team = reports.get_team_attendance(supervisor_id="S1")

    assert team.work_date == date(2026, 2, 2)
    assert [r.employee_id for r in team.records] == ["E2", "E1"]
    assert len(reports.get_team_attendance().records) == 3


def test_pagination(repo, reports, make_record):
    start = date(2025, 1, 1)
    for i in range(120):
        repo.create(make_record(work_date=start + timedelta(days=i)))

    page = reports.get_all_attendance(page=2, limit=50)

    assert page.total == 120
    assert page.pages == 3
    assert len(page.items) == 50
    # Newest first: page 2 holds rows 51..100.
    assert page.items[0].work_date == start + timedelta(days=69)
    assert page.items[-1].work_date == start + timedelta(days=20)
    assert page.pagination() == {"page": 2, "limit": 50, "total": 120, "pages": 3}


def test_pagination_uses_default_limit_and_filters(repo, reports, make_record):
    repo.create(make_record(employee_id="E1", department="Ops"))
    repo.create(make_record(employee_id="E2", department="Sales"))

    page = reports.get_all_attendance(department="Sales")
    assert page.limit == 50
    assert [r.employee_id for r in page.items] == ["E2"]


@pytest.mark.parametrize("page,limit", [(0, 10), ("x", 10), (1, 0), (1, "-5")])
def test_pagination_rejects_bad_params(reports, page, limit):
    with pytest.raises(ValidationError):
        reports.get_all_attendance(page=page, limit=limit)


def test_weekly_summary(repo, reports, make_record):
    # Mon..Fri of the week starting Sunday 2026-02-01
    for i in range(1, 6):
        repo.create(make_record(work_date=date(2026, 2, 1) + timedelta(days=i), total_hours=8.0))
    repo.create(make_record(work_date=date(2026, 2, 8), total_hours=8.0))

    week = reports.get_weekly_summary(employee_id="E1")

    assert week.week_start == date(2026, 2, 1)
    assert week.week_end == date(2026, 2, 7)
    assert len(week.records) == 5
    assert week.records[0].work_date == date(2026, 2, 2)
    summary = week.summary()
    assert summary["total_days"] == 7
    assert summary["present_days"] == 5
    assert summary["total_hours"] == 40.0
    assert summary["average_hours"] == 8.0


def test_weekly_summary_counts_statuses(repo, reports, make_record):
    repo.create(make_record(work_date=date(2026, 2, 2), total_hours=8.0))
    repo.create(make_record(work_date=date(2026, 2, 3), status=AttendanceStatus.HALF_DAY, total_hours=4.0))
    repo.create(make_record(work_date=date(2026, 2, 4), status=AttendanceStatus.ABSENT))
    repo.create(make_record(work_date=date(2026, 2, 5), status=AttendanceStatus.LEAVE))

    summary = reports.get_weekly_summary(employee_id="E1", week_start=date(2026, 2, 4)).summary()

    assert summary["present_days"] == 1
    assert summary["half_days"] == 1
    assert summary["absent_days"] == 1
    assert summary["leave_days"] == 1
    assert summary["average_hours"] == 6.0


def test_weekly_summary_empty_week(reports):
    summary = reports.get_weekly_summary(employee_id="nobody").summary()
    assert summary["present_days"] == 0
    assert summary["total_hours"] == 0
    assert summary["average_hours"] == 0


def test_employee_summary(repo, reports, make_record):
    repo.create(make_record(work_date=date(2026, 2, 2), total_hours=8.0))
    repo.create(make_record(work_date=date(2026, 2, 3), total_hours=7.0))
    repo.create(make_record(work_date=date(2026, 2, 4), status=AttendanceStatus.ABSENT))

    summary = reports.get_employee_summary("E1")

    assert summary.total_days == 3
    assert summary.present_days == 2
    assert summary.absent_days == 1
    assert summary.total_hours == 15.0
    assert summary.average_hours == 7.5
    assert summary.attendance_rate == 67


def test_employee_summary_without_records(reports):
    summary = reports.get_employee_summary("E9")
    assert summary.total_days == 0
    assert summary.average_hours == 0
    assert summary.attendance_rate == 0


def test_team_statistics(repo, reports, make_record):
    repo.create(make_record(employee_id="E1", supervisor_id="S1", is_checked_in=True, total_hours=0.0))
    repo.create(make_record(employee_id="E2", supervisor_id="S1", is_checked_in=True, is_on_break=True))
    repo.create(make_record(employee_id="E3", supervisor_id="S1", total_hours=8.0))
    repo.create(make_record(employee_id="E4", supervisor_id="S1", status=AttendanceStatus.LEAVE))

    stats = reports.get_team_statistics("S1")

    assert stats.total_employees == 4
    assert stats.present_employees == 3
    assert stats.checked_in_employees == 2
    assert stats.on_break_employees == 1
    assert stats.attendance_rate == 75
    assert stats.average_hours == 2.67


def test_team_statistics_requires_supervisor(reports):
    with pytest.raises(ValidationError):
        reports.get_team_statistics("")


def test_monthly_report(repo, reports, make_record):
    repo.create(make_record(work_date=date(2026, 2, 27), total_hours=8.0))
    repo.create(make_record(work_date=date(2026, 2, 3), total_hours=6.0))
    repo.create(make_record(work_date=date(2026, 3, 1), total_hours=8.0))

    report = reports.get_monthly_report("E1", year="2026", month="2")

    assert [r.work_date.day for r in report.records] == [3, 27]
    assert report.summary.total_hours == 14.0


def test_monthly_report_rejects_bad_month(reports):
    with pytest.raises(ValidationError):
        reports.get_monthly_report("E1", year=2026, month=13)


def test_department_summary(repo, reports, make_record):
    repo.create(make_record(employee_id="E1", department="Sales"))
    repo.create(make_record(employee_id="E1", department="Sales", work_date=date(2026, 2, 3)))
    repo.create(make_record(employee_id="E2", department="Sales", status=AttendanceStatus.ABSENT))
    repo.create(make_record(employee_id="E3", department=None))

    rows = reports.get_department_summary(start_date=date(2026, 2, 1), end_date=date(2026, 2, 28))

    assert [r.name for r in rows] == ["Sales", "Unassigned"]
    sales = rows[0]
    assert sales.total_employees == 2
    assert sales.total_records == 3
    assert sales.present == 2
    assert sales.attendance_rate == 67


def test_department_summary_rejects_inverted_range(reports):
    with pytest.raises(ValidationError):
        reports.get_department_summary(start_date=date(2026, 2, 5), end_date=date(2026, 2, 1))


def test_build_export_rows(repo, reports, make_record):
    repo.create(
        make_record(
            check_in_time=time(9, 0),
            check_out_time=time(17, 30),
            break_minutes=30,
            total_hours=8.0,
        )
    )
    repo.create(make_record(employee_id="E2", department=None, status=AttendanceStatus.ABSENT))

    data = reports.build_export(start=date(2026, 2, 1), end=date(2026, 2, 28))

    assert len(data.rows) == 2
    first = next(r for r in data.rows if r["employee_id"] == "E1")
    assert first["check_in"] == "09:00"
    assert first["check_out"] == "17:30"
    assert first["total_hours"] == "8.00"
    other = next(r for r in data.rows if r["employee_id"] == "E2")
    assert other["department"] == "-"
    assert other["check_in"] == "-"
    assert other["status"] == "absent"


def test_employee_summary_is_not_capped_by_history_limit(repo, reports, make_record):
    start = date(2025, 1, 1)
    for i in range(150):
        repo.create(make_record(work_date=start + timedelta(days=i), total_hours=8.0))

    summary = reports.get_employee_summary("E1")

    assert len(reports.get_history(employee_id="E1")) == 100
    assert summary.total_days == 150
    assert summary.present_days == 150
    assert summary.total_hours == 1200.0


def test_employee_summary_date_range(repo, reports, make_record):
    for day in (1, 2, 3):
        repo.create(make_record(work_date=date(2026, 2, day), total_hours=8.0))

    summary = reports.get_employee_summary("E1", start_date=date(2026, 2, 2), end_date=date(2026, 2, 3))
    assert summary.total_days == 2

    # A lone bound does not filter.
    assert reports.get_employee_summary("E1", start_date=date(2026, 2, 3)).total_days == 3


def test_overtime_totals(repo, reports, make_record):
    repo.create(make_record(work_date=date(2026, 2, 2), total_hours=11.0, overtime_hours=3.0))
    repo.create(make_record(work_date=date(2026, 2, 3), total_hours=9.5, overtime_hours=1.5))
    repo.create(make_record(work_date=date(2026, 2, 4), total_hours=7.0))

    week = reports.get_weekly_summary(employee_id="E1")
    assert week.total_overtime == 4.5
    assert week.summary()["total_overtime"] == 4.5

    assert reports.get_employee_summary("E1").total_overtime == 4.5

    export = reports.build_export(start=date(2026, 2, 1), end=date(2026, 2, 28))
    assert [row["overtime_hours"] for row in export.rows] == ["3.00", "1.50", "0.00"]
