from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.vision.vision.core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from src.vision.vision.core.exceptions import ValidationError

DAY = datetime(2026, 3, 2, 9, 0)


def _seed(container):
    roster = container.roster_service
    faculty = roster.onboard_faculty(employee_id="F9", name="Dr. Iyer", department="CS")
    subject = roster.add_subject(code="CS401", name="Networks", department="CS")
    cs = [
        roster.enroll_student(roll_no="CS001", name="Mohammad Zaid", department="CS"),
        roster.enroll_student(roll_no="CS002", name="Mohammad Shoaib", department="CS"),
    ]
    ec = roster.enroll_student(roll_no="EC001", name="Nisha Rao", department="EC")

    def session(start: datetime, hours: int = 1):
        return container.sessions_repo.create(
            subject_id=subject.id,
            faculty_id=faculty.id,
            section="A",
            scheduled_start=start,
            scheduled_end=start + timedelta(hours=hours),
        )

    return cs, ec, session


def _mark(container, session, student, status, *, is_proxy=False):
    return container.attendance_repo.create(
        session_id=session.id,
        student_id=student.id,
        status=status,
        marked_at=session.scheduled_start,
        marked_by=MarkedBy.FACULTY,
        method=MarkingMethod.MANUAL,
        is_proxy=is_proxy,
    )


def test_student_stats_total_is_sum_of_statuses(container):
    (zaid, _), _, session = _seed(container)
    statuses = [AttendanceStatus.PRESENT, AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT]
    for i, status in enumerate(statuses):
        _mark(container, session(DAY + timedelta(days=i)), zaid, status)

    stats = container.report_service.student_stats(zaid.id)

    assert stats.to_dict() == {"total": 4, "present": 2, "late": 1, "absent": 1}
    assert stats.total == stats.present + stats.late + stats.absent


def test_student_stats_for_unknown_student_are_zero(container):
    assert container.report_service.student_stats("nobody").to_dict() == {
        "total": 0,
        "present": 0,
        "late": 0,
        "absent": 0,
    }


def test_department_stats_only_count_that_department(container):
    (zaid, shoaib), ec, session = _seed(container)
    s = session(DAY)
    _mark(container, s, zaid, AttendanceStatus.PRESENT)
    _mark(container, s, shoaib, AttendanceStatus.ABSENT)
    _mark(container, s, ec, AttendanceStatus.PRESENT)

    assert container.report_service.department_stats("CS") == [
        {"department": "CS", "total": 2, "present": 1, "late": 0, "absent": 1}
    ]
    assert container.report_service.department_stats("ME")[0]["total"] == 0


def test_date_range_history_bounds_are_inclusive(container):
    (zaid, _), _, session = _seed(container)
    start = DAY
    end = DAY + timedelta(days=2)

    at_start = session(start)
    at_end = session(end - timedelta(hours=1))
    before = session(start - timedelta(days=1))
    overruns = session(end - timedelta(minutes=30))
    for s in (at_start, at_end, before, overruns):
        _mark(container, s, zaid, AttendanceStatus.PRESENT)

    history = container.report_service.date_range_history(zaid.id, start, end)

    assert {r.session_id for r in history} == {at_start.id, at_end.id}


def test_date_range_history_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.report_service.date_range_history("x", DAY, DAY - timedelta(days=1))


def test_defaulters_filter_by_threshold(container):
    reports = container.report_service

    assert [d["name"] for d in reports.defaulters()] == ["Shivam Mishra", "Rajesh Kumar", "Priya Sharma"]
    assert [d["name"] for d in reports.defaulters(50)] == ["Shivam Mishra"]
    assert reports.defaulters(40) == []


def test_proxy_alerts_are_newest_first_and_capped(container):
    (zaid, shoaib), ec, session = _seed(container)
    flagged = []
    for i in range(7):
        s = session(DAY + timedelta(days=i))
        flagged.append(_mark(container, s, zaid, AttendanceStatus.PRESENT, is_proxy=True))
        _mark(container, s, shoaib, AttendanceStatus.PRESENT)

    alerts = container.report_service.proxy_alerts()

    assert alerts.count == 5
    assert [r.id for r in alerts.recent] == [r.id for r in reversed(flagged[-5:])]
    assert all(r["isProxy"] for r in alerts.to_dict()["recent"])


def test_kpis_are_a_fixed_snapshot(container):
    assert container.report_service.kpis() == {
        "automatedEntries": 87,
        "avgMarkingTime": 2.3,
        "proxyFailsCaught": 12,
        "systemUptime": 99.8,
    }
