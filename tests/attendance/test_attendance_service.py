from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from src.vision.vision.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.vision.vision.attendance.service import AttendanceService
from src.vision.vision.core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from src.vision.vision.core.exceptions import NotFoundError, ValidationError
from src.vision.vision.database.memory import InMemoryDatabase
from src.vision.vision.faculty.memory_faculty_repository import InMemoryFacultyRepository
from src.vision.vision.sessions.memory_session_repository import InMemorySessionRepository
from src.vision.vision.students.memory_student_repository import InMemoryStudentRepository
from src.vision.vision.subjects.memory_subject_repository import InMemorySubjectRepository

NOW = datetime(2026, 2, 2, 9, 5)


class RacingAttendanceRepo(InMemoryAttendanceRepository):
    """Hides the first lookup, as if another kiosk inserted right after we checked."""

    def __init__(self, db: InMemoryDatabase):
        super().__init__(db)
        self.hidden_lookups = 1

    def get_for_session_and_student(self, session_id, student_id):
        if self.hidden_lookups:
            self.hidden_lookups -= 1
            return None
        return super().get_for_session_and_student(session_id, student_id)


def _world(attendance_cls=InMemoryAttendanceRepository):
    db = InMemoryDatabase()
    students = InMemoryStudentRepository(db)
    sessions = InMemorySessionRepository(db)
    faculty = InMemoryFacultyRepository(db).create(employee_id="F1", name="Dr. Khan", department="CS")
    subject = InMemorySubjectRepository(db).create(code="CS201", name="DBMS", department="CS", credits=4)
    session = sessions.create(
        subject_id=subject.id,
        faculty_id=faculty.id,
        section="A",
        scheduled_start=NOW,
        scheduled_end=NOW + timedelta(hours=1),
    )
    zaid = students.create(roll_no="CS001", name="Mohammad Zaid", department="CS")
    shoaib = students.create(roll_no="CS002", name="Mohammad Shoaib", department="CS")
    attendance = attendance_cls(db)
    svc = AttendanceService(attendance, students, sessions, clock=lambda: NOW)
    return svc, attendance, session, zaid, shoaib


def test_detect_creates_present_record():
    svc, attendance, session, zaid, _ = _world()

    result = svc.detect_and_mark(session.id, "CS001")

    assert result.already_marked is False
    assert result.student.name == "Mohammad Zaid"
    rec = result.record
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.marked_by == MarkedBy.SYSTEM
    assert rec.method == MarkingMethod.FACIAL_RECOGNITION
    assert rec.marked_at == NOW
    assert rec.is_proxy is False
    assert attendance.get_for_session_and_student(session.id, zaid.id) == rec


def test_detect_twice_reports_already_marked_without_new_record():
    svc, attendance, session, _, _ = _world()

    first = svc.detect_and_mark(session.id, "CS001", "qr_code")
    second = svc.detect_and_mark(session.id, "CS001")

    assert second.already_marked is True
    assert second.record.id == first.record.id
    assert second.record.status == AttendanceStatus.PRESENT
    assert second.record.method == MarkingMethod.QR_CODE
    assert len(attendance.list_for_session(session.id)) == 1


def test_detect_unknown_identifier_never_creates_record():
    svc, attendance, session, _, _ = _world()

    with pytest.raises(NotFoundError, match="Student not found"):
        svc.detect_and_mark(session.id, "CS999")

    assert attendance.list_for_session(session.id) == []


def test_detect_unknown_session_is_not_found():
    svc, _, _, _, _ = _world()

    with pytest.raises(NotFoundError, match="Session not found"):
        svc.detect_and_mark("missing", "CS001")


def test_detect_rejects_unknown_method():
    svc, _, session, _, _ = _world()

    with pytest.raises(ValidationError):
        svc.detect_and_mark(session.id, "CS001", "retina_scan")


def test_detect_after_manual_mark_reports_the_manual_status():
    svc, _, session, zaid, _ = _world()
    svc.mark_manual(session_id=session.id, student_id=zaid.id, status="late")

    result = svc.detect_and_mark(session.id, "CS001")

    assert result.already_marked is True
    assert result.record.status == AttendanceStatus.LATE


def test_lost_race_is_reported_as_already_marked():
    svc, attendance, session, zaid, _ = _world(RacingAttendanceRepo)
    attendance.hidden_lookups = 0
    winner = svc.detect_and_mark(session.id, "CS001").record

    attendance.hidden_lookups = 1
    result = svc.detect_and_mark(session.id, "CS001")

    assert result.already_marked is True
    assert result.record.id == winner.id
    assert len(attendance.list_for_student(zaid.id)) == 1


def test_concurrent_detections_leave_one_record():
    svc, attendance, session, zaid, _ = _world()
    barrier = threading.Barrier(16)
    results = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        r = svc.detect_and_mark(session.id, "CS001")
        with lock:
            results.append(r)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(attendance.list_for_student(zaid.id)) == 1
    assert sum(1 for r in results if not r.already_marked) == 1
    assert len({r.record.id for r in results}) == 1


def test_mark_manual_updates_existing_record_in_place():
    svc, attendance, session, _, shoaib = _world()

    created = svc.mark_manual(session_id=session.id, student_id=shoaib.id, status=AttendanceStatus.ABSENT)
    updated = svc.mark_manual(session_id=session.id, student_id=shoaib.id, status="present", is_proxy=True)

    assert updated.id == created.id
    assert updated.status == AttendanceStatus.PRESENT
    assert updated.marked_by == MarkedBy.FACULTY
    assert updated.method == MarkingMethod.MANUAL
    assert updated.is_proxy is True
    assert len(attendance.list_for_session(session.id)) == 1


def test_mark_manual_validates_inputs():
    svc, _, session, zaid, _ = _world()

    with pytest.raises(ValidationError):
        svc.mark_manual(session_id=session.id, student_id=zaid.id, status="excused")
    with pytest.raises(NotFoundError):
        svc.mark_manual(session_id=session.id, student_id="ghost", status="present")
    with pytest.raises(ValidationError):
        svc.mark_manual(session_id="", student_id=zaid.id, status="present")


def test_update_record_patches_status_and_keeps_method():
    svc, _, session, _, _ = _world()
    rec = svc.detect_and_mark(session.id, "CS001").record

    updated = svc.update_record(rec.id, status="late")

    assert updated.status == AttendanceStatus.LATE
    assert updated.method == MarkingMethod.FACIAL_RECOGNITION
    assert updated.marked_by == MarkedBy.SYSTEM


def test_update_unknown_record_is_not_found():
    svc, _, _, _, _ = _world()

    with pytest.raises(NotFoundError):
        svc.update_record("nope", status="present")


def test_remarking_as_proxy_flags_the_existing_record():
    svc, attendance, session, zaid, _ = _world()
    svc.mark_manual(session_id=session.id, student_id=zaid.id, status="present")

    svc.mark_manual(session_id=session.id, student_id=zaid.id, status="present", is_proxy=True)

    flagged = attendance.list_proxy_flagged(5)
    assert [r.student_id for r in flagged] == [zaid.id]


def test_update_record_keeps_proxy_flag():
    svc, _, session, zaid, _ = _world()
    rec = svc.mark_manual(session_id=session.id, student_id=zaid.id, status="present", is_proxy=True)

    assert svc.update_record(rec.id, status="late").is_proxy is True
