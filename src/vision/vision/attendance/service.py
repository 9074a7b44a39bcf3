from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..audit.service import AuditLogService
from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from ..core.exceptions import DuplicateAttendanceError, NotFoundError
from ..sessions.repository import SessionRepository
from ..students.repository import StudentRepository
from .model import AttendanceRecord, DetectionResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Records presence for (session, student) pairs.

    Every write path goes through the repository's unique (session, student)
    constraint; a DuplicateAttendanceError from the store is the final word on
    whether a record already exists.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        sessions: SessionRepository,
        audit: Optional[AuditLogService] = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._sessions = sessions
        self._audit = audit
        self._clock = clock

    def detect_and_mark(
        self,
        session_id: str,
        student_identifier: str,
        method: MarkingMethod | str = MarkingMethod.FACIAL_RECOGNITION,
        *,
        ip_address: Optional[str] = None,
    ) -> DetectionResult:
        session_id = require_non_empty(session_id, "sessionId")
        student_identifier = require_non_empty(student_identifier, "studentIdentifier")
        method = require_enum(method, MarkingMethod, "method")

        student = self._students.get_by_roll_no(student_identifier)
        if not student:
            logger.info("Kiosk detection for unknown identifier %r", student_identifier)
            raise NotFoundError("Student not found")
        if not self._sessions.get_by_id(session_id):
            raise NotFoundError("Session not found")

        existing = self._attendance.get_for_session_and_student(session_id, student.id)
        if existing:
            return DetectionResult(student=student, record=existing, already_marked=True)

        try:
            record = self._attendance.create(
                session_id=session_id,
                student_id=student.id,
                status=AttendanceStatus.PRESENT,
                marked_at=self._clock(),
                marked_by=MarkedBy.SYSTEM,
                method=method,
            )
        except DuplicateAttendanceError:
            # Lost a race with a concurrent detection; report the winner's record.
            winner = self._attendance.get_for_session_and_student(session_id, student.id)
            if winner is None:
                raise
            logger.info("Concurrent detection for %s in session %s", student.roll_no, session_id)
            return DetectionResult(student=student, record=winner, already_marked=True)

        logger.info("Marked %s present in session %s via %s", student.roll_no, session_id, method.value)
        self._log("attendance_detected", record, details=f"method={method.value}", ip_address=ip_address)
        return DetectionResult(student=student, record=record)

    def mark_manual(
        self,
        *,
        session_id: str,
        student_id: str,
        status: AttendanceStatus | str,
        method: MarkingMethod | str = MarkingMethod.MANUAL,
        marked_by: MarkedBy | str = MarkedBy.FACULTY,
        is_proxy: bool = False,
        ip_address: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert the pair's record, or update it in place if one already exists."""
        session_id = require_non_empty(session_id, "sessionId")
        student_id = require_non_empty(student_id, "studentId")
        status = require_enum(status, AttendanceStatus, "status")
        method = require_enum(method, MarkingMethod, "method")
        marked_by = require_enum(marked_by, MarkedBy, "markedBy")

        if not self._sessions.get_by_id(session_id):
            raise NotFoundError("Session not found")
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

        now = self._clock()
        existing = self._attendance.get_for_session_and_student(session_id, student_id)
        if existing is None:
            try:
                record = self._attendance.create(
                    session_id=session_id,
                    student_id=student_id,
                    status=status,
                    marked_at=now,
                    marked_by=marked_by,
                    method=method,
                    is_proxy=is_proxy,
                )
            except DuplicateAttendanceError:
                existing = self._attendance.get_for_session_and_student(session_id, student_id)
                if existing is None:
                    raise
            else:
                self._log("attendance_marked", record, details=f"status={status.value}", ip_address=ip_address)
                return record

        self._attendance.update(
            existing.id, status=status, marked_at=now, method=method, marked_by=marked_by, is_proxy=is_proxy
        )
        logger.info("Updated attendance %s to %s", existing.id, status.value)
        self._log("attendance_updated", existing, details=f"status={status.value}", ip_address=ip_address)
        return self._attendance.get_by_id(existing.id) or existing

    def update_record(
        self,
        record_id: str,
        *,
        status: AttendanceStatus | str,
        method: Optional[MarkingMethod | str] = None,
        ip_address: Optional[str] = None,
    ) -> AttendanceRecord:
        status = require_enum(status, AttendanceStatus, "status")
        method = require_enum(method, MarkingMethod, "method") if method is not None else None

        if not self._attendance.update(record_id, status=status, marked_at=self._clock(), method=method):
            raise NotFoundError("Attendance record not found")
        record = self._attendance.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Attendance record not found")
        self._log("attendance_updated", record, details=f"status={status.value}", ip_address=ip_address)
        return record

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_session(session_id)

    def _log(self, action: str, record: AttendanceRecord, **kwargs) -> None:
        if self._audit:
            self._audit.record(action, entity_type="attendance", entity_id=record.id, **kwargs)
