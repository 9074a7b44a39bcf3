from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from ..core.exceptions import DuplicateAttendanceError
from ..database.memory import InMemoryDatabase
from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Dict-backed store; ``attendance_by_pair`` plays the role of the unique key."""

    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return self._db.attendance.get(record_id)

    def get_for_session_and_student(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        with self._db.lock:
            record_id = self._db.attendance_by_pair.get((session_id, student_id))
            return self._db.attendance.get(record_id) if record_id else None

    def create(
        self,
        *,
        session_id: str,
        student_id: str,
        status: AttendanceStatus,
        marked_at: Optional[datetime],
        marked_by: Optional[MarkedBy],
        method: Optional[MarkingMethod],
        is_proxy: bool = False,
    ) -> AttendanceRecord:
        with self._db.lock:
            if (session_id, student_id) in self._db.attendance_by_pair:
                raise DuplicateAttendanceError(session_id, student_id)
            record = AttendanceRecord(
                id=str(uuid.uuid4()),
                session_id=session_id,
                student_id=student_id,
                status=status,
                marked_at=marked_at,
                marked_by=marked_by,
                method=method,
                is_proxy=bool(is_proxy),
                created_at=now_local(),
            )
            self._db.attendance[record.id] = record
            self._db.attendance_by_pair[(session_id, student_id)] = record.id
            return record

    def update(
        self,
        record_id: str,
        *,
        status: AttendanceStatus,
        marked_at: datetime,
        method: Optional[MarkingMethod] = None,
        marked_by: Optional[MarkedBy] = None,
        is_proxy: Optional[bool] = None,
    ) -> bool:
        with self._db.lock:
            current = self._db.attendance.get(record_id)
            if not current:
                return False
            self._db.attendance[record_id] = replace(
                current,
                status=status,
                marked_at=marked_at,
                method=method or current.method,
                marked_by=marked_by or current.marked_by,
                is_proxy=current.is_proxy if is_proxy is None else bool(is_proxy),
            )
            return True

    def _select(self, predicate) -> list[AttendanceRecord]:
        # dict preserves insertion order, which is creation order here.
        with self._db.lock:
            return [r for r in self._db.attendance.values() if predicate(r)]

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        return self._select(lambda r: r.session_id == session_id)

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        return self._select(lambda r: r.student_id == student_id)

    def list_for_students(self, student_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        wanted = set(student_ids)
        if not wanted:
            return []
        return self._select(lambda r: r.student_id in wanted)

    def list_proxy_flagged(self, limit: int) -> Sequence[AttendanceRecord]:
        flagged = self._select(lambda r: r.is_proxy)
        return list(reversed(flagged))[: max(int(limit), 0)]
