from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import SessionStatus
from ..core.exceptions import FacultyBusyError
from ..database.memory import InMemoryDatabase
from .model import ClassSession
from .repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def get_by_id(self, session_id: str) -> Optional[ClassSession]:
        return self._db.sessions.get(session_id)

    def create(
        self,
        *,
        subject_id: str,
        faculty_id: str,
        section: str,
        scheduled_start: datetime,
        scheduled_end: datetime,
    ) -> ClassSession:
        session = ClassSession(
            id=str(uuid.uuid4()),
            subject_id=subject_id,
            faculty_id=faculty_id,
            section=section,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            created_at=now_local(),
        )
        with self._db.lock:
            self._db.sessions[session.id] = session
        return session

    def update_status(
        self,
        session_id: str,
        status: SessionStatus,
        *,
        expected_status: SessionStatus,
        actual_start: Optional[datetime] = None,
        actual_end: Optional[datetime] = None,
    ) -> bool:
        with self._db.lock:
            current = self._db.sessions.get(session_id)
            if not current or current.status != expected_status:
                return False
            if status == SessionStatus.ACTIVE:
                busy = self._active_for_faculty(current.faculty_id, exclude=session_id)
                if busy:
                    raise FacultyBusyError(current.faculty_id, busy.id)
            self._db.sessions[session_id] = replace(
                current,
                status=status,
                actual_start=actual_start if actual_start is not None else current.actual_start,
                actual_end=actual_end if actual_end is not None else current.actual_end,
            )
            return True

    def get_active_for_faculty(self, faculty_id: str) -> Optional[ClassSession]:
        with self._db.lock:
            return self._active_for_faculty(faculty_id)

    def _active_for_faculty(self, faculty_id: str, *, exclude: Optional[str] = None) -> Optional[ClassSession]:
        return next(
            (
                s
                for s in self._db.sessions.values()
                if s.faculty_id == faculty_id and s.status == SessionStatus.ACTIVE and s.id != exclude
            ),
            None,
        )

    def list_by_date_range(self, start: datetime, end: datetime) -> Sequence[ClassSession]:
        with self._db.lock:
            items = [s for s in self._db.sessions.values() if s.within(start, end)]
        return sorted(items, key=lambda s: s.scheduled_start)
