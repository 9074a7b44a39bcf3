from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import ClassSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[ClassSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        subject_id: str,
        faculty_id: str,
        section: str,
        scheduled_start: datetime,
        scheduled_end: datetime,
    ) -> ClassSession:
        raise NotImplementedError

    def update_status(
        self,
        session_id: str,
        status: SessionStatus,
        *,
        expected_status: SessionStatus,
        actual_start: Optional[datetime] = None,
        actual_end: Optional[datetime] = None,
    ) -> bool:
        """Move the session from expected_status to status, patching timings when given.

        Compare-and-set: returns False if the session does not exist or its stored
        status is no longer expected_status. Timing fields passed as None keep
        their stored value. Moving to active raises FacultyBusyError when the same
        faculty already has a different active session.
        """

        raise NotImplementedError

    def get_active_for_faculty(self, faculty_id: str) -> Optional[ClassSession]:
        raise NotImplementedError

    def list_by_date_range(self, start: datetime, end: datetime) -> Sequence[ClassSession]:
        """Sessions with scheduled_start >= start and scheduled_end <= end."""

        raise NotImplementedError
