from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..audit.service import AuditLogService
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import SessionStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..faculty.repository import FacultyRepository
from ..subjects.repository import SubjectRepository
from .model import ClassSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)

# Allowed source states per target; a repeat of the current state is a no-op.
_TRANSITIONS = {
    SessionStatus.ACTIVE: {SessionStatus.SCHEDULED},
    SessionStatus.COMPLETED: {SessionStatus.ACTIVE},
    SessionStatus.CANCELLED: {SessionStatus.SCHEDULED, SessionStatus.ACTIVE},
}


class SessionService:
    """Lifecycle of a class session: scheduled -> active -> completed, or cancelled.

    Rules:
    - start is only valid from scheduled; starting an active session again is a
      silent no-op.
    - end is only valid from active; ending a completed session again is a no-op.
    - cancel is valid from scheduled or active.
    - a faculty member has at most one active session.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        subjects: SubjectRepository,
        faculty: FacultyRepository,
        audit: Optional[AuditLogService] = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._subjects = subjects
        self._faculty = faculty
        self._audit = audit
        self._clock = clock

    def get(self, session_id: str) -> ClassSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def schedule(
        self,
        *,
        subject_id: str,
        faculty_id: str,
        section: str,
        scheduled_start: datetime,
        scheduled_end: datetime,
        ip_address: Optional[str] = None,
    ) -> ClassSession:
        subject_id = require_non_empty(subject_id, "subjectId")
        faculty_id = require_non_empty(faculty_id, "facultyId")
        section = require_non_empty(section, "section", max_len=10)
        if scheduled_end <= scheduled_start:
            raise ValidationError("scheduledEnd must be after scheduledStart")

        if not self._subjects.get_by_id(subject_id):
            raise NotFoundError("Subject not found")
        if not self._faculty.get_by_id(faculty_id):
            raise NotFoundError("Faculty not found")

        session = self._sessions.create(
            subject_id=subject_id,
            faculty_id=faculty_id,
            section=section,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
        )
        logger.info("Scheduled session %s for faculty %s", session.id, faculty_id)
        self._log("session_scheduled", session, user_id=faculty_id, ip_address=ip_address)
        return session

    def start(self, session_id: str, *, now: Optional[datetime] = None, ip_address: Optional[str] = None) -> ClassSession:
        session = self.get(session_id)
        if not self._check_transition(session, SessionStatus.ACTIVE):
            return session

        now = now or self._clock()
        if not self._apply(session, SessionStatus.ACTIVE, actual_start=now):
            return self.get(session.id)
        logger.info("Session %s started at %s", session.id, now.isoformat())
        self._log("session_started", session, user_id=session.faculty_id, ip_address=ip_address)
        return self.get(session.id)

    def end(self, session_id: str, *, now: Optional[datetime] = None, ip_address: Optional[str] = None) -> ClassSession:
        session = self.get(session_id)
        if not self._check_transition(session, SessionStatus.COMPLETED):
            return session

        now = now or self._clock()
        if not self._apply(session, SessionStatus.COMPLETED, actual_end=now):
            return self.get(session.id)
        logger.info("Session %s completed at %s", session.id, now.isoformat())
        self._log("session_completed", session, user_id=session.faculty_id, ip_address=ip_address)
        return self.get(session.id)

    def cancel(self, session_id: str, *, ip_address: Optional[str] = None) -> ClassSession:
        session = self.get(session_id)
        if not self._check_transition(session, SessionStatus.CANCELLED):
            return session

        if not self._apply(session, SessionStatus.CANCELLED):
            return self.get(session.id)
        logger.info("Session %s cancelled", session.id)
        self._log("session_cancelled", session, user_id=session.faculty_id, ip_address=ip_address)
        return self.get(session.id)

    def get_active_session(self, faculty_id: str) -> Optional[ClassSession]:
        return self._sessions.get_active_for_faculty(faculty_id)

    def _apply(self, session: ClassSession, target: SessionStatus, **timings) -> bool:
        """Write the move if the stored status is still the one we read.

        Returns False when a concurrent caller already made the same move. A
        concurrent move elsewhere surfaces as InvalidTransitionError.
        """
        if self._sessions.update_status(session.id, target, expected_status=session.status, **timings):
            return True
        current = self.get(session.id)
        logger.info("Session %s changed to %s while moving to %s", session.id, current.status.value, target.value)
        self._check_transition(current, target)
        if current.status != target:
            # Moved to another legal source state; retry from there.
            return self._apply(current, target, **timings)
        return False

    def _check_transition(self, session: ClassSession, target: SessionStatus) -> bool:
        """True if the move must be applied, False if it is an idempotent repeat."""
        if session.status == target:
            logger.debug("Session %s already %s", session.id, target.value)
            return False
        if session.status not in _TRANSITIONS[target]:
            raise InvalidTransitionError(
                f"Cannot move session from {session.status.value} to {target.value}"
            )
        return True

    def _log(self, action: str, session: ClassSession, **kwargs) -> None:
        if self._audit:
            self._audit.record(action, entity_type="session", entity_id=session.id, **kwargs)
