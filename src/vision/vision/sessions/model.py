from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class ClassSession:
    """Domain entity: one scheduled meeting of a subject-section.

    Named ClassSession to keep it apart from Flask's ``session``.
    """

    id: str
    subject_id: str
    faculty_id: str
    section: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    status: SessionStatus = SessionStatus.SCHEDULED
    created_at: Optional[datetime] = None

    def within(self, start: datetime, end: datetime) -> bool:
        """Both scheduled bounds fall inside [start, end], edges included."""
        return self.scheduled_start >= start and self.scheduled_end <= end

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subjectId": self.subject_id,
            "facultyId": self.faculty_id,
            "section": self.section,
            "scheduledStart": isoformat(self.scheduled_start),
            "scheduledEnd": isoformat(self.scheduled_end),
            "actualStart": isoformat(self.actual_start),
            "actualEnd": isoformat(self.actual_end),
            "status": self.status.value,
            "createdAt": isoformat(self.created_at),
        }
