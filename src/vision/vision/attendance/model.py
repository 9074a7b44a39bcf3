from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's outcome for one session.

    At most one record exists per (session_id, student_id).
    """

    id: str
    session_id: str
    student_id: str
    status: AttendanceStatus
    marked_at: Optional[datetime] = None
    marked_by: Optional[MarkedBy] = None
    method: Optional[MarkingMethod] = None
    is_proxy: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "studentId": self.student_id,
            "status": self.status.value,
            "markedAt": isoformat(self.marked_at),
            "markedBy": self.marked_by.value if self.marked_by else None,
            "method": self.method.value if self.method else None,
            "isProxy": self.is_proxy,
            "createdAt": isoformat(self.created_at),
        }


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a kiosk detection: either a new record or the existing one."""

    student: Student
    record: AttendanceRecord
    already_marked: bool = False
