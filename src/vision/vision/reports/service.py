from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_non_empty
from ..core.constants import (
    DEFAULT_DEFAULTER_THRESHOLD,
    PROXY_ALERT_RECENT_LIMIT,
    SAMPLE_DEFAULTERS,
    SYSTEM_KPIS,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..sessions.repository import SessionRepository
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class AttendanceCounts:
    total: int = 0
    present: int = 0
    late: int = 0
    absent: int = 0

    @classmethod
    def fold(cls, records: Iterable[AttendanceRecord]) -> "AttendanceCounts":
        present = late = absent = 0
        for r in records:
            if r.status == AttendanceStatus.PRESENT:
                present += 1
            elif r.status == AttendanceStatus.LATE:
                late += 1
            elif r.status == AttendanceStatus.ABSENT:
                absent += 1
        return cls(total=present + late + absent, present=present, late=late, absent=absent)

    def to_dict(self) -> dict:
        return {"total": self.total, "present": self.present, "late": self.late, "absent": self.absent}


@dataclass(frozen=True)
class ProxyAlerts:
    count: int
    recent: list[AttendanceRecord]

    def to_dict(self) -> dict:
        return {"count": self.count, "recent": [r.to_dict() for r in self.recent]}


class ReportService:
    """Read-side aggregations, recomputed from the store on every call."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        sessions: SessionRepository,
    ):
        self._attendance = attendance
        self._students = students
        self._sessions = sessions

    def student_stats(self, student_id: str) -> AttendanceCounts:
        return AttendanceCounts.fold(self._attendance.list_for_student(student_id))

    def department_stats(self, department: str) -> list[dict]:
        department = require_non_empty(department, "department")
        ids = [s.id for s in self._students.list_by_department(department)]
        counts = AttendanceCounts.fold(self._attendance.list_for_students(ids))
        return [{"department": department, **counts.to_dict()}]

    def date_range_history(self, student_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        """Records of the student whose session lies inside [start, end].

        A session qualifies when scheduled_start >= start and scheduled_end <= end.
        """
        if end < start:
            raise ValidationError("endDate must not be before startDate")
        session_ids = {s.id for s in self._sessions.list_by_date_range(start, end)}
        if not session_ids:
            return []
        return [r for r in self._attendance.list_for_student(student_id) if r.session_id in session_ids]

    def defaulters(self, threshold: float = DEFAULT_DEFAULTER_THRESHOLD) -> list[dict]:
        # Sample roster only: no attendance-percentage formula has been agreed for defaulters.
        return [dict(d) for d in SAMPLE_DEFAULTERS if d["percentage"] < threshold]

    def proxy_alerts(self, limit: int = PROXY_ALERT_RECENT_LIMIT) -> ProxyAlerts:
        recent = list(self._attendance.list_proxy_flagged(limit))
        return ProxyAlerts(count=len(recent), recent=recent)

    def kpis(self) -> dict:
        return dict(SYSTEM_KPIS)
