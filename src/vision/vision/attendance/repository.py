from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_session_and_student(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert a record with a generated id.

        Raises DuplicateAttendanceError when the pair already has a record; the
        store, not the caller, is the authority on this.
        """

        raise NotImplementedError

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
        """Patch status/marked_at; method, marked_by and is_proxy only when given."""

        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_students(self, student_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_proxy_flagged(self, limit: int) -> Sequence[AttendanceRecord]:
        """Most recent is_proxy records, newest first."""

        raise NotImplementedError
