from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import SessionStatus
from ..core.exceptions import FacultyBusyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassSession
from .repository import SessionRepository

_COLUMNS = """
    id, subject_id, faculty_id, section, scheduled_start, scheduled_end,
    actual_start, actual_end, status, created_at
"""


def _to_session(r: dict) -> ClassSession:
    return ClassSession(
        id=str(r["id"]),
        subject_id=str(r["subject_id"]),
        faculty_id=str(r["faculty_id"]),
        section=r["section"],
        scheduled_start=r["scheduled_start"],
        scheduled_end=r["scheduled_end"],
        actual_start=r.get("actual_start"),
        actual_end=r.get("actual_end"),
        status=SessionStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sessions WHERE id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

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
            created_at=now_local().replace(microsecond=0),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sessions(id, subject_id, faculty_id, section, scheduled_start, scheduled_end, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.id,
                    subject_id,
                    faculty_id,
                    section,
                    scheduled_start,
                    scheduled_end,
                    session.status.value,
                    session.created_at,
                ),
            )
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
        with db_cursor(self._conn_factory) as (_, cur):
            if status == SessionStatus.ACTIVE:
                cur.execute("SELECT faculty_id, status FROM sessions WHERE id=%s FOR UPDATE", (session_id,))
                row = fetchone(cur)
                if not row or row["status"] != expected_status.value:
                    return False
                faculty_id = str(row["faculty_id"])
                # Starts for one faculty queue on the faculty row until commit.
                cur.execute("SELECT id FROM faculty WHERE id=%s FOR UPDATE", (faculty_id,))
                fetchall(cur)
                cur.execute(
                    """
                    SELECT id FROM sessions
                    WHERE faculty_id=%s AND status=%s AND id<>%s
                    LIMIT 1
                    FOR UPDATE
                    """,
                    (faculty_id, SessionStatus.ACTIVE.value, session_id),
                )
                busy = fetchone(cur)
                if busy:
                    raise FacultyBusyError(faculty_id, str(busy["id"]))

            cur.execute(
                """
                UPDATE sessions
                SET status=%s,
                    actual_start=COALESCE(%s, actual_start),
                    actual_end=COALESCE(%s, actual_end)
                WHERE id=%s AND status=%s
                """,
                (status.value, actual_start, actual_end, session_id, expected_status.value),
            )
            return cur.rowcount > 0

    def get_active_for_faculty(self, faculty_id: str) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM sessions
                WHERE faculty_id=%s AND status=%s
                ORDER BY actual_start DESC
                LIMIT 1
                """,
                (faculty_id, SessionStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_by_date_range(self, start: datetime, end: datetime) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM sessions
                WHERE scheduled_start >= %s AND scheduled_end <= %s
                ORDER BY scheduled_start ASC
                """,
                (start, end),
            )
            return [_to_session(r) for r in fetchall(cur)]
