from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, MarkedBy, MarkingMethod
from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, session_id, student_id, status, marked_at, marked_by, method, is_proxy, created_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(r["id"]),
        session_id=str(r["session_id"]),
        student_id=str(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        marked_at=r.get("marked_at"),
        marked_by=MarkedBy(r["marked_by"]) if r.get("marked_by") else None,
        method=MarkingMethod(r["method"]) if r.get("method") else None,
        is_proxy=bool(r.get("is_proxy")),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_session_and_student(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s AND student_id=%s",
                (session_id, student_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records
                        (id, session_id, student_id, status, marked_at, marked_by, method, is_proxy, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.id,
                        session_id,
                        student_id,
                        status.value,
                        marked_at,
                        marked_by.value if marked_by else None,
                        method.value if method else None,
                        int(record.is_proxy),
                        record.created_at,
                    ),
                )
        except IntegrityError as e:
            if is_duplicate_key(e, key_name="uq_attendance_session_student"):
                raise DuplicateAttendanceError(session_id, student_id) from e
            raise
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s,
                    marked_at=%s,
                    method=COALESCE(%s, method),
                    marked_by=COALESCE(%s, marked_by),
                    is_proxy=COALESCE(%s, is_proxy)
                WHERE id=%s
                """,
                (
                    status.value,
                    marked_at,
                    method.value if method else None,
                    marked_by.value if marked_by else None,
                    None if is_proxy is None else int(is_proxy),
                    record_id,
                ),
            )
            return cur.rowcount > 0

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY created_at ASC",
                (session_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s ORDER BY created_at ASC",
                (student_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_students(self, student_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        ids = list(student_ids)
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE student_id IN ({in_clause(ids)})
                ORDER BY created_at ASC
                """,
                tuple(ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_proxy_flagged(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE is_proxy=1
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]
