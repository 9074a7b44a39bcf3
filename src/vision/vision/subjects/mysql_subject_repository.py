from __future__ import annotations

import uuid
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Subject
from .repository import SubjectRepository


def _to_subject(r: dict) -> Subject:
    return Subject(
        id=str(r["id"]),
        code=r["code"],
        name=r["name"],
        department=r["department"],
        credits=int(r.get("credits") or 0),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, code, name, department, credits FROM subjects WHERE id=%s", (subject_id,))
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def get_by_code(self, code: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, code, name, department, credits FROM subjects WHERE code=%s", (code,))
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_by_department(self, department: str) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, code, name, department, credits FROM subjects WHERE department=%s ORDER BY code",
                (department,),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def create(self, *, code: str, name: str, department: str, credits: int) -> Subject:
        subject = Subject(id=str(uuid.uuid4()), code=code, name=name, department=department, credits=int(credits))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO subjects(id, code, name, department, credits) VALUES(%s,%s,%s,%s,%s)",
                    (subject.id, code, name, department, subject.credits),
                )
        except IntegrityError as e:
            if is_duplicate_key(e, key_name="uq_subjects_code"):
                raise DuplicateKeyError(f"Subject code {code} already exists") from e
            raise
        return subject
