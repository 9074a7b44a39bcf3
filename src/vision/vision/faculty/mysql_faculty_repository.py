from __future__ import annotations

import uuid
from typing import Optional

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Faculty
from .repository import FacultyRepository


def _to_faculty(r: dict) -> Faculty:
    return Faculty(
        id=str(r["id"]),
        employee_id=r["employee_id"],
        name=r["name"],
        department=r["department"],
        email=r.get("email"),
        created_at=r.get("created_at"),
    )


class MySQLFacultyRepository(FacultyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, employee_id, name, department, email, created_at FROM faculty WHERE id=%s",
                (faculty_id,),
            )
            r = fetchone(cur)
            return _to_faculty(r) if r else None

    def get_by_employee_id(self, employee_id: str) -> Optional[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, employee_id, name, department, email, created_at FROM faculty WHERE employee_id=%s",
                (employee_id,),
            )
            r = fetchone(cur)
            return _to_faculty(r) if r else None

    def create(self, *, employee_id: str, name: str, department: str, email: Optional[str] = None) -> Faculty:
        faculty = Faculty(
            id=str(uuid.uuid4()),
            employee_id=employee_id,
            name=name,
            department=department,
            email=email,
            created_at=now_local().replace(microsecond=0),
        )
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO faculty(id, employee_id, name, department, email, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (faculty.id, employee_id, name, department, email, faculty.created_at),
                )
        except IntegrityError as e:
            if is_duplicate_key(e, key_name="uq_faculty_employee_id"):
                raise DuplicateKeyError(f"Employee id {employee_id} is already registered") from e
            raise
        return faculty
