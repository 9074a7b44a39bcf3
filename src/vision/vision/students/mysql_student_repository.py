from __future__ import annotations

import uuid
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, roll_no, name, department, email, created_at"


def _to_student(r: dict) -> Student:
    return Student(
        id=str(r["id"]),
        roll_no=r["roll_no"],
        name=r["name"],
        department=r["department"],
        email=r.get("email"),
        created_at=r.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (student_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE roll_no=%s", (roll_no,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_by_department(self, department: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE department=%s ORDER BY roll_no", (department,))
            return [_to_student(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY roll_no")
            return [_to_student(r) for r in fetchall(cur)]

    def create(self, *, roll_no: str, name: str, department: str, email: Optional[str] = None) -> Student:
        student = Student(
            id=str(uuid.uuid4()),
            roll_no=roll_no,
            name=name,
            department=department,
            email=email,
            created_at=now_local().replace(microsecond=0),
        )
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(id, roll_no, name, department, email, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (student.id, roll_no, name, department, email, student.created_at),
                )
        except IntegrityError as e:
            if is_duplicate_key(e, key_name="uq_students_roll_no"):
                raise DuplicateKeyError(f"Roll number {roll_no} is already enrolled") from e
            raise
        return student
