from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateKeyError
from ..database.memory import InMemoryDatabase
from .model import Student
from .repository import StudentRepository


class InMemoryStudentRepository(StudentRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._db.students.get(student_id)

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        with self._db.lock:
            return next((s for s in self._db.students.values() if s.roll_no == roll_no), None)

    def list_by_department(self, department: str) -> Sequence[Student]:
        with self._db.lock:
            items = [s for s in self._db.students.values() if s.department == department]
        return sorted(items, key=lambda s: s.roll_no)

    def list_all(self) -> Sequence[Student]:
        with self._db.lock:
            items = list(self._db.students.values())
        return sorted(items, key=lambda s: s.roll_no)

    def create(self, *, roll_no: str, name: str, department: str, email: Optional[str] = None) -> Student:
        with self._db.lock:
            if any(s.roll_no == roll_no for s in self._db.students.values()):
                raise DuplicateKeyError(f"Roll number {roll_no} is already enrolled")
            student = Student(
                id=str(uuid.uuid4()),
                roll_no=roll_no,
                name=name,
                department=department,
                email=email,
                created_at=now_local(),
            )
            self._db.students[student.id] = student
            return student
