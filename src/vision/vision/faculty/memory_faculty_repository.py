from __future__ import annotations

import uuid
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateKeyError
from ..database.memory import InMemoryDatabase
from .model import Faculty
from .repository import FacultyRepository


class InMemoryFacultyRepository(FacultyRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        return self._db.faculty.get(faculty_id)

    def get_by_employee_id(self, employee_id: str) -> Optional[Faculty]:
        with self._db.lock:
            return next((f for f in self._db.faculty.values() if f.employee_id == employee_id), None)

    def create(self, *, employee_id: str, name: str, department: str, email: Optional[str] = None) -> Faculty:
        with self._db.lock:
            if self.get_by_employee_id(employee_id):
                raise DuplicateKeyError(f"Employee id {employee_id} is already registered")
            faculty = Faculty(
                id=str(uuid.uuid4()),
                employee_id=employee_id,
                name=name,
                department=department,
                email=email,
                created_at=now_local(),
            )
            self._db.faculty[faculty.id] = faculty
            return faculty
