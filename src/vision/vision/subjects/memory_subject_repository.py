from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..core.exceptions import DuplicateKeyError
from ..database.memory import InMemoryDatabase
from .model import Subject
from .repository import SubjectRepository


class InMemorySubjectRepository(SubjectRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        return self._db.subjects.get(subject_id)

    def get_by_code(self, code: str) -> Optional[Subject]:
        with self._db.lock:
            return next((s for s in self._db.subjects.values() if s.code == code), None)

    def list_by_department(self, department: str) -> Sequence[Subject]:
        with self._db.lock:
            items = [s for s in self._db.subjects.values() if s.department == department]
        return sorted(items, key=lambda s: s.code)

    def create(self, *, code: str, name: str, department: str, credits: int) -> Subject:
        with self._db.lock:
            if self.get_by_code(code):
                raise DuplicateKeyError(f"Subject code {code} already exists")
            subject = Subject(id=str(uuid.uuid4()), code=code, name=name, department=department, credits=int(credits))
            self._db.subjects[subject.id] = subject
            return subject
