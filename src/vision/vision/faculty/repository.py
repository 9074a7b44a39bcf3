from __future__ import annotations

from typing import Optional, Protocol

from .model import Faculty


class FacultyRepository(Protocol):
    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[Faculty]:
        raise NotImplementedError

    def create(self, *, employee_id: str, name: str, department: str, email: Optional[str] = None) -> Faculty:
        """Raises DuplicateKeyError when employee_id is taken."""

        raise NotImplementedError
