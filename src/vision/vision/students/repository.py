from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        raise NotImplementedError

    def list_by_department(self, department: str) -> Sequence[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, roll_no: str, name: str, department: str, email: Optional[str] = None) -> Student:
        """Insert with a generated id.

        Raises DuplicateKeyError when roll_no is already enrolled.
        """

        raise NotImplementedError
