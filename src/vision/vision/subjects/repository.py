from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_by_department(self, department: str) -> Sequence[Subject]:
        raise NotImplementedError

    def create(self, *, code: str, name: str, department: str, credits: int) -> Subject:
        """Raises DuplicateKeyError when code is taken."""

        raise NotImplementedError
