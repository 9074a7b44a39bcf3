from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_SUBJECT_CREDITS


@dataclass(frozen=True)
class Subject:
    """Domain entity: a course offering in the catalog."""

    id: str
    code: str
    name: str
    department: str
    credits: int = DEFAULT_SUBJECT_CREDITS

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "department": self.department,
            "credits": self.credits,
        }
