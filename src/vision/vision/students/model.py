from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled learner.

    Note: Plain data object; no DB access code lives here.
    """

    id: str
    roll_no: str
    name: str
    department: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rollNo": self.roll_no,
            "name": self.name,
            "department": self.department,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
        }
