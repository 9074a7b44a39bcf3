from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Faculty:
    """Domain entity: an instructor who owns class sessions."""

    id: str
    employee_id: str
    name: str
    department: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "name": self.name,
            "department": self.department,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
        }
