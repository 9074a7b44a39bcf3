from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class SystemLog:
    """Append-only audit trail entry."""

    id: str
    action: str
    created_at: datetime
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    user_id: Optional[str] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action,
            "entityType": self.entity_type,
            "entityId": self.entity_id,
            "userId": self.user_id,
            "details": self.details,
            "ipAddress": self.ip_address,
            "createdAt": isoformat(self.created_at),
        }
