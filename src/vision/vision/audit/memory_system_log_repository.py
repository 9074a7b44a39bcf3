from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory import InMemoryDatabase
from .model import SystemLog
from .repository import SystemLogRepository


class InMemorySystemLogRepository(SystemLogRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def create(
        self,
        *,
        action: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> SystemLog:
        entry = SystemLog(
            id=str(uuid.uuid4()),
            action=action,
            created_at=now_local(),
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            details=details,
            ip_address=ip_address,
        )
        with self._db.lock:
            self._db.system_logs.append(entry)
        return entry

    def list_recent(self, limit: int) -> Sequence[SystemLog]:
        limit = max(int(limit), 0)
        if limit == 0:
            return []
        with self._db.lock:
            return list(reversed(self._db.system_logs[-limit:]))
