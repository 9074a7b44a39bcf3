from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SystemLog
from .repository import SystemLogRepository


class MySQLSystemLogRepository(SystemLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_logs(id, action, entity_type, entity_id, user_id, details, ip_address, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.id,
                    action,
                    entity_type,
                    entity_id,
                    user_id,
                    details,
                    ip_address,
                    entry.created_at,
                ),
            )
        return entry

    def list_recent(self, limit: int) -> Sequence[SystemLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, action, entity_type, entity_id, user_id, details, ip_address, created_at
                FROM system_logs
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                SystemLog(
                    id=str(r["id"]),
                    action=r["action"],
                    created_at=r["created_at"],
                    entity_type=r.get("entity_type"),
                    entity_id=r.get("entity_id"),
                    user_id=r.get("user_id"),
                    details=r.get("details"),
                    ip_address=r.get("ip_address"),
                )
                for r in fetchall(cur)
            ]
