from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LOG_LIMIT
from .model import SystemLog
from .repository import SystemLogRepository

logger = logging.getLogger(__name__)


class AuditLogService:
    """Use case: keep the audit trail of state-changing operations."""

    def __init__(self, logs: SystemLogRepository):
        self._logs = logs

    def record(
        self,
        action: str,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Optional[SystemLog]:
        """Append an entry. A failing audit write is logged, never raised."""
        try:
            return self._logs.create(
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                user_id=user_id,
                details=details,
                ip_address=ip_address,
            )
        except Exception:
            logger.exception("Could not write audit entry %r for %s %s", action, entity_type, entity_id)
            return None

    def recent(self, limit: int = DEFAULT_LOG_LIMIT) -> Sequence[SystemLog]:
        return self._logs.list_recent(max(int(limit), 0))
