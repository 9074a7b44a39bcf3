from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SystemLog


class SystemLogRepository(Protocol):
    """Append-only: there is deliberately no update or delete."""

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
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[SystemLog]:
        """Newest first."""

        raise NotImplementedError
