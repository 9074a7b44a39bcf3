from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str, field_name: str = "date") -> datetime:
    """Parse ``YYYY-MM-DD`` or a full ISO-8601 timestamp into a naive datetime.

    A trailing ``Z`` is accepted; aware values are converted to naive local time
    so they compare with what the store holds.
    """
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")

    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid ISO date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def isoformat(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()
