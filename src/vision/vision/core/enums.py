from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle state of one class meeting."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AttendanceStatus(str, Enum):
    """Outcome stored for a student in a session."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class MarkedBy(str, Enum):
    SYSTEM = "system"
    FACULTY = "faculty"
    MANUAL = "manual"


class MarkingMethod(str, Enum):
    FACIAL_RECOGNITION = "facial_recognition"
    QR_CODE = "qr_code"
    MANUAL = "manual"
