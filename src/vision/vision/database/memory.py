from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass
class InMemoryDatabase:
    """Process-local tables for the in-memory repositories.

    Every repository built on the same instance sees the same rows. Mutations go
    through ``lock`` so uniqueness checks and inserts are atomic.
    """

    students: Dict[str, Any] = field(default_factory=dict)
    faculty: Dict[str, Any] = field(default_factory=dict)
    subjects: Dict[str, Any] = field(default_factory=dict)
    sessions: Dict[str, Any] = field(default_factory=dict)
    attendance: Dict[str, Any] = field(default_factory=dict)
    attendance_by_pair: Dict[Tuple[str, str], str] = field(default_factory=dict)
    system_logs: list = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock)

