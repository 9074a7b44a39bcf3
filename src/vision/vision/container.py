from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .audit.memory_system_log_repository import InMemorySystemLogRepository
from .audit.mysql_system_log_repository import MySQLSystemLogRepository
from .audit.repository import SystemLogRepository
from .audit.service import AuditLogService
from .database.connection import DBConfig, DatabaseConnection
from .database.memory import InMemoryDatabase
from .faculty.memory_faculty_repository import InMemoryFacultyRepository
from .faculty.mysql_faculty_repository import MySQLFacultyRepository
from .faculty.repository import FacultyRepository
from .reports.service import ReportService
from .roster.service import RosterService
from .sessions.memory_session_repository import InMemorySessionRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .subjects.memory_subject_repository import InMemorySubjectRepository
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository

STORAGE_MEMORY = "memory"
STORAGE_MYSQL = "mysql"


@dataclass(frozen=True)
class Container:
    storage_backend: str

    students_repo: StudentRepository
    faculty_repo: FacultyRepository
    subjects_repo: SubjectRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository
    system_logs_repo: SystemLogRepository

    audit_service: AuditLogService
    roster_service: RosterService
    session_service: SessionService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(*, db_config: Optional[dict] = None, storage_backend: str = STORAGE_MYSQL) -> Container:
    backend = (storage_backend or STORAGE_MYSQL).lower()

    if backend == STORAGE_MEMORY:
        db = InMemoryDatabase()
        students_repo = InMemoryStudentRepository(db)
        faculty_repo = InMemoryFacultyRepository(db)
        subjects_repo = InMemorySubjectRepository(db)
        sessions_repo = InMemorySessionRepository(db)
        attendance_repo = InMemoryAttendanceRepository(db)
        system_logs_repo = InMemorySystemLogRepository(db)
    elif backend == STORAGE_MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql storage backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        students_repo = MySQLStudentRepository(conn)
        faculty_repo = MySQLFacultyRepository(conn)
        subjects_repo = MySQLSubjectRepository(conn)
        sessions_repo = MySQLSessionRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
        system_logs_repo = MySQLSystemLogRepository(conn)
    else:
        raise ValueError(f"Unknown storage backend: {storage_backend!r}")

    audit_service = AuditLogService(system_logs_repo)
    roster_service = RosterService(students_repo, faculty_repo, subjects_repo, audit_service)
    session_service = SessionService(sessions_repo, subjects_repo, faculty_repo, audit_service)
    attendance_service = AttendanceService(attendance_repo, students_repo, sessions_repo, audit_service)
    report_service = ReportService(attendance_repo, students_repo, sessions_repo)

    return Container(
        storage_backend=backend,
        students_repo=students_repo,
        faculty_repo=faculty_repo,
        subjects_repo=subjects_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        system_logs_repo=system_logs_repo,
        audit_service=audit_service,
        roster_service=roster_service,
        session_service=session_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )
