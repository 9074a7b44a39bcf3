from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audit.service import AuditLogService
from ..common.validators import optional_str, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_SUBJECT_CREDITS, DEMO_STUDENTS
from ..core.exceptions import DuplicateKeyError, NotFoundError
from ..faculty.model import Faculty
from ..faculty.repository import FacultyRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use cases around the catalog: students, faculty and subjects."""

    def __init__(
        self,
        students: StudentRepository,
        faculty: FacultyRepository,
        subjects: SubjectRepository,
        audit: Optional[AuditLogService] = None,
    ):
        self._students = students
        self._faculty = faculty
        self._subjects = subjects
        self._audit = audit

    def enroll_student(
        self,
        *,
        roll_no: str,
        name: str,
        department: str,
        email: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Student:
        roll_no = require_non_empty(roll_no, "rollNo", max_len=20)
        name = require_non_empty(name, "name")
        department = require_non_empty(department, "department", max_len=10)
        email = optional_str(email, "email", max_len=255)

        # The store re-checks atomically; this just gives the common case a clean message.
        if self._students.get_by_roll_no(roll_no):
            raise DuplicateKeyError(f"Roll number {roll_no} is already enrolled")

        student = self._students.create(roll_no=roll_no, name=name, department=department, email=email)
        logger.info("Enrolled student %s (%s)", student.roll_no, student.id)
        if self._audit:
            self._audit.record(
                "student_enrolled", entity_type="student", entity_id=student.id, ip_address=ip_address
            )
        return student

    def onboard_faculty(
        self,
        *,
        employee_id: str,
        name: str,
        department: str,
        email: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Faculty:
        employee_id = require_non_empty(employee_id, "employeeId", max_len=20)
        name = require_non_empty(name, "name")
        department = require_non_empty(department, "department", max_len=10)
        email = optional_str(email, "email", max_len=255)

        if self._faculty.get_by_employee_id(employee_id):
            raise DuplicateKeyError(f"Employee id {employee_id} is already registered")

        faculty = self._faculty.create(employee_id=employee_id, name=name, department=department, email=email)
        logger.info("Onboarded faculty %s (%s)", faculty.employee_id, faculty.id)
        if self._audit:
            self._audit.record(
                "faculty_onboarded", entity_type="faculty", entity_id=faculty.id, ip_address=ip_address
            )
        return faculty

    def add_subject(
        self,
        *,
        code: str,
        name: str,
        department: str,
        credits: Optional[int] = None,
        ip_address: Optional[str] = None,
    ) -> Subject:
        code = require_non_empty(code, "code", max_len=20)
        name = require_non_empty(name, "name")
        department = require_non_empty(department, "department", max_len=10)
        credits = DEFAULT_SUBJECT_CREDITS if credits is None else require_positive_int(credits, "credits")

        if self._subjects.get_by_code(code):
            raise DuplicateKeyError(f"Subject code {code} already exists")

        subject = self._subjects.create(code=code, name=name, department=department, credits=credits)
        if self._audit:
            self._audit.record("subject_added", entity_type="subject", entity_id=subject.id, ip_address=ip_address)
        return subject

    def get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self, department: Optional[str] = None) -> Sequence[Student]:
        if department:
            return self._students.list_by_department(department)
        return self._students.list_all()

    def get_faculty(self, faculty_id: str) -> Faculty:
        faculty = self._faculty.get_by_id(faculty_id)
        if not faculty:
            raise NotFoundError("Faculty not found")
        return faculty

    def list_subjects(self, department: str) -> Sequence[Subject]:
        return self._subjects.list_by_department(require_non_empty(department, "department"))

    def seed_demo_students(self) -> int:
        """Enroll the CS001-CS006 demo roster; existing roll numbers are skipped."""
        created = 0
        for roll_no, name, department in DEMO_STUDENTS:
            try:
                self._students.create(roll_no=roll_no, name=name, department=department)
                created += 1
            except DuplicateKeyError:
                logger.info("Student %s already exists", roll_no)
        return created
