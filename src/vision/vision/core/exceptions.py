class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class DuplicateKeyError(DomainError):
    """Raised when a natural key (roll number, employee id, code) is already taken."""


class DuplicateAttendanceError(DuplicateKeyError):
    """Raised by the store when a (session, student) pair already has a record."""

    def __init__(self, session_id: str, student_id: str):
        super().__init__(f"Attendance already recorded for student {student_id} in session {session_id}")
        self.session_id = session_id
        self.student_id = student_id


class InvalidTransitionError(DomainError):
    """Raised when a session cannot move to the requested state."""


class FacultyBusyError(InvalidTransitionError):
    """Raised by the store when a faculty member already runs another active session."""

    def __init__(self, faculty_id: str, active_session_id: str):
        super().__init__(f"Faculty already has an active session ({active_session_id})")
        self.faculty_id = faculty_id
        self.active_session_id = active_session_id
