class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class BackendError(Exception):
    """Raised when the database rejects or cannot complete an operation."""


class BusAssignmentError(DomainError):
    """Student was created but the follow-up bus assignment write failed."""

    def __init__(self, message: str, *, student_id: int):
        super().__init__(message)
        self.student_id = student_id


class ScheduleConflictError(ValidationError):
    """A proposed schedule entry double-books a teacher, room or class."""

    def __init__(self, message: str, *, conflicts):
        super().__init__(message)
        self.conflicts = list(conflicts)
