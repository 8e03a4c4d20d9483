"""Typed failures raised by the session layer."""

from interview_prep.domain.sessions import SessionRecord

SESSION_NOT_FOUND = "Session not found"
INVALID_QUESTION_INDEX = "Invalid question index"
QUESTIONS_REQUIRED = "At least one question is required to start a session"
ACTIVE_SESSION_EXISTS = (
    "An active session already exists for this job. "
    "Please complete or cancel it first."
)


class SessionError(Exception):
    """Base error with a message safe to show to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(SessionError):
    """The caller supplied structurally invalid input."""


class ConflictError(SessionError):
    """The operation would break the single active session rule."""

    def __init__(self, message: str, session: SessionRecord | None = None) -> None:
        super().__init__(message)
        self.session = session


class NotFoundError(SessionError):
    """No session matches the id and owner."""

    def __init__(self, message: str = SESSION_NOT_FOUND) -> None:
        super().__init__(message)


class UnavailableError(SessionError):
    """The store cannot serve requests right now; retry later."""

    def __init__(self, message: str = "Session store is not available") -> None:
        super().__init__(message)


class InternalError(SessionError):
    """Unexpected failure, reported without implementation detail."""
