"""Session state machine for mock interviews."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from interview_prep.domain.errors import (
    ACTIVE_SESSION_EXISTS,
    INVALID_QUESTION_INDEX,
    QUESTIONS_REQUIRED,
    ConflictError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    SessionError,
)
from interview_prep.domain.questions import QuestionRecord
from interview_prep.domain.sessions import (
    SessionProgress,
    SessionRecord,
    SessionStats,
    SessionStatus,
    round_half_up,
)
from interview_prep.services.questions import QuestionRepository, order_questions

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20
MAX_UPDATE_ATTEMPTS = 3


class SessionRepository(Protocol):
    """Persistence interface for mock interview sessions."""

    def create_session(
        self,
        user_id: UUID,
        job_id: UUID,
        question_ids: list[UUID],
        started_at: datetime,
    ) -> SessionRecord:
        """Insert an active session and return it."""

    def get_session(self, session_id: UUID, user_id: UUID) -> SessionRecord | None:
        """Return a session owned by the user, if present."""

    def get_active_session(self, job_id: UUID, user_id: UUID) -> SessionRecord | None:
        """Return the active session for a job, if present."""

    def list_sessions(self, user_id: UUID, limit: int | None) -> list[SessionRecord]:
        """Return the user's sessions, newest first."""

    def update_session(
        self,
        session_id: UUID,
        user_id: UUID,
        values: dict[str, object],
        expected: dict[str, object] | None = None,
    ) -> SessionRecord | None:
        """Set fields in one update, only where the expected values still hold."""

    def delete_session(self, session_id: UUID, user_id: UUID) -> bool:
        """Delete a session and report whether a row was removed."""


@dataclass(frozen=True)
class SessionDetail:
    """A session together with its resolved questions."""

    session: SessionRecord
    questions: list[QuestionRecord]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@contextmanager
def _failing_as(action: str) -> Iterator[None]:
    """Let session errors through and hide anything else behind InternalError."""
    try:
        yield
    except SessionError:
        raise
    except Exception as exc:
        logger.exception("Error trying to %s", action)
        raise InternalError(f"Failed to {action}") from exc


@dataclass
class SessionService:
    """Creates, advances and closes mock interview sessions."""

    repository: SessionRepository
    question_repository: QuestionRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def create(
        self, user_id: UUID, job_id: UUID, question_ids: list[UUID]
    ) -> SessionRecord:
        """Start a new active session for a job."""
        if not question_ids:
            raise InvalidArgumentError(QUESTIONS_REQUIRED)

        with _failing_as("create session"):
            existing = self.find_active_by_job_id(job_id, user_id)
            if existing is not None:
                raise ConflictError(ACTIVE_SESSION_EXISTS, session=existing)
            session = self.repository.create_session(
                user_id=user_id,
                job_id=job_id,
                question_ids=list(question_ids),
                started_at=self.clock(),
            )
        logger.info(
            "Created session %s for job %s with %d questions",
            session.id,
            job_id,
            session.total_questions,
        )
        return session

    def find_by_id(self, session_id: UUID, user_id: UUID) -> SessionRecord | None:
        """Return a session only when the user owns it."""
        with _failing_as("find session"):
            return self.repository.get_session(session_id, user_id)

    def get_session_detail(
        self, session_id: UUID, user_id: UUID
    ) -> SessionDetail | None:
        """Return a session with its question ids resolved to questions."""
        session = self.find_by_id(session_id, user_id)
        if session is None:
            return None
        with _failing_as("find session questions"):
            questions = self.question_repository.get_questions(
                list(session.question_ids), user_id
            )
        return SessionDetail(
            session=session,
            questions=order_questions(session.question_ids, questions),
        )

    def find_active_by_job_id(
        self, job_id: UUID, user_id: UUID
    ) -> SessionRecord | None:
        """Return the active session for a job, if any."""
        with _failing_as("find active session"):
            return self.repository.get_active_session(job_id, user_id)

    def find_by_user_id(
        self, user_id: UUID, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[SessionRecord]:
        """Return the user's most recent sessions."""
        with _failing_as("find sessions"):
            return self.repository.list_sessions(user_id, limit)

    def update_progress(
        self,
        session_id: UUID,
        user_id: UUID,
        answered_questions: int,
        current_question_index: int | None = None,
    ) -> SessionRecord | None:
        """Overwrite the progress counters as given."""
        values: dict[str, object] = {"answered_questions": answered_questions}
        if current_question_index is not None:
            values["current_question_index"] = current_question_index
        with _failing_as("update session progress"):
            return self.repository.update_session(session_id, user_id, values)

    def move_to_next_question(self, session_id: UUID, user_id: UUID) -> SessionRecord:
        """Advance past the current question, completing the session at the end.

        Every call counts one more answered question. Both counters stay
        within ``total_questions``. The write only lands if the counters
        still hold the values that were read, so concurrent callers retry
        instead of losing an increment.
        """
        with _failing_as("move to next question"):
            for _ in range(MAX_UPDATE_ATTEMPTS):
                session = self.repository.get_session(session_id, user_id)
                if session is None:
                    raise NotFoundError()

                next_index = min(
                    session.current_question_index + 1, session.total_questions
                )
                values: dict[str, object] = {
                    "current_question_index": next_index,
                    "answered_questions": min(
                        session.answered_questions + 1, session.total_questions
                    ),
                }
                completing = (
                    next_index >= session.total_questions
                    and session.status != SessionStatus.COMPLETED
                )
                if completing:
                    values["status"] = SessionStatus.COMPLETED
                    values["completed_at"] = self.clock()

                updated = self.repository.update_session(
                    session_id,
                    user_id,
                    values,
                    expected={
                        "current_question_index": session.current_question_index,
                        "answered_questions": session.answered_questions,
                    },
                )
                if updated is not None:
                    if completing:
                        logger.info("Session %s completed", session_id)
                    return updated
                logger.info("Session %s changed while advancing, retrying", session_id)
            raise ConflictError("Session was updated concurrently. Please try again.")

    def navigate_to_question(
        self, session_id: UUID, user_id: UUID, question_index: int
    ) -> SessionRecord:
        """Move the cursor to any question without touching progress."""
        with _failing_as("navigate to question"):
            session = self.repository.get_session(session_id, user_id)
            if session is None:
                raise NotFoundError()
            if question_index < 0 or question_index >= session.total_questions:
                raise InvalidArgumentError(INVALID_QUESTION_INDEX)

            updated = self.repository.update_session(
                session_id, user_id, {"current_question_index": question_index}
            )
            if updated is None:
                raise NotFoundError()
            return updated

    def update_status(
        self, session_id: UUID, user_id: UUID, status: SessionStatus
    ) -> SessionRecord | None:
        """Set the session status directly.

        Any status may follow any other, except that a session cannot become
        active while another session for the same job is. ``completed_at`` is
        stamped when entering ``completed`` and cleared when leaving it.
        """
        values: dict[str, object] = {"status": status}
        values["completed_at"] = (
            self.clock() if status == SessionStatus.COMPLETED else None
        )
        with _failing_as("update session status"):
            if status == SessionStatus.ACTIVE:
                session = self.repository.get_session(session_id, user_id)
                if session is None:
                    return None
                existing = self.repository.get_active_session(
                    session.job_id, user_id
                )
                if existing is not None and existing.id != session_id:
                    raise ConflictError(ACTIVE_SESSION_EXISTS, session=existing)
            updated = self.repository.update_session(session_id, user_id, values)
        if updated is not None:
            logger.info("Session %s is now %s", session_id, status)
        return updated

    def get_progress(self, session_id: UUID, user_id: UUID) -> SessionProgress:
        """Return a progress snapshot for a session."""
        session = self.find_by_id(session_id, user_id)
        if session is None:
            raise NotFoundError()
        return SessionProgress.from_session(session)

    def get_session_stats(self, user_id: UUID) -> SessionStats:
        """Aggregate counts and mean progress over all of a user's sessions."""
        with _failing_as("get session statistics"):
            sessions = self.repository.list_sessions(user_id, None)

        total = len(sessions)
        completed = sum(1 for s in sessions if s.status == SessionStatus.COMPLETED)
        active = sum(1 for s in sessions if s.status == SessionStatus.ACTIVE)
        total_progress = sum(
            100 * s.answered_questions / s.total_questions
            for s in sessions
            if s.total_questions > 0
        )
        return SessionStats(
            total=total,
            completed=completed,
            active=active,
            average_progress=round_half_up(total_progress / total) if total else 0,
        )

    def delete(self, session_id: UUID, user_id: UUID) -> bool:
        """Permanently remove a session."""
        with _failing_as("delete session"):
            deleted = self.repository.delete_session(session_id, user_id)
        if deleted:
            logger.info("Deleted session %s", session_id)
        return deleted
