"""Domain models for mock interview sessions."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

MINUTES_PER_QUESTION = 3


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


class SessionStatus(StrEnum):
    """Lifecycle states of a mock interview session."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted mock interview session."""

    id: UUID
    user_id: UUID
    job_id: UUID
    question_ids: tuple[UUID, ...]
    current_question_index: int
    total_questions: int
    answered_questions: int
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def progress_percentage(self) -> int:
        """Answered share of the session, rounded to a whole percent."""
        if self.total_questions <= 0:
            return 0
        return round_half_up(100 * self.answered_questions / self.total_questions)

    @property
    def current_question(self) -> UUID | None:
        if 0 <= self.current_question_index < len(self.question_ids):
            return self.question_ids[self.current_question_index]
        return None

    @property
    def remaining_questions(self) -> int:
        return self.total_questions - self.answered_questions

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= self.total_questions - 1


@dataclass(frozen=True)
class SessionProgress:
    """Progress snapshot returned to clients."""

    session_id: UUID
    current_question_index: int
    total_questions: int
    answered_questions: int
    progress_percentage: int
    status: SessionStatus
    remaining_questions: int
    estimated_minutes_remaining: int

    @classmethod
    def from_session(cls, session: SessionRecord) -> "SessionProgress":
        remaining = session.remaining_questions
        return cls(
            session_id=session.id,
            current_question_index=session.current_question_index,
            total_questions=session.total_questions,
            answered_questions=session.answered_questions,
            progress_percentage=session.progress_percentage,
            status=session.status,
            remaining_questions=remaining,
            estimated_minutes_remaining=max(0, remaining * MINUTES_PER_QUESTION),
        )


@dataclass(frozen=True)
class SessionStats:
    """Aggregated session counters for a user."""

    total: int
    completed: int
    active: int
    average_progress: int
