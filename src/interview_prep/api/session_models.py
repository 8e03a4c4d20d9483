"""Pydantic models for the sessions API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from interview_prep.domain.questions import AnswerFeedback, QuestionRecord
from interview_prep.domain.sessions import (
    SessionProgress,
    SessionRecord,
    SessionStats,
    SessionStatus,
)
from interview_prep.services.answers import MAX_ANSWER_LENGTH, AnswerResult


class CreateSessionRequest(BaseModel):
    """Body for starting a session."""

    job_id: UUID
    question_ids: list[UUID]


class NavigateRequest(BaseModel):
    """Body for moving the question cursor."""

    question_index: int


class StatusRequest(BaseModel):
    """Body for an explicit status change."""

    status: SessionStatus


class ProgressRequest(BaseModel):
    """Body for overwriting progress counters."""

    answered_questions: int = Field(ge=0)
    current_question_index: int | None = Field(default=None, ge=0)


class SubmitAnswerRequest(BaseModel):
    """Body for answering a session question."""

    question_id: UUID
    answer: str = Field(max_length=MAX_ANSWER_LENGTH)


class QuestionResponse(BaseModel):
    """Question as returned inside a session."""

    id: UUID
    title: str
    type: str
    description: str | None = None
    difficulty: str | None = None
    external_url: str | None = None

    @classmethod
    def from_record(cls, question: QuestionRecord) -> "QuestionResponse":
        return cls(
            id=question.id,
            title=question.title,
            type=question.type.value,
            description=question.description,
            difficulty=question.difficulty,
            external_url=question.external_url,
        )


class SessionResponse(BaseModel):
    """Session with its derived progress fields."""

    id: UUID
    user_id: UUID
    job_id: UUID
    question_ids: list[UUID]
    current_question_index: int
    total_questions: int
    answered_questions: int
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    progress_percentage: int
    current_question: UUID | None = None
    remaining_questions: int
    questions: list[QuestionResponse] | None = None

    @classmethod
    def from_record(
        cls,
        session: SessionRecord,
        questions: list[QuestionRecord] | None = None,
    ) -> "SessionResponse":
        return cls(
            id=session.id,
            user_id=session.user_id,
            job_id=session.job_id,
            question_ids=list(session.question_ids),
            current_question_index=session.current_question_index,
            total_questions=session.total_questions,
            answered_questions=session.answered_questions,
            status=session.status,
            started_at=session.started_at,
            completed_at=session.completed_at,
            progress_percentage=session.progress_percentage,
            current_question=session.current_question,
            remaining_questions=session.remaining_questions,
            questions=(
                [QuestionResponse.from_record(q) for q in questions]
                if questions is not None
                else None
            ),
        )


class ProgressResponse(BaseModel):
    """Progress snapshot for a session."""

    session_id: UUID
    current_question_index: int
    total_questions: int
    answered_questions: int
    progress_percentage: int
    status: SessionStatus
    remaining_questions: int
    estimated_minutes_remaining: int

    @classmethod
    def from_progress(cls, progress: SessionProgress) -> "ProgressResponse":
        return cls(
            session_id=progress.session_id,
            current_question_index=progress.current_question_index,
            total_questions=progress.total_questions,
            answered_questions=progress.answered_questions,
            progress_percentage=progress.progress_percentage,
            status=progress.status,
            remaining_questions=progress.remaining_questions,
            estimated_minutes_remaining=progress.estimated_minutes_remaining,
        )


class StatsResponse(BaseModel):
    """Aggregated session statistics."""

    total: int
    completed: int
    active: int
    average_progress: int

    @classmethod
    def from_stats(cls, stats: SessionStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            completed=stats.completed,
            active=stats.active,
            average_progress=stats.average_progress,
        )


class AnswerResponse(BaseModel):
    """Feedback and updated session after an answer."""

    session: SessionResponse
    feedback: AnswerFeedback
    is_last_question: bool
    session_completed: bool

    @classmethod
    def from_result(cls, result: AnswerResult) -> "AnswerResponse":
        return cls(
            session=SessionResponse.from_record(result.session),
            feedback=result.feedback,
            is_last_question=result.is_last_question,
            session_completed=result.session_completed,
        )
