"""Domain models for interview questions and answer feedback."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field


class QuestionStatus(StrEnum):
    """Practice state of a question."""

    PENDING = "pending"
    COMPLETED = "completed"


class QuestionType(StrEnum):
    """Kinds of questions a session can hold."""

    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"


@dataclass(frozen=True)
class QuestionRecord:
    """Represents a stored interview question."""

    id: UUID
    user_id: UUID
    job_id: UUID | None
    title: str
    type: QuestionType
    description: str | None = None
    difficulty: str | None = None
    external_url: str | None = None
    status: QuestionStatus = QuestionStatus.PENDING


class AnswerFeedback(BaseModel):
    """Structured feedback for a submitted answer."""

    feedback: str
    score: int = Field(ge=0, le=10)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
