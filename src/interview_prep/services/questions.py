"""Question port used to expand session question ids and track practice."""

from typing import Protocol
from uuid import UUID

from interview_prep.domain.questions import QuestionRecord


class QuestionRepository(Protocol):
    """Persistence interface for interview questions."""

    def get_question(self, question_id: UUID, user_id: UUID) -> QuestionRecord | None:
        """Return a question owned by the user, if present."""

    def get_questions(
        self, question_ids: list[UUID], user_id: UUID
    ) -> list[QuestionRecord]:
        """Return questions owned by the user for the given ids."""

    def mark_completed(self, question_id: UUID, user_id: UUID) -> None:
        """Record that the user has practiced a question."""


def order_questions(
    question_ids: list[UUID] | tuple[UUID, ...], questions: list[QuestionRecord]
) -> list[QuestionRecord]:
    """Return questions in session order, dropping ids that did not resolve."""
    by_id = {question.id: question for question in questions}
    return [by_id[question_id] for question_id in question_ids if question_id in by_id]
