"""Answer submission for the question a session is on."""

import logging
from dataclasses import dataclass
from uuid import UUID

from interview_prep.domain.errors import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from interview_prep.domain.questions import AnswerFeedback, QuestionType
from interview_prep.domain.sessions import SessionRecord, SessionStatus
from interview_prep.services.feedback import (
    FALLBACK_FEEDBACK,
    TECHNICAL_FEEDBACK,
    FeedbackService,
)
from interview_prep.services.sessions import SessionService

logger = logging.getLogger(__name__)

MAX_ANSWER_LENGTH = 5000


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of submitting an answer."""

    session: SessionRecord
    feedback: AnswerFeedback
    is_last_question: bool
    session_completed: bool


@dataclass
class AnswerService:
    """Records answers against a session and collects feedback."""

    session_service: SessionService
    feedback_service: FeedbackService

    async def submit_answer(
        self, session_id: UUID, user_id: UUID, question_id: UUID, answer: str
    ) -> AnswerResult:
        """Review an answer and count it toward the session's progress."""
        if not answer.strip():
            raise InvalidArgumentError(
                "Answer is required and must be a non-empty string"
            )
        if len(answer) > MAX_ANSWER_LENGTH:
            raise InvalidArgumentError(
                f"Answer too long (max {MAX_ANSWER_LENGTH} characters)"
            )

        session = self.session_service.find_by_id(session_id, user_id)
        if session is None:
            raise NotFoundError()
        if session.status != SessionStatus.ACTIVE:
            raise InvalidArgumentError("Session is not active")

        question = self.session_service.question_repository.get_question(
            question_id, user_id
        )
        if question is None:
            raise NotFoundError("Question not found")
        if question_id not in session.question_ids:
            logger.error(
                "Question %s is not part of session %s", question_id, session_id
            )
            raise InvalidArgumentError("Question does not belong to this session")

        if question.type == QuestionType.BEHAVIORAL:
            try:
                feedback = await self.feedback_service.review_answer(
                    question.title, answer
                )
            except Exception:
                logger.exception("Failed to generate feedback for %s", question_id)
                feedback = FALLBACK_FEEDBACK.model_copy(deep=True)
            else:
                self.session_service.question_repository.mark_completed(
                    question_id, user_id
                )
        else:
            feedback = TECHNICAL_FEEDBACK.model_copy(deep=True)

        updated = self.session_service.update_progress(
            session_id,
            user_id,
            min(session.answered_questions + 1, session.total_questions),
        )
        if updated is None:
            raise InternalError("Failed to update session progress")

        is_last = session.is_last_question
        return AnswerResult(
            session=updated,
            feedback=feedback,
            is_last_question=is_last,
            session_completed=updated.status == SessionStatus.COMPLETED or is_last,
        )
