"""Answer feedback generation using LLMs."""

from dataclasses import dataclass
from typing import Protocol

from interview_prep.domain.questions import AnswerFeedback

FEEDBACK_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "feedback": {"type": "string"},
        "score": {"type": "integer", "minimum": 0, "maximum": 10},
        "strengths": {"type": "array", "items": {"type": "string"}},
        "improvements": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["feedback", "score", "strengths", "improvements"],
    "additionalProperties": False,
}

FALLBACK_FEEDBACK = AnswerFeedback(
    feedback=(
        "Thank you for your answer. Due to a technical issue, detailed feedback "
        "is not available right now. Please try again later."
    ),
    score=7,
    strengths=["Provided a complete response"],
    improvements=["Continue practicing to improve your interview skills"],
)

TECHNICAL_FEEDBACK = AnswerFeedback(
    feedback=(
        "Technical question noted. Please solve this problem on the external "
        "platform and mark it as complete when done."
    ),
    score=0,
)


class FeedbackClient(Protocol):
    """Interface for LLM structured completions."""

    async def complete(
        self,
        *,
        model: str,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured output matching the schema."""


@dataclass
class FeedbackService:
    """Builds feedback prompts and validates the model output."""

    client: FeedbackClient
    model: str
    store: bool

    async def review_answer(
        self, question: str, answer: str, context: str = "Mock interview session"
    ) -> AnswerFeedback:
        """Return feedback for a behavioral answer."""
        prompt = (
            "You are an experienced interviewer reviewing a candidate's answer "
            f"during a {context.lower()}.\n"
            f"Question: {question}\n"
            f"Answer: {answer}\n"
            "Give concise feedback, a score from 0 to 10, "
            "a few strengths and a few improvements."
        )
        raw = await self.client.complete(
            model=self.model,
            store=self.store,
            schema=FEEDBACK_SCHEMA,
            prompt=prompt,
        )
        return AnswerFeedback.model_validate(raw)
