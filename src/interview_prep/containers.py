"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from interview_prep.adapters.openai_feedback_client import OpenAIFeedbackClient
from interview_prep.adapters.supabase_question_repository import (
    SupabaseQuestionRepository,
)
from interview_prep.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from interview_prep.config import Settings
from interview_prep.services.answers import AnswerService
from interview_prep.services.feedback import FeedbackService
from interview_prep.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    answer_service: AnswerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = SessionService(
        repository=SupabaseSessionRepository(supabase_client),
        question_repository=SupabaseQuestionRepository(supabase_client),
    )
    feedback_client = OpenAIFeedbackClient.create(resolved_settings.openai_api_key)
    feedback_service = FeedbackService(
        client=feedback_client,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
    )
    answer_service = AnswerService(
        session_service=session_service,
        feedback_service=feedback_service,
    )

    async def close_resources() -> None:
        await feedback_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        answer_service=answer_service,
        close_resources=close_resources,
    )
