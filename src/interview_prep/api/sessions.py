"""Mock interview session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from interview_prep.api.session_models import (
    AnswerResponse,
    CreateSessionRequest,
    NavigateRequest,
    ProgressRequest,
    ProgressResponse,
    SessionResponse,
    StatsResponse,
    StatusRequest,
    SubmitAnswerRequest,
)
from interview_prep.domain.errors import NotFoundError

if TYPE_CHECKING:
    from interview_prep.containers import AppContainer

MAX_LIST_LIMIT = 100


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


async def current_user_id(x_user_id: UUID | None = Header(default=None)) -> UUID:
    """Return the calling user's id."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id


router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    dependencies=[Depends(require_api_token)],
)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> SessionResponse:
    """Start a mock interview session for a job."""
    session = _container(request).session_service.create(
        user_id, body.job_id, body.question_ids
    )
    return SessionResponse.from_record(session)


@router.get("")
async def list_sessions(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=MAX_LIST_LIMIT),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, list[SessionResponse]]:
    """Return the caller's recent sessions."""
    container = _container(request)
    sessions = container.session_service.find_by_user_id(
        user_id, limit or container.settings.sessions_default_limit
    )
    return {"sessions": [SessionResponse.from_record(s) for s in sessions]}


@router.get("/stats")
async def session_stats(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> StatsResponse:
    """Return the caller's session statistics."""
    stats = _container(request).session_service.get_session_stats(user_id)
    return StatsResponse.from_stats(stats)


@router.get("/active")
async def active_session(
    job_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> SessionResponse:
    """Return the active session for a job so it can be resumed."""
    session = _container(request).session_service.find_active_by_job_id(
        job_id, user_id
    )
    if session is None:
        raise NotFoundError()
    return SessionResponse.from_record(session)


@router.get("/{session_id}")
async def get_session(
    session_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> SessionResponse:
    """Return a session with its questions."""
    detail = _container(request).session_service.get_session_detail(
        session_id, user_id
    )
    if detail is None:
        raise NotFoundError()
    return SessionResponse.from_record(detail.session, detail.questions)


@router.get("/{session_id}/progress")
async def get_progress(
    session_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ProgressResponse:
    """Return a progress snapshot."""
    progress = _container(request).session_service.get_progress(session_id, user_id)
    return ProgressResponse.from_progress(progress)


@router.post("/{session_id}/next")
async def next_question(
    session_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> SessionResponse:
    """Advance to the next question."""
    session = _container(request).session_service.move_to_next_question(
        session_id, user_id
    )
    return SessionResponse.from_record(session)


@router.put("/{session_id}/navigate")
async def navigate(
    session_id: UUID,
    body: NavigateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> SessionResponse:
    """Jump to a question by index."""
    session = _container(request).session_service.navigate_to_question(
        session_id, user_id, body.question_index
    )
    return SessionResponse.from_record(session)


@router.put("/{session_id}/status")
async def update_status(
    session_id: UUID,
    body: StatusRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> SessionResponse:
    """Pause, resume, cancel or complete a session."""
    session = _container(request).session_service.update_status(
        session_id, user_id, body.status
    )
    if session is None:
        raise NotFoundError()
    return SessionResponse.from_record(session)


@router.put("/{session_id}/progress")
async def update_progress(
    session_id: UUID,
    body: ProgressRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> SessionResponse:
    """Overwrite progress counters."""
    session = _container(request).session_service.update_progress(
        session_id,
        user_id,
        body.answered_questions,
        body.current_question_index,
    )
    if session is None:
        raise NotFoundError()
    return SessionResponse.from_record(session)


@router.post("/{session_id}/answers")
async def submit_answer(
    session_id: UUID,
    body: SubmitAnswerRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> AnswerResponse:
    """Submit an answer for a question in the session."""
    result = await _container(request).answer_service.submit_answer(
        session_id, user_id, body.question_id, body.answer
    )
    return AnswerResponse.from_result(result)


@router.delete("/{session_id}")
async def delete_session(
    session_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    """Delete a session permanently."""
    if not _container(request).session_service.delete(session_id, user_id):
        raise NotFoundError()
    return {"status": "deleted"}
