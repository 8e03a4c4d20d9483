"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from supabase import Client

from interview_prep.adapters.supabase_queries import execute, execute_session_write
from interview_prep.domain.sessions import SessionRecord, SessionStatus
from interview_prep.services.sessions import SessionRepository

_TABLE = "interview_sessions"
_COLUMNS = (
    "id, user_id, job_id, question_ids, current_question_index, total_questions, "
    "answered_questions, status, started_at, completed_at, created_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for mock interview sessions."""

    client: Client

    def create_session(
        self,
        user_id: UUID,
        job_id: UUID,
        question_ids: list[UUID],
        started_at: datetime,
    ) -> SessionRecord:
        """Insert a session row and return it."""
        query = self.client.table(_TABLE).insert(
            {
                "user_id": str(user_id),
                "job_id": str(job_id),
                "question_ids": [str(question_id) for question_id in question_ids],
                "current_question_index": 0,
                "total_questions": len(question_ids),
                "answered_questions": 0,
                "status": SessionStatus.ACTIVE.value,
                "started_at": started_at.isoformat(),
            }
        )
        response = execute_session_write(query)
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_row(response.data[0])

    def get_session(self, session_id: UUID, user_id: UUID) -> SessionRecord | None:
        """Return a session by id and owner, if present."""
        response = execute(
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_active_session(self, job_id: UUID, user_id: UUID) -> SessionRecord | None:
        """Return the active session for a job, if present."""
        response = execute(
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("job_id", str(job_id))
            .eq("user_id", str(user_id))
            .eq("status", SessionStatus.ACTIVE.value)
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_sessions(self, user_id: UUID, limit: int | None) -> list[SessionRecord]:
        """Return sessions for a user, newest first."""
        query = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        response = execute(query)
        return [_parse_row(row) for row in response.data or []]

    def update_session(
        self,
        session_id: UUID,
        user_id: UUID,
        values: dict[str, object],
        expected: dict[str, object] | None = None,
    ) -> SessionRecord | None:
        """Apply all values in one conditional update and return the new row."""
        query = (
            self.client.table(_TABLE)
            .update({key: _to_column(value) for key, value in values.items()})
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
        )
        for column, value in (expected or {}).items():
            query = query.eq(column, _to_column(value))
        response = execute_session_write(query)
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_session(self, session_id: UUID, user_id: UUID) -> bool:
        """Delete a session row owned by the user."""
        response = execute(
            self.client.table(_TABLE)
            .delete()
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
        )
        return bool(response.data)


def _to_column(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_row(row: dict[str, object]) -> SessionRecord:
    started_at = _parse_datetime(row.get("started_at"))
    if started_at is None:
        raise ValueError(f"Session row {row.get('id')} has no started_at")
    return SessionRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        job_id=UUID(str(row["job_id"])),
        question_ids=tuple(UUID(str(value)) for value in row.get("question_ids") or []),
        current_question_index=int(row.get("current_question_index", 0)),
        total_questions=int(row["total_questions"]),
        answered_questions=int(row.get("answered_questions", 0)),
        status=SessionStatus(row["status"]),
        started_at=started_at,
        completed_at=_parse_datetime(row.get("completed_at")),
        created_at=_parse_datetime(row.get("created_at")),
    )
