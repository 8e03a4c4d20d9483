"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from interview_prep.adapters.supabase_queries import UNIQUE_VIOLATION
from interview_prep.adapters.supabase_question_repository import (
    SupabaseQuestionRepository,
)
from interview_prep.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from interview_prep.domain.errors import ConflictError, UnavailableError
from interview_prep.domain.questions import QuestionStatus, QuestionType
from interview_prep.domain.sessions import SessionStatus


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_limit: int | None = None
    last_order: tuple[str, bool] | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        self.last_filters = []
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        self.last_filters = []
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        self.last_filters = []
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _session_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "job_id": str(uuid4()),
        "question_ids": [str(uuid4()), str(uuid4())],
        "current_question_index": 0,
        "total_questions": 2,
        "answered_questions": 0,
        "status": "active",
        "started_at": "2026-01-05T09:00:00+00:00",
        "completed_at": None,
        "created_at": "2026-01-05T09:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_session_repository_create_and_get() -> None:
    client = FakeSupabaseClient()
    table = client.table("interview_sessions")
    row = _session_row()
    table.queue("insert", [row])
    table.queue("select", [row])
    repository = SupabaseSessionRepository(client)
    question_ids = [uuid4(), uuid4()]

    created = repository.create_session(
        user_id=uuid4(),
        job_id=uuid4(),
        question_ids=question_ids,
        started_at=datetime(2026, 1, 5, 9, 0, tzinfo=UTC),
    )

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["total_questions"] == 2
    assert table.last_payload["status"] == "active"
    assert table.last_payload["question_ids"] == [str(q) for q in question_ids]
    assert str(created.id) == row["id"]
    assert created.status == SessionStatus.ACTIVE
    assert len(created.question_ids) == 2

    fetched = repository.get_session(created.id, created.user_id)
    assert fetched is not None
    assert ("user_id", str(created.user_id)) in table.last_filters


def test_session_repository_unique_violation_is_conflict() -> None:
    client = FakeSupabaseClient()
    table = client.table("interview_sessions")
    table.error = APIError(
        {
            "message": "duplicate key value",
            "code": "23505",
            "hint": None,
            "details": None,
        }
    )
    repository = SupabaseSessionRepository(client)

    with pytest.raises(ConflictError):
        repository.create_session(uuid4(), uuid4(), [uuid4()], datetime.now(tz=UTC))


def test_session_repository_transport_error_is_unavailable() -> None:
    client = FakeSupabaseClient()
    table = client.table("interview_sessions")
    table.error = httpx.ConnectError("connection refused")
    repository = SupabaseSessionRepository(client)

    with pytest.raises(UnavailableError):
        repository.get_active_session(uuid4(), uuid4())


def test_session_repository_conditional_update() -> None:
    client = FakeSupabaseClient()
    table = client.table("interview_sessions")
    completed_at = datetime(2026, 1, 5, 10, 0, tzinfo=UTC)
    table.queue(
        "update",
        [
            _session_row(
                current_question_index=2,
                answered_questions=2,
                status="completed",
                completed_at=completed_at.isoformat(),
            )
        ],
    )
    table.queue("update", [])
    repository = SupabaseSessionRepository(client)
    session_id = uuid4()
    user_id = uuid4()

    updated = repository.update_session(
        session_id,
        user_id,
        {
            "current_question_index": 2,
            "answered_questions": 2,
            "status": SessionStatus.COMPLETED,
            "completed_at": completed_at,
        },
        expected={"current_question_index": 1, "answered_questions": 1},
    )

    assert updated is not None
    assert updated.status == SessionStatus.COMPLETED
    assert updated.completed_at == completed_at
    assert table.last_payload == {
        "current_question_index": 2,
        "answered_questions": 2,
        "status": "completed",
        "completed_at": completed_at.isoformat(),
    }
    assert table.last_filters == [
        ("id", str(session_id)),
        ("user_id", str(user_id)),
        ("current_question_index", 1),
        ("answered_questions", 1),
    ]

    missed = repository.update_session(session_id, user_id, {"status": "paused"})
    assert missed is None


def test_session_repository_list_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("interview_sessions")
    table.queue("select", [_session_row(), _session_row(status="paused")])
    table.queue("delete", [_session_row()])
    table.queue("delete", [])
    repository = SupabaseSessionRepository(client)

    sessions = repository.list_sessions(uuid4(), 20)

    assert [s.status for s in sessions] == [SessionStatus.ACTIVE, SessionStatus.PAUSED]
    assert table.last_order == ("created_at", True)
    assert table.last_limit == 20
    assert repository.delete_session(uuid4(), uuid4()) is True
    assert repository.delete_session(uuid4(), uuid4()) is False


def test_question_repository_lookups() -> None:
    client = FakeSupabaseClient()
    table = client.table("questions")
    user_id = uuid4()
    row = {
        "id": str(uuid4()),
        "user_id": str(user_id),
        "job_id": None,
        "title": "Two Sum",
        "type": "technical",
        "description": "Find two numbers",
        "difficulty": "Easy",
        "external_url": "https://leetcode.com/problems/two-sum/",
        "status": "completed",
    }
    table.queue("select", [row])
    table.queue("select", [row])
    repository = SupabaseQuestionRepository(client)

    single = repository.get_question(uuid4(), user_id)
    many = repository.get_questions([uuid4()], user_id)

    assert single is not None
    assert single.type == QuestionType.TECHNICAL
    assert single.job_id is None
    assert single.status == QuestionStatus.COMPLETED
    assert [q.title for q in many] == ["Two Sum"]
    assert repository.get_questions([], user_id) == []


def _unique_violation() -> APIError:
    return APIError(
        {
            "message": "duplicate key value violates unique constraint",
            "code": UNIQUE_VIOLATION,
            "hint": None,
            "details": None,
        }
    )


def test_session_repository_reactivation_violation_is_conflict() -> None:
    client = FakeSupabaseClient()
    client.table("interview_sessions").error = _unique_violation()
    repository = SupabaseSessionRepository(client)

    with pytest.raises(ConflictError):
        repository.update_session(uuid4(), uuid4(), {"status": SessionStatus.ACTIVE})


def test_session_repository_other_api_errors_propagate() -> None:
    client = FakeSupabaseClient()
    client.table("interview_sessions").error = APIError(
        {"message": "permission denied", "code": "42501", "hint": None, "details": None}
    )
    repository = SupabaseSessionRepository(client)

    with pytest.raises(APIError):
        repository.update_session(uuid4(), uuid4(), {"status": SessionStatus.PAUSED})


def test_session_repository_rejects_row_without_started_at() -> None:
    client = FakeSupabaseClient()
    client.table("interview_sessions").queue("select", [_session_row(started_at=None)])
    repository = SupabaseSessionRepository(client)

    with pytest.raises(ValueError):
        repository.get_session(uuid4(), uuid4())


def test_question_repository_transport_error_is_unavailable() -> None:
    client = FakeSupabaseClient()
    client.table("questions").error = httpx.ReadTimeout("timed out")
    repository = SupabaseQuestionRepository(client)

    with pytest.raises(UnavailableError):
        repository.get_questions([uuid4()], uuid4())
    with pytest.raises(UnavailableError):
        repository.get_question(uuid4(), uuid4())


def test_question_repository_mark_completed() -> None:
    client = FakeSupabaseClient()
    table = client.table("questions")
    repository = SupabaseQuestionRepository(client)
    question_id = uuid4()
    user_id = uuid4()

    repository.mark_completed(question_id, user_id)

    assert table.last_payload == {"status": QuestionStatus.COMPLETED.value}
    assert table.last_filters == [("id", str(question_id)), ("user_id", str(user_id))]
