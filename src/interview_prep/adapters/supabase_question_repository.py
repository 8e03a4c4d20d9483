"""Supabase-backed question repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from interview_prep.adapters.supabase_queries import execute
from interview_prep.domain.questions import QuestionRecord, QuestionStatus, QuestionType
from interview_prep.services.questions import QuestionRepository

_COLUMNS = (
    "id, user_id, job_id, title, type, description, difficulty, external_url, status"
)


@dataclass
class SupabaseQuestionRepository(QuestionRepository):
    """Supabase implementation for question lookups."""

    client: Client

    def get_question(self, question_id: UUID, user_id: UUID) -> QuestionRecord | None:
        """Return a question owned by the user, if present."""
        response = execute(
            self.client.table("questions")
            .select(_COLUMNS)
            .eq("id", str(question_id))
            .eq("user_id", str(user_id))
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_questions(
        self, question_ids: list[UUID], user_id: UUID
    ) -> list[QuestionRecord]:
        """Return the user's questions matching any of the ids."""
        if not question_ids:
            return []
        response = execute(
            self.client.table("questions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .in_("id", [str(question_id) for question_id in question_ids])
        )
        return [_parse_row(row) for row in response.data or []]

    def mark_completed(self, question_id: UUID, user_id: UUID) -> None:
        """Set a question's status to completed."""
        execute(
            self.client.table("questions")
            .update({"status": QuestionStatus.COMPLETED.value})
            .eq("id", str(question_id))
            .eq("user_id", str(user_id))
        )


def _parse_row(row: dict[str, object]) -> QuestionRecord:
    job_id = row.get("job_id")
    return QuestionRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        job_id=UUID(str(job_id)) if job_id else None,
        title=str(row.get("title", "")),
        type=QuestionType(row.get("type", QuestionType.BEHAVIORAL.value)),
        description=row.get("description"),
        difficulty=row.get("difficulty"),
        external_url=row.get("external_url"),
        status=QuestionStatus(row.get("status") or QuestionStatus.PENDING.value),
    )
