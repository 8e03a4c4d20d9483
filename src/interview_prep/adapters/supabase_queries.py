"""Error translation shared by the Supabase repositories."""

import httpx
from postgrest.exceptions import APIError

from interview_prep.domain.errors import (
    ACTIVE_SESSION_EXISTS,
    ConflictError,
    UnavailableError,
)

UNIQUE_VIOLATION = "23505"


def execute(query):  # type: ignore[no-untyped-def]
    """Run a PostgREST query, reporting transport failures as unavailability."""
    try:
        return query.execute()
    except httpx.TransportError as exc:
        raise UnavailableError() from exc


def execute_session_write(query):  # type: ignore[no-untyped-def]
    """Run a write that may hit the one-active-session-per-job index."""
    try:
        return execute(query)
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ConflictError(ACTIVE_SESSION_EXISTS) from exc
        raise
