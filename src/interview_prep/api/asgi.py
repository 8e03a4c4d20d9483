"""ASGI entrypoint for the interview prep API."""

from interview_prep.api.app import create_app
from interview_prep.containers import build_container

app = create_app(build_container())
