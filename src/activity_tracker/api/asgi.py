"""ASGI entrypoint for the activity tracker API."""

from activity_tracker.api.app import create_app
from activity_tracker.containers import build_container

app = create_app(build_container())
