"""Shared FastAPI dependencies."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from activity_tracker.services.dates import local_today
from activity_tracker.services.session import TrackerSession

if TYPE_CHECKING:
    from activity_tracker.containers import AppContainer
    from activity_tracker.domain.preferences import UserPreferences


def get_container(request: Request) -> AppContainer:
    """Return the app's dependency container."""
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """Resolve the bearer token to a user id or reject the request."""
    user_id = get_container(request).auth_service.authenticate(authorization)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


def open_session(
    container: AppContainer, user_id: str, reference: date | None
) -> tuple[TrackerSession, UserPreferences | None]:
    """Create a session in the user's timezone around a reference date."""
    preferences = container.preferences_service.get_preferences(user_id)
    tz = container.preferences_service.resolve_timezone(preferences)
    session = TrackerSession(
        user_id=user_id, tz=tz, reference=reference or local_today(tz)
    )
    return session, preferences
