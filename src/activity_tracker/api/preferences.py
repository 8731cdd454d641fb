"""User preference endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from activity_tracker.api.deps import get_container, require_user
from activity_tracker.api.models import PreferencesBody  # noqa: TC001

if TYPE_CHECKING:
    from activity_tracker.containers import AppContainer

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("")
async def get_preferences(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return the user's goals, or null when none are stored."""
    container: AppContainer = get_container(request)
    preferences = container.preferences_service.get_preferences(user_id)
    return {"preferences": asdict(preferences) if preferences else None}


@router.put("")
async def save_preferences(
    body: PreferencesBody, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Store the user's goals and timezone."""
    container: AppContainer = get_container(request)
    preferences = container.preferences_service.save_preferences(
        user_id,
        goals=body.model_dump(exclude={"timezone"}),
        timezone=body.timezone,
    )
    return {"preferences": asdict(preferences)}
