"""Activity grid endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from activity_tracker.api.deps import get_container, open_session, require_user
from activity_tracker.api.models import ActivityCreate, ActivityUpdate  # noqa: TC001
from activity_tracker.services.analytics import completions_in_window
from activity_tracker.services.dates import (
    date_key,
    iso_week_number,
    week_days,
    week_range_label,
)

if TYPE_CHECKING:
    from activity_tracker.containers import AppContainer
    from activity_tracker.services.session import TrackerSession

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("")
async def list_activities(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return the user's activities in order."""
    container: AppContainer = get_container(request)
    activities = container.activity_service.list_activities(user_id)
    return {"activities": [asdict(activity) for activity in activities]}


@router.post("")
async def create_activity(
    body: ActivityCreate, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Append a new activity."""
    container: AppContainer = get_container(request)
    activity = container.activity_service.create_activity(
        user_id, body.label, body.icon
    )
    return {"activity": asdict(activity)}


@router.patch("/{activity_id}")
async def update_activity(
    activity_id: str,
    body: ActivityUpdate,
    request: Request,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Rename or re-icon an activity."""
    container: AppContainer = get_container(request)
    activity = container.activity_service.update_activity(
        user_id, activity_id, label=body.label, icon=body.icon
    )
    return {"activity": asdict(activity)}


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, str]:
    """Delete an activity."""
    container: AppContainer = get_container(request)
    container.activity_service.delete_activity(user_id, activity_id)
    return {"status": "ok"}


@router.post("/{activity_id}/move")
async def move_activity(
    activity_id: str,
    direction: str,
    request: Request,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Move an activity one position up or down."""
    container: AppContainer = get_container(request)
    activities = container.activity_service.move_activity(
        user_id, activity_id, direction
    )
    return {"activities": [asdict(activity) for activity in activities]}


@router.post("/{activity_id}/toggle")
async def toggle_completion(
    activity_id: str,
    day: date,
    request: Request,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Toggle completion of an activity on a day and return fresh stats."""
    container: AppContainer = get_container(request)
    completed = container.activity_service.toggle_completion(user_id, activity_id, day)
    session, _ = open_session(container, user_id, day)
    container.activity_service.refresh(session)
    return {"completed": completed, **_week_payload(session)}


@router.get("/stats")
async def activity_stats(
    request: Request,
    reference: date | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return the weekly grid and statistics around a reference date."""
    container: AppContainer = get_container(request)
    session, _ = open_session(container, user_id, reference)
    container.activity_service.refresh(session)
    return _week_payload(session)


@router.post("/summary")
async def weekly_summary(
    request: Request,
    reference: date | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return a motivational summary of the week."""
    container: AppContainer = get_container(request)
    session, _ = open_session(container, user_id, reference)
    container.activity_service.refresh(session)
    snapshot = session.summary_snapshot()
    summary = await container.summary_service.summarize(snapshot)
    return {"summary": summary, "snapshot": asdict(snapshot)}


def _week_payload(session: TrackerSession) -> dict[str, object]:
    window = session.window
    grid: dict[str, list[str]] = {activity.id: [] for activity in session.activities}
    for record in completions_in_window(session.completions, window):
        grid.setdefault(record.activity_id, []).append(record.day)
    return {
        "week": {
            "start": window.start.isoformat(),
            "end": window.end.isoformat(),
            "label": week_range_label(window),
            "iso_week": iso_week_number(window.start),
            "days": [date_key(day) for day in week_days(window)],
        },
        "activities": [asdict(activity) for activity in session.activities],
        "grid": {activity_id: sorted(days) for activity_id, days in grid.items()},
        "stats": asdict(session.activity_stats()),
    }
