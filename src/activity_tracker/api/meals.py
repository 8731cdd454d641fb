"""Food diary endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from activity_tracker.api.deps import get_container, open_session, require_user
from activity_tracker.api.models import (  # noqa: TC001
    EstimateBody,
    MealBody,
    SavedMealBody,
)
from activity_tracker.services.meals import MealForm

if TYPE_CHECKING:
    from activity_tracker.containers import AppContainer

router = APIRouter(tags=["meals"])


@router.get("/meals/week")
async def meal_week(
    request: Request,
    reference: date | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return meals, daily totals, trend and goal progress for a week."""
    container: AppContainer = get_container(request)
    session, preferences = open_session(container, user_id, reference)
    container.meal_service.refresh(session)
    return {"overview": asdict(session.meal_overview(preferences))}


@router.post("/meals")
async def create_meal(
    body: MealBody, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Log a meal on the given day."""
    return _save(get_container(request), user_id, body, meal_id=None)


@router.put("/meals/{meal_id}")
async def update_meal(
    meal_id: str,
    body: MealBody,
    request: Request,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Replace a logged meal."""
    return _save(get_container(request), user_id, body, meal_id=meal_id)


@router.delete("/meals/{meal_id}")
async def delete_meal(
    meal_id: str,
    request: Request,
    reference: date | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Delete a meal and return the refreshed week."""
    container: AppContainer = get_container(request)
    session, preferences = open_session(container, user_id, reference)
    container.meal_service.delete_meal(session, meal_id)
    return {"overview": asdict(session.meal_overview(preferences))}


@router.post("/meals/estimate")
async def estimate_meal(
    body: EstimateBody, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Estimate macros for a free-text description."""
    container: AppContainer = get_container(request)
    estimate = await container.summary_service.estimate_macros(body.description)
    return {"estimate": estimate.model_dump()}


@router.get("/saved-meals")
async def list_saved_meals(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return saved meals."""
    container: AppContainer = get_container(request)
    saved = container.saved_meal_service.list_saved_meals(user_id)
    return {"saved_meals": [asdict(meal) for meal in saved]}


@router.post("/saved-meals")
async def create_saved_meal(
    body: SavedMealBody, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Create a saved meal."""
    container: AppContainer = get_container(request)
    saved = container.saved_meal_service.create_saved_meal(
        user_id, body.name, body.calories, body.protein, body.carbs, body.fats
    )
    return {"saved_meal": asdict(saved)}


@router.put("/saved-meals/{saved_meal_id}")
async def update_saved_meal(
    saved_meal_id: str,
    body: SavedMealBody,
    request: Request,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Update a saved meal."""
    container: AppContainer = get_container(request)
    saved = container.saved_meal_service.update_saved_meal(
        user_id,
        saved_meal_id,
        body.name,
        body.calories,
        body.protein,
        body.carbs,
        body.fats,
    )
    return {"saved_meal": asdict(saved)}


@router.delete("/saved-meals/{saved_meal_id}")
async def delete_saved_meal(
    saved_meal_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, str]:
    """Delete a saved meal."""
    container: AppContainer = get_container(request)
    container.saved_meal_service.delete_saved_meal(user_id, saved_meal_id)
    return {"status": "ok"}


def _save(
    container: AppContainer, user_id: str, body: MealBody, meal_id: str | None
) -> dict[str, object]:
    session, preferences = open_session(container, user_id, body.day)
    form = MealForm(
        name=body.name,
        calories=body.calories,
        protein=body.protein,
        carbs=body.carbs,
        fats=body.fats,
        time_of_day=body.time,
        notes=body.notes,
        meal_id=meal_id,
    )
    meal = container.meal_service.save_meal(session, form)
    return {
        "meal": asdict(meal),
        "overview": asdict(session.meal_overview(preferences)),
    }
