"""Saved meal templates."""

import logging
from dataclasses import dataclass
from typing import Protocol

from activity_tracker.domain.errors import NotProvisionedError
from activity_tracker.domain.meals import SavedMeal
from activity_tracker.services.meals import validate_macros, validate_name

_logger = logging.getLogger(__name__)


class SavedMealRepository(Protocol):
    """Persistence interface for saved meals."""

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        """Return the user's saved meals ordered by name."""

    def create_saved_meal(
        self, user_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        """Create a saved meal and return it."""

    def update_saved_meal(
        self, user_id: str, saved_meal_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        """Update a saved meal and return it."""

    def delete_saved_meal(self, user_id: str, saved_meal_id: str) -> None:
        """Delete a saved meal."""


@dataclass
class SavedMealService:
    """Application service for saved meals."""

    repository: SavedMealRepository

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        """Return saved meals, or none when the table is missing."""
        try:
            return self.repository.list_saved_meals(user_id)
        except NotProvisionedError as exc:
            _logger.warning("%s; showing no saved meals", exc)
            return []

    def create_saved_meal(  # noqa: PLR0913
        self,
        user_id: str,
        name: str,
        calories: object,
        protein: object = None,
        carbs: object = None,
        fats: object = None,
    ) -> SavedMeal:
        """Validate and create a saved meal."""
        payload = _payload(name, calories, protein, carbs, fats)
        return self.repository.create_saved_meal(user_id, payload)

    def update_saved_meal(  # noqa: PLR0913
        self,
        user_id: str,
        saved_meal_id: str,
        name: str,
        calories: object,
        protein: object = None,
        carbs: object = None,
        fats: object = None,
    ) -> SavedMeal:
        """Validate and update a saved meal."""
        payload = _payload(name, calories, protein, carbs, fats)
        return self.repository.update_saved_meal(user_id, saved_meal_id, payload)

    def delete_saved_meal(self, user_id: str, saved_meal_id: str) -> None:
        """Delete a saved meal."""
        self.repository.delete_saved_meal(user_id, saved_meal_id)


def _payload(  # noqa: PLR0913
    name: str, calories: object, protein: object, carbs: object, fats: object
) -> dict[str, object]:
    macros = validate_macros(calories, protein, carbs, fats)
    return {
        "meal_name": validate_name(name),
        "calories": macros.calories,
        "protein": macros.protein_g,
        "carbs": macros.carbs_g,
        "fats": macros.fats_g,
    }
