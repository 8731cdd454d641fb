"""Meal logging service."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from activity_tracker.domain.errors import NotProvisionedError, ValidationError
from activity_tracker.domain.meals import MacroValues, MealRecord
from activity_tracker.domain.stats import DailyTotals
from activity_tracker.services.dates import combine_date_and_time, date_key
from activity_tracker.services.session import TrackerSession

_logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 120


class MealRepository(Protocol):
    """Persistence interface for meals and their daily aggregates."""

    def list_meals(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals eaten within a time range, oldest first."""

    def upsert_meal(self, user_id: str, payload: dict[str, object]) -> MealRecord:
        """Create or update a meal and return it."""

    def delete_meal(self, user_id: str, meal_id: str) -> None:
        """Delete a meal."""

    def get_daily_totals(
        self, user_id: str, start_day: str, end_day: str
    ) -> list[DailyTotals]:
        """Return stored daily aggregates between two date keys inclusive."""


@dataclass(frozen=True)
class MealForm:
    """Raw meal input as typed by the user."""

    name: str
    calories: object
    protein: object = None
    carbs: object = None
    fats: object = None
    time_of_day: str | None = None
    notes: str | None = None
    meal_id: str | None = None


def parse_macro(field: str, value: object, *, required: bool = False) -> int:
    """Parse a macro value and round it half-up to a whole number.

    Strings may use a comma as the decimal separator. Missing optional values
    count as zero; negative or non-finite values are rejected.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(field, "is required")
        return 0
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    if isinstance(value, str):
        try:
            number = float(value.replace(",", ".", 1).strip())
        except ValueError as exc:
            raise ValidationError(field, "must be a number") from exc
    elif isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError as exc:
            raise ValidationError(field, "must be a finite number") from exc
    else:
        raise ValidationError(field, "must be a number")
    if not math.isfinite(number):
        raise ValidationError(field, "must be a finite number")
    if number < 0:
        raise ValidationError(field, "must not be negative")
    return math.floor(number + 0.5)


def validate_macros(
    calories: object, protein: object, carbs: object, fats: object
) -> MacroValues:
    """Validate and round a full set of macros."""
    return MacroValues(
        calories=parse_macro("calories", calories, required=True),
        protein_g=parse_macro("protein", protein),
        carbs_g=parse_macro("carbs", carbs),
        fats_g=parse_macro("fats", fats),
    )


def validate_name(name: str | None) -> str:
    """Return a trimmed meal name or raise."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("name", "must not be empty")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError("name", f"must be at most {MAX_NAME_LENGTH} chars")
    return cleaned


@dataclass
class MealService:
    """Service that validates, persists and reloads meals."""

    repository: MealRepository

    def refresh(self, session: TrackerSession) -> bool:
        """Reload the selected week's meals and the trend aggregates.

        Returns False when a newer load superseded this one.
        """
        token = session.begin_load("meals")
        window = session.window
        meals = self._list_meals(session.user_id, window.start, window.end)
        stored = self._daily_totals(
            session.user_id, date_key(session.trend_start), date_key(window.end)
        )
        return session.commit_meals(token, meals, stored)

    def save_meal(
        self, session: TrackerSession, form: MealForm, day: date | None = None
    ) -> MealRecord:
        """Validate and persist a meal, then reload the session.

        Nothing is sent to the store when validation fails.
        """
        name = validate_name(form.name)
        macros = validate_macros(form.calories, form.protein, form.carbs, form.fats)
        eaten_at = combine_date_and_time(
            day or session.reference, form.time_of_day, session.tz
        )
        payload: dict[str, object] = {
            "meal_time": eaten_at.isoformat(),
            "meal_name": name,
            "calories": macros.calories,
            "protein": macros.protein_g,
            "carbs": macros.carbs_g,
            "fats": macros.fats_g,
            "notes": (form.notes or "").strip() or None,
        }
        if form.meal_id:
            payload["id"] = form.meal_id
        meal = self.repository.upsert_meal(session.user_id, payload)
        _logger.info("Saved meal %s for user %s", meal.id, session.user_id)
        self.refresh(session)
        return meal

    def delete_meal(self, session: TrackerSession, meal_id: str) -> None:
        """Delete a meal and reload the session."""
        self.repository.delete_meal(session.user_id, meal_id)
        self.refresh(session)

    def _list_meals(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealRecord]:
        try:
            return self.repository.list_meals(user_id, start, end)
        except NotProvisionedError as exc:
            _logger.warning("%s; showing no meals", exc)
            return []

    def _daily_totals(
        self, user_id: str, start_day: str, end_day: str
    ) -> list[DailyTotals]:
        try:
            return self.repository.get_daily_totals(user_id, start_day, end_day)
        except NotProvisionedError as exc:
            _logger.warning("%s; using totals computed from meals", exc)
            return []
