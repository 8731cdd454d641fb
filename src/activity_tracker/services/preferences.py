"""User preferences service."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from activity_tracker.domain.errors import NotProvisionedError, ValidationError
from activity_tracker.domain.preferences import UserPreferences

_logger = logging.getLogger(__name__)

GOAL_FIELDS = (
    "daily_calories_goal",
    "daily_protein_goal",
    "daily_carbs_goal",
    "daily_fats_goal",
)


class PreferencesRepository(Protocol):
    """Persistence interface for user preferences."""

    def get_preferences(self, user_id: str) -> UserPreferences | None:
        """Return the user's preferences if stored."""

    def upsert_preferences(
        self, user_id: str, payload: dict[str, object]
    ) -> UserPreferences:
        """Create or replace the user's preferences."""


@dataclass
class PreferencesService:
    """Service for daily goals and timezone."""

    repository: PreferencesRepository
    default_timezone: str = "UTC"

    def get_preferences(self, user_id: str) -> UserPreferences | None:
        """Return preferences, or None when unset or the table is missing."""
        try:
            return self.repository.get_preferences(user_id)
        except NotProvisionedError as exc:
            _logger.warning("%s; using default preferences", exc)
            return None

    def save_preferences(
        self, user_id: str, goals: dict[str, object], timezone: str | None = None
    ) -> UserPreferences:
        """Round goals and persist them with an optional timezone."""
        payload: dict[str, object] = {
            name: _round_goal(name, goals.get(name)) for name in GOAL_FIELDS
        }
        if timezone is not None:
            payload["timezone"] = _validate_timezone(timezone)
        return self.repository.upsert_preferences(user_id, payload)

    def resolve_timezone(self, preferences: UserPreferences | None) -> ZoneInfo:
        """Return the user's timezone, falling back to the default."""
        name = (preferences.timezone if preferences else None) or self.default_timezone
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            _logger.warning("Unknown timezone %s; using %s", name, self.default_timezone)
            return ZoneInfo(self.default_timezone)


def _round_goal(name: str, value: object) -> int | None:
    """Round a goal half-up; missing or non-numeric goals become None."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        return None
    if value < 0:
        raise ValidationError(name, "must not be negative")
    return math.floor(value + 0.5)


def _validate_timezone(name: str) -> str:
    cleaned = name.strip()
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError("timezone", f"unknown timezone {name!r}") from exc
    return cleaned
