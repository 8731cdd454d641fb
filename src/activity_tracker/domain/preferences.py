"""User preference models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserPreferences:
    """Daily macro goals and display settings for a user."""

    user_id: str
    daily_calories_goal: int | None
    daily_protein_goal: int | None
    daily_carbs_goal: int | None
    daily_fats_goal: int | None
    timezone: str | None = None
    updated_at: datetime | None = None
