"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MacroValues:
    """Validated, rounded macro values."""

    calories: int
    protein_g: int
    carbs_g: int
    fats_g: int


@dataclass(frozen=True)
class MealRecord:
    """A logged meal."""

    id: str
    user_id: str
    eaten_at: datetime
    name: str
    calories: int
    protein_g: int
    carbs_g: int
    fats_g: int
    notes: str | None = None


@dataclass(frozen=True)
class SavedMeal:
    """A reusable meal template."""

    id: str
    user_id: str
    name: str
    calories: int
    protein_g: int
    carbs_g: int
    fats_g: int
    created_at: datetime | None
    updated_at: datetime | None
