"""Request bodies for the HTTP API."""

from datetime import date

from pydantic import BaseModel, Field

RawNumber = int | float | str | None


class ActivityCreate(BaseModel):
    """New activity row."""

    label: str
    icon: str | None = None


class ActivityUpdate(BaseModel):
    """Rename or re-icon an activity."""

    label: str | None = None
    icon: str | None = None


class MealBody(BaseModel):
    """Meal form as typed by the user; numbers may arrive as text."""

    name: str
    calories: RawNumber = None
    protein: RawNumber = None
    carbs: RawNumber = None
    fats: RawNumber = None
    time: str | None = None
    notes: str | None = None
    day: date | None = None


class SavedMealBody(BaseModel):
    """Saved meal template."""

    name: str
    calories: RawNumber = None
    protein: RawNumber = None
    carbs: RawNumber = None
    fats: RawNumber = None


class EstimateBody(BaseModel):
    """Free-text meal description for AI estimation."""

    description: str = Field(max_length=2000)


class PreferencesBody(BaseModel):
    """Daily goals and timezone."""

    daily_calories_goal: float | None = None
    daily_protein_goal: float | None = None
    daily_carbs_goal: float | None = None
    daily_fats_goal: float | None = None
    timezone: str | None = None
