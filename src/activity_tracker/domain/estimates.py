"""Models for AI macro estimates."""

from pydantic import BaseModel, Field


class MacroEstimate(BaseModel):
    """Macro estimate returned by the AI adapter."""

    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fats: int = Field(ge=0)
