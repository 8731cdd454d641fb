"""Supabase repository for meals and daily totals."""

import math
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from activity_tracker.adapters.supabase_errors import translate_errors
from activity_tracker.domain.errors import StoreError
from activity_tracker.domain.meals import MealRecord
from activity_tracker.domain.stats import DailyTotals
from activity_tracker.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def list_meals(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals within the time range, oldest first."""
        with translate_errors("meals"):
            response = (
                self.client.table("meals")
                .select("*")
                .eq("user_id", user_id)
                .gte("meal_time", start.isoformat())
                .lte("meal_time", end.isoformat())
                .order("meal_time", desc=False)
                .execute()
            )
        return [_parse_meal(row) for row in response.data or []]

    def upsert_meal(self, user_id: str, payload: dict[str, object]) -> MealRecord:
        """Create or update a meal row."""
        with translate_errors("meals"):
            response = (
                self.client.table("meals")
                .upsert({**payload, "user_id": user_id})
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to save meal")
        return _parse_meal(response.data[0])

    def delete_meal(self, user_id: str, meal_id: str) -> None:
        """Delete a meal owned by the user."""
        with translate_errors("meals"):
            self.client.table("meals").delete().eq("user_id", user_id).eq(
                "id", meal_id
            ).execute()

    def get_daily_totals(
        self, user_id: str, start_day: str, end_day: str
    ) -> list[DailyTotals]:
        """Return rows of the ``meal_daily_totals`` view."""
        with translate_errors("meal_daily_totals"):
            response = (
                self.client.table("meal_daily_totals")
                .select("*")
                .eq("user_id", user_id)
                .gte("meal_day", start_day)
                .lte("meal_day", end_day)
                .order("meal_day", desc=False)
                .execute()
            )
        return [_parse_totals(row) for row in response.data or []]


def _parse_meal(row: dict[str, object]) -> MealRecord:
    notes = row.get("notes")
    return MealRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        eaten_at=datetime.fromisoformat(str(row["meal_time"])),
        name=str(row.get("meal_name", "")),
        calories=parse_whole_number(row.get("calories")),
        protein_g=parse_whole_number(row.get("protein")),
        carbs_g=parse_whole_number(row.get("carbs")),
        fats_g=parse_whole_number(row.get("fats")),
        notes=str(notes) if notes else None,
    )


def parse_whole_number(value: object) -> int:
    """Round a numeric column half-up; the store may return numbers as text."""
    if value is None or value == "":
        return 0
    return math.floor(float(value) + 0.5)


def _parse_totals(row: dict[str, object]) -> DailyTotals:
    # The view's date column is already a calendar date; never shift it.
    return DailyTotals(
        day=str(row["meal_day"])[:10],
        calories=float(row.get("total_calories") or 0.0),
        protein_g=float(row.get("total_protein") or 0.0),
        carbs_g=float(row.get("total_carbs") or 0.0),
        fats_g=float(row.get("total_fats") or 0.0),
    )
