"""Supabase repository for saved meals."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from activity_tracker.adapters.supabase_errors import translate_errors
from activity_tracker.adapters.supabase_meal_repository import parse_whole_number
from activity_tracker.domain.errors import StoreError
from activity_tracker.domain.meals import SavedMeal
from activity_tracker.services.saved_meals import SavedMealRepository


@dataclass
class SupabaseSavedMealRepository(SavedMealRepository):
    """Supabase implementation for saved meals."""

    client: Client

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        """Return saved meals ordered by name."""
        with translate_errors("saved_meals"):
            response = (
                self.client.table("saved_meals")
                .select("*")
                .eq("user_id", user_id)
                .order("meal_name", desc=False)
                .execute()
            )
        return [_parse_saved_meal(row) for row in response.data or []]

    def create_saved_meal(
        self, user_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        """Insert a saved meal."""
        with translate_errors("saved_meals"):
            response = (
                self.client.table("saved_meals")
                .insert({**payload, "user_id": user_id})
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to create saved meal")
        return _parse_saved_meal(response.data[0])

    def update_saved_meal(
        self, user_id: str, saved_meal_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        """Update a saved meal."""
        with translate_errors("saved_meals"):
            response = (
                self.client.table("saved_meals")
                .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
                .eq("user_id", user_id)
                .eq("id", saved_meal_id)
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to update saved meal")
        return _parse_saved_meal(response.data[0])

    def delete_saved_meal(self, user_id: str, saved_meal_id: str) -> None:
        """Delete a saved meal."""
        with translate_errors("saved_meals"):
            self.client.table("saved_meals").delete().eq("user_id", user_id).eq(
                "id", saved_meal_id
            ).execute()


def _parse_saved_meal(row: dict[str, object]) -> SavedMeal:
    return SavedMeal(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row.get("meal_name", "")),
        calories=parse_whole_number(row.get("calories")),
        protein_g=parse_whole_number(row.get("protein")),
        carbs_g=parse_whole_number(row.get("carbs")),
        fats_g=parse_whole_number(row.get("fats")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
