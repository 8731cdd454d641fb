"""Supabase repository for user preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from activity_tracker.adapters.supabase_errors import translate_errors
from activity_tracker.domain.errors import StoreError
from activity_tracker.domain.preferences import UserPreferences
from activity_tracker.services.preferences import PreferencesRepository


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for user preferences."""

    client: Client

    def get_preferences(self, user_id: str) -> UserPreferences | None:
        """Return the stored preferences row, if any."""
        with translate_errors("user_preferences"):
            response = (
                self.client.table("user_preferences")
                .select("*")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_preferences(response.data[0])

    def upsert_preferences(
        self, user_id: str, payload: dict[str, object]
    ) -> UserPreferences:
        """Create or replace the preferences row."""
        with translate_errors("user_preferences"):
            response = (
                self.client.table("user_preferences")
                .upsert(
                    {
                        **payload,
                        "user_id": user_id,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    },
                    on_conflict="user_id",
                )
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to save preferences")
        return _parse_preferences(response.data[0])


def _parse_preferences(row: dict[str, object]) -> UserPreferences:
    updated_raw = row.get("updated_at")
    return UserPreferences(
        user_id=str(row["user_id"]),
        daily_calories_goal=_optional_int(row.get("daily_calories_goal")),
        daily_protein_goal=_optional_int(row.get("daily_protein_goal")),
        daily_carbs_goal=_optional_int(row.get("daily_carbs_goal")),
        daily_fats_goal=_optional_int(row.get("daily_fats_goal")),
        timezone=row.get("timezone") or None,
        updated_at=(
            datetime.fromisoformat(updated_raw)
            if isinstance(updated_raw, str) and updated_raw
            else None
        ),
    )


def _optional_int(value: object) -> int | None:
    return None if value is None else int(value)
