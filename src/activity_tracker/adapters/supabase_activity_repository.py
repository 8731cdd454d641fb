"""Supabase repository for activities and completions."""

from dataclasses import dataclass

from supabase import Client

from activity_tracker.adapters.supabase_errors import translate_errors
from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.errors import StoreError
from activity_tracker.services.activities import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase implementation for the activity grid."""

    client: Client

    def list_activities(self, user_id: str) -> list[ActivityDefinition]:
        """Return the user's activities ordered by position."""
        with translate_errors("activities"):
            response = (
                self.client.table("activities")
                .select("id, label, icon, order_index")
                .eq("user_id", user_id)
                .order("order_index", desc=False)
                .execute()
            )
        return [_parse_activity(row) for row in response.data or []]

    def upsert_activity(
        self, user_id: str, activity: ActivityDefinition
    ) -> ActivityDefinition:
        """Create or update an activity row."""
        with translate_errors("activities"):
            response = (
                self.client.table("activities")
                .upsert(_activity_row(user_id, activity))
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to save activity")
        return _parse_activity(response.data[0])

    def upsert_activities(
        self, user_id: str, activities: list[ActivityDefinition]
    ) -> list[ActivityDefinition]:
        """Write several activity rows in one statement."""
        with translate_errors("activities"):
            response = (
                self.client.table("activities")
                .upsert([_activity_row(user_id, activity) for activity in activities])
                .execute()
            )
        if len(response.data or []) != len(activities):
            raise StoreError("Failed to save activities")
        return [_parse_activity(row) for row in response.data]

    def delete_activity(self, user_id: str, activity_id: str) -> None:
        """Delete an activity; completions cascade in the database."""
        with translate_errors("activities"):
            self.client.table("activities").delete().eq("user_id", user_id).eq(
                "id", activity_id
            ).execute()

    def list_completions(self, user_id: str) -> list[CompletionRecord]:
        """Return every completion for the user."""
        with translate_errors("activity_completions"):
            response = (
                self.client.table("activity_completions")
                .select("activity_id, day")
                .eq("user_id", user_id)
                .order("day", desc=False)
                .execute()
            )
        return [
            CompletionRecord(
                activity_id=str(row["activity_id"]), day=str(row["day"])[:10]
            )
            for row in response.data or []
        ]

    def add_completion(self, user_id: str, record: CompletionRecord) -> None:
        """Insert a completion; an existing one is left as is."""
        with translate_errors("activity_completions"):
            self.client.table("activity_completions").upsert(
                {
                    "user_id": user_id,
                    "activity_id": record.activity_id,
                    "day": record.day,
                },
                on_conflict="user_id,activity_id,day",
                ignore_duplicates=True,
            ).execute()

    def delete_completion(self, user_id: str, record: CompletionRecord) -> None:
        """Delete a completion."""
        with translate_errors("activity_completions"):
            self.client.table("activity_completions").delete().eq(
                "user_id", user_id
            ).eq("activity_id", record.activity_id).eq("day", record.day).execute()


def _activity_row(user_id: str, activity: ActivityDefinition) -> dict[str, object]:
    return {
        "id": activity.id,
        "user_id": user_id,
        "label": activity.label,
        "icon": activity.icon,
        "order_index": activity.order_index,
    }


def _parse_activity(row: dict[str, object]) -> ActivityDefinition:
    return ActivityDefinition(
        id=str(row["id"]),
        label=str(row.get("label", "")),
        icon=str(row.get("icon") or ""),
        order_index=int(row.get("order_index") or 0),
    )
