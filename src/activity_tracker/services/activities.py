"""Activity grid services."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import uuid4

from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.errors import NotProvisionedError, ValidationError
from activity_tracker.services.dates import date_key
from activity_tracker.services.session import TrackerSession

_logger = logging.getLogger(__name__)

DEFAULT_ICON = "check"
MAX_LABEL_LENGTH = 60


class ActivityRepository(Protocol):
    """Persistence interface for activities and completions."""

    def list_activities(self, user_id: str) -> list[ActivityDefinition]:
        """Return the user's activities."""

    def upsert_activity(
        self, user_id: str, activity: ActivityDefinition
    ) -> ActivityDefinition:
        """Create or update an activity and return it."""

    def upsert_activities(
        self, user_id: str, activities: list[ActivityDefinition]
    ) -> list[ActivityDefinition]:
        """Create or update several activities in one write."""

    def delete_activity(self, user_id: str, activity_id: str) -> None:
        """Delete an activity and its completions."""

    def list_completions(self, user_id: str) -> list[CompletionRecord]:
        """Return every completion recorded by the user."""

    def add_completion(self, user_id: str, record: CompletionRecord) -> None:
        """Mark an activity as completed on a day."""

    def delete_completion(self, user_id: str, record: CompletionRecord) -> None:
        """Remove a completion."""


@dataclass
class ActivityService:
    """Application service for the weekly activity grid."""

    repository: ActivityRepository

    def list_activities(self, user_id: str) -> list[ActivityDefinition]:
        """Return activities in the user's order."""
        try:
            activities = self.repository.list_activities(user_id)
        except NotProvisionedError as exc:
            _logger.warning("%s; showing no activities", exc)
            return []
        return sorted(activities, key=lambda activity: activity.order_index)

    def list_completions(self, user_id: str) -> list[CompletionRecord]:
        """Return the user's completions."""
        try:
            return self.repository.list_completions(user_id)
        except NotProvisionedError as exc:
            _logger.warning("%s; showing no completions", exc)
            return []

    def create_activity(
        self, user_id: str, label: str, icon: str | None = None
    ) -> ActivityDefinition:
        """Append a new activity at the end of the user's list."""
        cleaned = _clean_label(label)
        existing = self.list_activities(user_id)
        next_index = max((item.order_index for item in existing), default=-1) + 1
        activity = ActivityDefinition(
            id=str(uuid4()),
            label=cleaned,
            icon=(icon or DEFAULT_ICON).strip() or DEFAULT_ICON,
            order_index=next_index,
        )
        return self.repository.upsert_activity(user_id, activity)

    def update_activity(
        self,
        user_id: str,
        activity_id: str,
        label: str | None = None,
        icon: str | None = None,
    ) -> ActivityDefinition:
        """Rename or re-icon an activity."""
        current = self._get(user_id, activity_id)
        updated = replace(
            current,
            label=_clean_label(label) if label is not None else current.label,
            icon=icon.strip() if icon and icon.strip() else current.icon,
        )
        return self.repository.upsert_activity(user_id, updated)

    def delete_activity(self, user_id: str, activity_id: str) -> None:
        """Delete an activity."""
        self.repository.delete_activity(user_id, activity_id)

    def move_activity(
        self, user_id: str, activity_id: str, direction: str
    ) -> list[ActivityDefinition]:
        """Swap an activity with its neighbour; a no-op at either edge.

        The list is renumbered 0..n-1 and every changed row is written in a
        single batch, so a failed write leaves the stored order untouched.
        """
        if direction not in {"up", "down"}:
            raise ValidationError("direction", "must be 'up' or 'down'")
        activities = self.list_activities(user_id)
        position = next(
            (idx for idx, item in enumerate(activities) if item.id == activity_id),
            None,
        )
        if position is None:
            raise ValidationError("activity_id", "unknown activity")
        neighbour = position - 1 if direction == "up" else position + 1
        if neighbour < 0 or neighbour >= len(activities):
            return activities

        reordered = list(activities)
        reordered[position], reordered[neighbour] = (
            reordered[neighbour],
            reordered[position],
        )
        previous = {activity.id: activity.order_index for activity in activities}
        renumbered = [
            replace(activity, order_index=index)
            for index, activity in enumerate(reordered)
        ]
        changed = [
            activity
            for activity in renumbered
            if previous[activity.id] != activity.order_index
        ]
        if changed:
            self.repository.upsert_activities(user_id, changed)
        return renumbered

    def toggle_completion(self, user_id: str, activity_id: str, day: date) -> bool:
        """Flip completion for a day and return the new state."""
        record = CompletionRecord(activity_id=activity_id, day=date_key(day))
        if record in set(self.list_completions(user_id)):
            self.repository.delete_completion(user_id, record)
            return False
        self.repository.add_completion(user_id, record)
        return True

    def refresh(self, session: TrackerSession) -> bool:
        """Reload activities and completions into the session.

        Returns False when a newer load superseded this one.
        """
        token = session.begin_load("activities")
        activities = self.list_activities(session.user_id)
        completions = self.list_completions(session.user_id)
        return session.commit_activities(token, activities, completions)

    def _get(self, user_id: str, activity_id: str) -> ActivityDefinition:
        for activity in self.list_activities(user_id):
            if activity.id == activity_id:
                return activity
        raise ValidationError("activity_id", "unknown activity")


def _clean_label(label: str) -> str:
    cleaned = label.strip()
    if not cleaned:
        raise ValidationError("label", "must not be empty")
    if len(cleaned) > MAX_LABEL_LENGTH:
        raise ValidationError("label", f"must be at most {MAX_LABEL_LENGTH} chars")
    return cleaned
