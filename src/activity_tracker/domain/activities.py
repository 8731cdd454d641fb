"""Domain models for activities and completions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityDefinition:
    """A user-defined activity row on the weekly grid."""

    id: str
    label: str
    icon: str
    order_index: int


@dataclass(frozen=True)
class CompletionRecord:
    """Marks an activity as completed on a calendar day."""

    activity_id: str
    day: str
