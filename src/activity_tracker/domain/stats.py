"""Domain models for derived statistics."""

from dataclasses import dataclass, field
from datetime import datetime

from activity_tracker.domain.meals import MealRecord


@dataclass(frozen=True)
class DailyTotals:
    """Macro totals for one calendar day."""

    day: str
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float


@dataclass(frozen=True)
class WeekWindow:
    """Monday 00:00 through Sunday 23:59:59.999 in local time."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class TrendPoint:
    """Daily macro totals for one chart point."""

    day: str
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float


@dataclass(frozen=True)
class WeeklyPoint:
    """Completion count for one week that had activity."""

    week_start: str
    count: int


@dataclass(frozen=True)
class ActivityCount:
    """Completions of a single activity."""

    label: str
    count: int


@dataclass(frozen=True)
class ActivityStats:
    """Statistics shown next to the weekly activity grid."""

    total: int
    active_days: int
    streak: int
    average_per_day: float
    average_per_week: float
    change_from_previous_week: int | None
    weekly_trend: list[WeeklyPoint]
    per_day: dict[str, int]


@dataclass(frozen=True)
class SummarySnapshot:
    """Input for the weekly AI summary."""

    total: int
    active_days: int
    streak: int
    average_per_week: float
    week_range_label: str
    per_activity: list[ActivityCount] = field(default_factory=list)


@dataclass(frozen=True)
class MealOverview:
    """Everything the food diary shows for a selected day and its week."""

    window: WeekWindow
    selected_day: str
    meals: list[MealRecord]
    daily_totals: dict[str, DailyTotals]
    trend: list[TrendPoint]
    weekly_total: DailyTotals
    selected_totals: DailyTotals | None
    goal_progress: dict[str, float | None]
