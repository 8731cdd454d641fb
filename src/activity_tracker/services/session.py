"""Per-session view state."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo

from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.meals import MealRecord
from activity_tracker.domain.preferences import UserPreferences
from activity_tracker.domain.stats import (
    ActivityStats,
    DailyTotals,
    MealOverview,
    SummarySnapshot,
    WeekWindow,
)
from activity_tracker.services.analytics import (
    build_activity_stats,
    build_snapshot,
    daily_macro_totals,
    goal_progress,
    macro_trend,
    merge_daily_totals,
    weekly_macro_total,
)
from activity_tracker.services.dates import date_key, local_today, week_window

TREND_LOOKBACK_DAYS = 42


@dataclass
class TrackerSession:
    """Loaded records for one user's view, plus load bookkeeping.

    Each load takes a token from ``begin_load``; results are only applied when
    no newer load of the same kind has started in the meantime.
    """

    user_id: str
    tz: tzinfo
    reference: date
    activities: list[ActivityDefinition] = field(default_factory=list)
    completions: list[CompletionRecord] = field(default_factory=list)
    meals: list[MealRecord] = field(default_factory=list)
    stored_totals: list[DailyTotals] = field(default_factory=list)
    _generations: dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def window(self) -> WeekWindow:
        """Week window around the reference date, in the session timezone."""
        return week_window(datetime.combine(self.reference, time.min, tzinfo=self.tz))

    @property
    def trend_start(self) -> date:
        """First day covered by the stored daily totals."""
        return self.window.start.date() - timedelta(days=TREND_LOOKBACK_DAYS)

    def today(self) -> date:
        """Today's date in the session timezone."""
        return local_today(self.tz)

    def begin_load(self, kind: str) -> int:
        """Start a load and return its token."""
        self._generations[kind] = self._generations.get(kind, 0) + 1
        return self._generations[kind]

    def is_current(self, kind: str, token: int) -> bool:
        """Return True when no newer load of this kind has started."""
        return self._generations.get(kind, 0) == token

    def commit_activities(
        self,
        token: int,
        activities: list[ActivityDefinition],
        completions: list[CompletionRecord],
    ) -> bool:
        """Apply loaded activities unless the load is stale."""
        if not self.is_current("activities", token):
            return False
        self.activities = list(activities)
        self.completions = list(completions)
        return True

    def commit_meals(
        self, token: int, meals: list[MealRecord], stored_totals: list[DailyTotals]
    ) -> bool:
        """Apply loaded meals and stored totals unless the load is stale."""
        if not self.is_current("meals", token):
            return False
        self.meals = list(meals)
        self.stored_totals = list(stored_totals)
        return True

    def activity_stats(self, today: date | None = None) -> ActivityStats:
        """Statistics for the week around the reference date."""
        return build_activity_stats(
            self.completions, self.window, today or self.today()
        )

    def summary_snapshot(self, today: date | None = None) -> SummarySnapshot:
        """Numbers for the weekly summary."""
        return build_snapshot(
            self.completions, self.activities, self.window, today or self.today()
        )

    def meal_overview(self, preferences: UserPreferences | None) -> MealOverview:
        """Daily totals, trend and goal progress for the loaded meals."""
        computed = daily_macro_totals(self.meals, self.tz)
        merged = merge_daily_totals(self.stored_totals, computed)
        selected = date_key(self.reference)
        selected_totals = merged.get(selected)
        return MealOverview(
            window=self.window,
            selected_day=selected,
            meals=sorted(self.meals, key=lambda meal: meal.eaten_at),
            daily_totals=merged,
            trend=macro_trend(self.stored_totals, computed),
            weekly_total=weekly_macro_total(merged, self.window),
            selected_totals=selected_totals,
            goal_progress=goal_progress(selected_totals, preferences),
        )
