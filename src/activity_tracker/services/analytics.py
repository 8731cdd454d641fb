"""Derived weekly, streak and trend statistics.

Every function here is pure: inputs are never mutated and "today" is always
passed in by the caller so results are deterministic.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, timedelta, tzinfo

from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.meals import MealRecord
from activity_tracker.domain.preferences import UserPreferences
from activity_tracker.domain.stats import (
    ActivityCount,
    ActivityStats,
    DailyTotals,
    SummarySnapshot,
    TrendPoint,
    WeeklyPoint,
    WeekWindow,
)
from activity_tracker.services.dates import (
    date_key,
    monday_of,
    parse_date_key,
    week_days,
    week_range_label,
)

STREAK_LOOKBACK_DAYS = 365


def completions_per_day(records: Iterable[CompletionRecord]) -> dict[str, int]:
    """Return the number of distinct activities completed on each day."""
    activities_by_day: dict[str, set[str]] = defaultdict(set)
    for record in records:
        activities_by_day[record.day].add(record.activity_id)
    return {day: len(ids) for day, ids in sorted(activities_by_day.items())}


def completions_in_window(
    records: Iterable[CompletionRecord], window: WeekWindow, until: date | None = None
) -> list[CompletionRecord]:
    """Return records whose day falls inside the window (and on/before ``until``)."""
    start = window.start.date()
    end = window.end.date()
    if until is not None:
        end = min(end, until)
    return [
        record for record in records if start <= parse_date_key(record.day) <= end
    ]


def active_days(records: Iterable[CompletionRecord]) -> int:
    """Return the number of distinct days with at least one completion."""
    return len({record.day for record in records})


def weekly_trend(records: Iterable[CompletionRecord]) -> list[WeeklyPoint]:
    """Group completions by the Monday of their week.

    Weeks without completions are absent from the series rather than zero.
    """
    counts: Counter[str] = Counter()
    for record in set(records):
        counts[date_key(monday_of(parse_date_key(record.day)))] += 1
    return [
        WeeklyPoint(week_start=week, count=count)
        for week, count in sorted(counts.items())
    ]


def current_streak(records: Iterable[CompletionRecord], today: date) -> int:
    """Count consecutive days with completions, walking back from today.

    A run that does not include today does not count.
    """
    days = {record.day for record in records}
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if date_key(today - timedelta(days=offset)) not in days:
            break
        streak += 1
    return streak


def average_per_day(
    records: Iterable[CompletionRecord], window: WeekWindow, today: date
) -> float:
    """Average completions over the window's days elapsed up to today."""
    start = window.start.date()
    last = min(today, window.end.date())
    if last < start:
        return 0.0
    elapsed_days = (last - start).days + 1
    total = len(set(completions_in_window(records, window, until=last)))
    return total / elapsed_days


def average_per_week(trend: list[WeeklyPoint]) -> float:
    """Average completions over the weeks present in the trend series."""
    if not trend:
        return 0.0
    return sum(point.count for point in trend) / len(trend)


def change_from_previous_week(trend: list[WeeklyPoint]) -> int | None:
    """Difference between the two most recent non-empty weeks.

    Returns None when there are fewer than two weeks to compare.
    """
    if len(trend) < 2:  # noqa: PLR2004
        return None
    return trend[-1].count - trend[-2].count


def per_activity_counts(
    records: Iterable[CompletionRecord], activities: Iterable[ActivityDefinition]
) -> list[ActivityCount]:
    """Return completion counts per activity in the user's order."""
    counts = Counter(record.activity_id for record in set(records))
    ordered = sorted(activities, key=lambda activity: activity.order_index)
    return [
        ActivityCount(label=activity.label, count=counts.get(activity.id, 0))
        for activity in ordered
    ]


def build_activity_stats(
    records: list[CompletionRecord], window: WeekWindow, today: date
) -> ActivityStats:
    """Compute every statistic shown next to the weekly grid."""
    in_window = completions_in_window(records, window)
    trend = weekly_trend(records)
    return ActivityStats(
        total=len(set(in_window)),
        active_days=active_days(in_window),
        streak=current_streak(records, today),
        average_per_day=average_per_day(records, window, today),
        average_per_week=average_per_week(trend),
        change_from_previous_week=change_from_previous_week(trend),
        weekly_trend=trend,
        per_day=completions_per_day(in_window),
    )


def build_snapshot(
    records: list[CompletionRecord],
    activities: list[ActivityDefinition],
    window: WeekWindow,
    today: date,
) -> SummarySnapshot:
    """Collect the numbers the weekly summary is written from."""
    stats = build_activity_stats(records, window, today)
    return SummarySnapshot(
        total=stats.total,
        active_days=stats.active_days,
        streak=stats.streak,
        average_per_week=stats.average_per_week,
        week_range_label=week_range_label(window),
        per_activity=per_activity_counts(
            completions_in_window(records, window), activities
        ),
    )


def fallback_summary(snapshot: SummarySnapshot) -> str:
    """Write a summary from the locally computed numbers only."""
    sentences = [
        f"This week ({snapshot.week_range_label}) you completed "
        f"{snapshot.total} {_plural(snapshot.total, 'activity', 'activities')} "
        f"across {snapshot.active_days} "
        f"{_plural(snapshot.active_days, 'day', 'days')}."
    ]
    top = max(snapshot.per_activity, key=lambda item: item.count, default=None)
    if top is not None and top.count > 0:
        sentences.append(
            f"{top.label} led the way with {top.count} "
            f"{_plural(top.count, 'completion', 'completions')}."
        )
    if snapshot.streak > 0:
        sentences.append(f"You're on a {snapshot.streak}-day streak, keep it going!")
    else:
        sentences.append("Complete an activity today to start a new streak.")
    sentences.append(
        f"On average you log {snapshot.average_per_week:.1f} activities "
        "in an active week."
    )
    return " ".join(sentences)


def daily_macro_totals(
    meals: Iterable[MealRecord], tz: tzinfo | None = None
) -> dict[str, DailyTotals]:
    """Sum meal macros per local calendar day."""
    grouped: dict[str, list[MealRecord]] = defaultdict(list)
    for meal in meals:
        grouped[date_key(meal.eaten_at, tz)].append(meal)
    return {
        day: DailyTotals(
            day=day,
            calories=sum(meal.calories for meal in day_meals),
            protein_g=sum(meal.protein_g for meal in day_meals),
            carbs_g=sum(meal.carbs_g for meal in day_meals),
            fats_g=sum(meal.fats_g for meal in day_meals),
        )
        for day, day_meals in sorted(grouped.items())
    }


def merge_daily_totals(
    stored: Iterable[DailyTotals], computed: Mapping[str, DailyTotals]
) -> dict[str, DailyTotals]:
    """Merge stored aggregates with fresh ones; fresh totals win per day."""
    merged = {totals.day: totals for totals in stored}
    merged.update(computed)
    return dict(sorted(merged.items()))


def macro_trend(
    stored: Iterable[DailyTotals], computed: Mapping[str, DailyTotals]
) -> list[TrendPoint]:
    """Return one trend point per day with data, ascending."""
    return [
        TrendPoint(
            day=totals.day,
            calories=totals.calories,
            protein_g=totals.protein_g,
            carbs_g=totals.carbs_g,
            fats_g=totals.fats_g,
        )
        for totals in merge_daily_totals(stored, computed).values()
    ]


def weekly_macro_total(
    totals_by_day: Mapping[str, DailyTotals], window: WeekWindow
) -> DailyTotals:
    """Sum merged daily totals over the seven days of a week."""
    week = [
        totals_by_day[key]
        for key in (date_key(day) for day in week_days(window))
        if key in totals_by_day
    ]
    return DailyTotals(
        day=date_key(window.start),
        calories=sum(entry.calories for entry in week),
        protein_g=sum(entry.protein_g for entry in week),
        carbs_g=sum(entry.carbs_g for entry in week),
        fats_g=sum(entry.fats_g for entry in week),
    )


def goal_progress(
    totals: DailyTotals | None, preferences: UserPreferences | None
) -> dict[str, float | None]:
    """Percent of each daily goal reached; None where no goal is set."""
    goals = {
        "calories": preferences.daily_calories_goal if preferences else None,
        "protein": preferences.daily_protein_goal if preferences else None,
        "carbs": preferences.daily_carbs_goal if preferences else None,
        "fats": preferences.daily_fats_goal if preferences else None,
    }
    values = {
        "calories": totals.calories if totals else 0,
        "protein": totals.protein_g if totals else 0,
        "carbs": totals.carbs_g if totals else 0,
        "fats": totals.fats_g if totals else 0,
    }
    return {
        name: (values[name] / goal * 100 if goal else None)
        for name, goal in goals.items()
    }


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural
