"""Tests for derived statistics."""

from datetime import UTC, date, datetime, timedelta

from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.meals import MealRecord
from activity_tracker.domain.preferences import UserPreferences
from activity_tracker.domain.stats import ActivityCount, DailyTotals, SummarySnapshot
from activity_tracker.services.analytics import (
    average_per_day,
    average_per_week,
    build_activity_stats,
    build_snapshot,
    change_from_previous_week,
    completions_per_day,
    current_streak,
    daily_macro_totals,
    fallback_summary,
    goal_progress,
    macro_trend,
    merge_daily_totals,
    weekly_macro_total,
    weekly_trend,
)
from activity_tracker.services.dates import week_window


def _record(day: str, activity_id: str = "run") -> CompletionRecord:
    return CompletionRecord(activity_id=activity_id, day=day)


def _totals(day: str, calories: float) -> DailyTotals:
    return DailyTotals(
        day=day, calories=calories, protein_g=0, carbs_g=0, fats_g=0
    )


def _meal(meal_id: str, eaten_at: datetime, calories: int) -> MealRecord:
    return MealRecord(
        id=meal_id,
        user_id="user-1",
        eaten_at=eaten_at,
        name="Meal",
        calories=calories,
        protein_g=10,
        carbs_g=20,
        fats_g=5,
    )


def test_streak_counts_back_from_today() -> None:
    records = [_record("2026-10-17"), _record("2026-10-18"), _record("2026-10-19")]
    assert current_streak(records, date(2026, 10, 19)) == 3


def test_streak_requires_today() -> None:
    records = [_record(f"2026-10-{day:02d}") for day in range(8, 19)]
    assert current_streak(records, date(2026, 10, 19)) == 0


def test_streak_stops_at_gap() -> None:
    records = [_record("2026-10-15"), _record("2026-10-18"), _record("2026-10-19")]
    assert current_streak(records, date(2026, 10, 19)) == 2


def test_completions_per_day_counts_distinct_activities() -> None:
    records = [
        _record("2026-10-12", "run"),
        _record("2026-10-12", "read"),
        _record("2026-10-12", "run"),
        _record("2026-10-13", "run"),
    ]
    assert completions_per_day(records) == {"2026-10-12": 2, "2026-10-13": 1}


def test_weekly_trend_skips_empty_weeks() -> None:
    records = [
        _record("2026-09-28", "run"),
        _record("2026-09-29", "run"),
        _record("2026-09-30", "run"),
        _record("2026-10-14", "run"),
    ]

    trend = weekly_trend(records)

    assert [(point.week_start, point.count) for point in trend] == [
        ("2026-09-28", 3),
        ("2026-10-12", 1),
    ]
    assert change_from_previous_week(trend) == -2
    assert average_per_week(trend) == 2.0


def test_change_from_previous_week_needs_two_points() -> None:
    assert change_from_previous_week([]) is None
    assert change_from_previous_week(weekly_trend([_record("2026-10-12")])) is None
    assert average_per_week([]) == 0.0


def test_average_per_day_uses_elapsed_days() -> None:
    window = week_window(date(2026, 10, 14))
    records = [
        _record("2026-10-12", "run"),
        _record("2026-10-13", "run"),
        _record("2026-10-13", "read"),
        _record("2026-10-16", "run"),
    ]

    assert average_per_day(records, window, date(2026, 10, 13)) == 1.5
    assert average_per_day(records, window, date(2026, 10, 25)) == 4 / 7
    assert average_per_day(records, window, date(2026, 10, 1)) == 0.0


def test_build_activity_stats_for_week() -> None:
    window = week_window(date(2026, 10, 14))
    records = [
        _record("2026-10-05", "run"),
        _record("2026-10-12", "run"),
        _record("2026-10-12", "read"),
        _record("2026-10-14", "run"),
    ]

    stats = build_activity_stats(records, window, date(2026, 10, 14))

    assert stats.total == 3
    assert stats.active_days == 2
    assert stats.streak == 1
    assert stats.per_day == {"2026-10-12": 2, "2026-10-14": 1}
    assert stats.change_from_previous_week == 2
    assert records[0] == _record("2026-10-05", "run")


def test_build_snapshot_orders_activities() -> None:
    window = week_window(date(2026, 10, 14))
    activities = [
        ActivityDefinition(id="read", label="Read", icon="book", order_index=1),
        ActivityDefinition(id="run", label="Run", icon="run", order_index=0),
    ]
    records = [_record("2026-10-12", "run"), _record("2026-10-13", "run")]

    snapshot = build_snapshot(records, activities, window, date(2026, 10, 13))

    assert snapshot.per_activity == [
        ActivityCount(label="Run", count=2),
        ActivityCount(label="Read", count=0),
    ]
    assert snapshot.week_range_label == "Oct 12 - Oct 18, 2026"
    assert snapshot.streak == 2


def test_fallback_summary_mentions_numbers() -> None:
    snapshot = SummarySnapshot(
        total=5,
        active_days=3,
        streak=0,
        average_per_week=4.0,
        week_range_label="Oct 12 - Oct 18, 2026",
        per_activity=[ActivityCount(label="Run", count=3)],
    )

    text = fallback_summary(snapshot)

    assert "This week (Oct 12 - Oct 18, 2026) you completed 5 activities" in text
    assert "across 3 days" in text
    assert "Run led the way with 3 completions." in text
    assert "start a new streak" in text
    assert "4.0" in text


def test_fallback_summary_singular_forms() -> None:
    snapshot = SummarySnapshot(
        total=1,
        active_days=1,
        streak=1,
        average_per_week=1.0,
        week_range_label="Oct 12 - Oct 18, 2026",
    )

    text = fallback_summary(snapshot)

    assert "1 activity across 1 day." in text
    assert "1-day streak" in text


def test_merge_prefers_fresh_totals() -> None:
    stored = [_totals("2026-10-13", 500), _totals("2026-10-12", 300)]
    computed = {"2026-10-13": _totals("2026-10-13", 650)}

    merged = merge_daily_totals(stored, computed)

    assert list(merged) == ["2026-10-12", "2026-10-13"]
    assert merged["2026-10-13"].calories == 650
    assert [point.calories for point in macro_trend(stored, computed)] == [300, 650]


def test_daily_macro_totals_groups_by_local_day() -> None:
    meals = [
        _meal("a", datetime(2026, 10, 12, 8, 0, tzinfo=UTC), 300),
        _meal("b", datetime(2026, 10, 12, 19, 0, tzinfo=UTC), 400),
        _meal("c", datetime(2026, 10, 13, 12, 0, tzinfo=UTC), 500),
    ]

    totals = daily_macro_totals(meals, UTC)

    assert totals["2026-10-12"].calories == 700
    assert totals["2026-10-12"].protein_g == 20
    assert totals["2026-10-13"].calories == 500


def test_weekly_macro_total_ignores_days_outside_window() -> None:
    window = week_window(date(2026, 10, 14))
    totals = {
        "2026-10-11": _totals("2026-10-11", 900),
        "2026-10-12": _totals("2026-10-12", 300),
        "2026-10-18": _totals("2026-10-18", 200),
    }

    weekly = weekly_macro_total(totals, window)

    assert weekly.day == "2026-10-12"
    assert weekly.calories == 500


def test_goal_progress() -> None:
    preferences = UserPreferences(
        user_id="user-1",
        daily_calories_goal=2000,
        daily_protein_goal=100,
        daily_carbs_goal=None,
        daily_fats_goal=0,
    )
    totals = DailyTotals(
        day="2026-10-12", calories=500, protein_g=150, carbs_g=10, fats_g=5
    )

    progress = goal_progress(totals, preferences)

    assert progress == {
        "calories": 25.0,
        "protein": 150.0,
        "carbs": None,
        "fats": None,
    }
    assert goal_progress(None, preferences)["calories"] == 0.0
    assert set(goal_progress(totals, None).values()) == {None}


def test_streak_lookback_is_bounded() -> None:
    today = date(2026, 10, 19)
    records = [_record(str(today - timedelta(days=offset))) for offset in range(400)]
    assert current_streak(records, today) == 365
