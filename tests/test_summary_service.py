"""Tests for AI summaries and macro estimates."""

import asyncio

import pytest

from activity_tracker.domain.errors import (
    AINotConfiguredError,
    AIResponseError,
    AIUnavailableError,
    ValidationError,
)
from activity_tracker.domain.stats import ActivityCount, SummarySnapshot
from activity_tracker.services.summary import (
    MACRO_SCHEMA,
    SummaryService,
    parse_macro_estimate,
)
from tests.conftest import FakeTextClient

SNAPSHOT = SummarySnapshot(
    total=6,
    active_days=4,
    streak=2,
    average_per_week=5.5,
    week_range_label="Oct 12 - Oct 18, 2026",
    per_activity=[ActivityCount(label="Run", count=4)],
)


def _service(client: FakeTextClient | None) -> SummaryService:
    return SummaryService(
        client=client, model="gpt-5.2", reasoning_effort="low", store=False
    )


def test_summary_uses_model_output() -> None:
    client = FakeTextClient(reply="  Strong week, keep moving!  ")

    summary = asyncio.run(_service(client).summarize(SNAPSHOT))

    assert summary == "Strong week, keep moving!"
    assert '"total": 6' in client.prompts[0]


def test_summary_falls_back_when_ai_fails() -> None:
    client = FakeTextClient(error=AIUnavailableError("timeout"))

    summary = asyncio.run(_service(client).summarize(SNAPSHOT))

    assert "you completed 6 activities" in summary
    assert "2-day streak" in summary


def test_summary_falls_back_on_empty_reply() -> None:
    summary = asyncio.run(_service(FakeTextClient(reply="   ")).summarize(SNAPSHOT))
    assert summary.startswith("This week (Oct 12 - Oct 18, 2026)")


def test_summary_falls_back_without_api_key() -> None:
    summary = asyncio.run(_service(None).summarize(SNAPSHOT))
    assert "Run led the way with 4 completions." in summary


def test_estimate_macros_parses_reply() -> None:
    client = FakeTextClient(
        reply='Here you go: {"calories": 412.6, "protein": 20, "carbs": 50, '
        '"fats": 12}'
    )

    estimate = asyncio.run(_service(client).estimate_macros("Chicken wrap"))

    assert estimate.calories == 413
    assert estimate.protein == 20
    assert "Chicken wrap" in client.prompts[0]


def test_estimate_macros_requires_description() -> None:
    with pytest.raises(ValidationError):
        asyncio.run(_service(FakeTextClient()).estimate_macros("   "))


def test_estimate_macros_requires_api_key() -> None:
    with pytest.raises(AINotConfiguredError):
        asyncio.run(_service(None).estimate_macros("Toast"))


def test_estimate_macros_propagates_ai_errors() -> None:
    client = FakeTextClient(error=AIUnavailableError("quota"))
    with pytest.raises(AIUnavailableError):
        asyncio.run(_service(client).estimate_macros("Toast"))


def test_parse_macro_estimate_sanitizes_fields() -> None:
    estimate = parse_macro_estimate(
        '{"calories": -10, "protein": "lots", "carbs": true, "fats": 2.5}'
    )

    assert estimate.model_dump() == {
        "calories": 0,
        "protein": 0,
        "carbs": 0,
        "fats": 3,
    }


@pytest.mark.parametrize("raw", ["", "no json here", "{not json}", "[1, 2]"])
def test_parse_macro_estimate_rejects_unparseable(raw: str) -> None:
    with pytest.raises(AIResponseError, match="Unable to parse AI response"):
        parse_macro_estimate(raw)


def test_macro_schema_requires_every_field() -> None:
    assert MACRO_SCHEMA["required"] == ["calories", "protein", "carbs", "fats"]


def test_parse_macro_estimate_zeroes_oversized_integers() -> None:
    huge = "1" + "0" * 400

    estimate = parse_macro_estimate(
        f'{{"calories": {huge}, "protein": 5, "carbs": 6, "fats": 7}}'
    )

    assert estimate.calories == 0
    assert estimate.protein == 5
