"""Weekly summaries and macro estimates backed by a text-generation model."""

import json
import logging
import math
import re
from dataclasses import asdict, dataclass
from typing import Protocol

from activity_tracker.domain.errors import (
    AINotConfiguredError,
    AIResponseError,
    ValidationError,
)
from activity_tracker.domain.estimates import MacroEstimate
from activity_tracker.domain.stats import SummarySnapshot
from activity_tracker.services.analytics import fallback_summary

_logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

MACRO_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "integer", "minimum": 0},
        "protein": {"type": "integer", "minimum": 0},
        "carbs": {"type": "integer", "minimum": 0},
        "fats": {"type": "integer", "minimum": 0},
    },
    "required": ["calories", "protein", "carbs", "fats"],
    "additionalProperties": False,
}


class TextGenerationClient(Protocol):
    """Interface for LLM text generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        """Return the model's text output."""


@dataclass
class SummaryService:
    """Writes weekly summaries and estimates meal macros."""

    client: TextGenerationClient | None
    model: str
    reasoning_effort: str | None
    store: bool

    async def summarize(self, snapshot: SummarySnapshot) -> str:
        """Return a motivational weekly summary.

        Any AI failure is logged and replaced by a summary built from the
        snapshot's own numbers.
        """
        prompt = (
            "You are an upbeat habit coach. In at most three sentences, "
            "summarize this week of activity for the user and encourage them. "
            "Only use the numbers given.\n"
            f"{json.dumps(asdict(snapshot))}"
        )
        try:
            text = (await self._generate(prompt)).strip()
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Weekly summary unavailable, using fallback: %s", exc)
            return fallback_summary(snapshot)
        if not text:
            _logger.warning("Weekly summary was empty, using fallback")
            return fallback_summary(snapshot)
        return text

    async def estimate_macros(self, description: str) -> MacroEstimate:
        """Estimate calories and macros for a free-text meal description."""
        cleaned = description.strip()
        if not cleaned:
            raise ValidationError("description", "must not be empty")
        prompt = (
            "You estimate nutrition facts. Return JSON like "
            '{"calories":120, "protein":8, "carbs":15, "fats":4} with whole '
            "numbers. If data is missing, best-guess typical values. "
            f"Description: {cleaned}"
        )
        raw = await self._generate(prompt, schema=MACRO_SCHEMA)
        return parse_macro_estimate(raw)

    async def _generate(
        self, prompt: str, schema: dict[str, object] | None = None
    ) -> str:
        if self.client is None:
            raise AINotConfiguredError("No OpenAI API key configured")
        return await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            schema=schema,
        )


def parse_macro_estimate(raw: str) -> MacroEstimate:
    """Extract a macro estimate from a model reply.

    Fields that are missing, non-numeric, negative or non-finite become 0.
    """
    match = _JSON_OBJECT.search(raw or "")
    if not match:
        raise AIResponseError("Unable to parse AI response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AIResponseError("Unable to parse AI response") from exc
    if not isinstance(parsed, dict):
        raise AIResponseError("Unable to parse AI response")
    return MacroEstimate(
        calories=_sanitize(parsed.get("calories")),
        protein=_sanitize(parsed.get("protein")),
        carbs=_sanitize(parsed.get("carbs")),
        fats=_sanitize(parsed.get("fats")),
    )


def _sanitize(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    try:
        if not math.isfinite(value) or value < 0:
            return 0
        return math.floor(value + 0.5)
    except OverflowError:
        return 0
