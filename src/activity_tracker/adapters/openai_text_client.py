"""OpenAI Responses API client for text generation."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI, OpenAIError

from activity_tracker.domain.errors import AIResponseError, AIUnavailableError
from activity_tracker.services.summary import TextGenerationClient


@dataclass
class OpenAITextClient(TextGenerationClient):
    """Text generation backed by the OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAITextClient":
        """Create a client whose requests are bounded by a wall-clock timeout."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, http_client=http_client, max_retries=1
            )
        )

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        """Call the Responses API, with structured output when a schema is given."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "store": store,
        }
        if schema is not None:
            request_payload["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "macro_estimate",
                    "strict": True,
                    "schema": schema,
                }
            }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise AIUnavailableError(str(exc)) from exc
        output_text = response.output_text
        if not output_text:
            raise AIResponseError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
