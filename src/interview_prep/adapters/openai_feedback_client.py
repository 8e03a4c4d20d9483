"""OpenAI Responses API client for answer feedback."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from interview_prep.services.feedback import FeedbackClient


@dataclass
class OpenAIFeedbackClient(FeedbackClient):
    """Feedback client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIFeedbackClient":
        """Create an OpenAI feedback client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(
        self,
        *,
        model: str,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {"role": "user", "content": [{"type": "input_text", "text": prompt}]}
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "answer_feedback",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        await self.client.close()
