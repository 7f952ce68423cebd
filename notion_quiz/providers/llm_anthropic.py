from __future__ import annotations

import os

import anthropic

from notion_quiz.errors import GenerationError
from notion_quiz.providers.base import LLMProvider


class AnthropicProvider(LLMProvider):
    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout: float = 60.0,
        client=None,
    ):
        if client is None:
            client = anthropic.AsyncAnthropic(
                api_key=api_key or os.environ.get("ANTHROPIC_API_KEY", ""),
                timeout=timeout,
            )
        self.client = client
        self.model = model

    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        # No native JSON mode; the prompt already asks for raw JSON.
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=1024,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise GenerationError(f"Anthropic request failed for model {self.model}: {e}") from e
        texts = [block.text for block in message.content if getattr(block, "type", "text") == "text"]
        if not texts or not texts[0]:
            raise GenerationError(f"Anthropic returned no text for model {self.model}")
        return texts[0]

    def name(self) -> str:
        return f"anthropic/{self.model}"
