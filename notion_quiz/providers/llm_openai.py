from __future__ import annotations

import os

import openai

from notion_quiz.errors import GenerationError
from notion_quiz.providers.base import LLMProvider


class OpenAIProvider(LLMProvider):
    def __init__(self, model: str = "gpt-4o-mini", api_key: str | None = None, timeout: float = 60.0, client=None):
        if client is None:
            client = openai.AsyncOpenAI(
                api_key=api_key or os.environ.get("OPENAI_API_KEY", ""),
                timeout=timeout,
            )
        self.client = client
        self.model = model

    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        kwargs: dict = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except openai.APIError as e:
            raise GenerationError(f"OpenAI request failed for model {self.model}: {e}") from e
        if not resp.choices or not resp.choices[0].message.content:
            raise GenerationError(f"OpenAI returned no text for model {self.model}")
        return resp.choices[0].message.content

    def name(self) -> str:
        return f"openai/{self.model}"
