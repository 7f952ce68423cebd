from __future__ import annotations

import logging
import time

import httpx

from notion_quiz.errors import GenerationError
from notion_quiz.providers.base import LLMProvider

log = logging.getLogger("notion_quiz.llm")


class OllamaProvider(LLMProvider):
    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        log.debug("── PROMPT (%s) ──\n%s", self.model, prompt)
        body: dict = {
            "model": self.model,
            "prompt": prompt,
            "options": {"temperature": temperature},
            "stream": False,
            "think": False,
        }
        if json_mode:
            body["format"] = "json"

        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(f"{self.base_url}/api/generate", json=body)
            resp.raise_for_status()
            data = resp.json()
        elapsed = time.monotonic() - t0
        response = data.get("response")
        if not response:
            raise GenerationError(f"Ollama returned no text for model {self.model}")
        log.debug("── RESPONSE (%.1fs, %s tokens) ──\n%s", elapsed, data.get("eval_count", "?"), response)
        return response

    def name(self) -> str:
        return f"ollama/{self.model}"
