from __future__ import annotations

import logging
import time

import httpx

from notion_quiz.errors import GenerationError, ModelDiscoveryError
from notion_quiz.providers.base import LLMProvider

log = logging.getLogger("notion_quiz.llm")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
AUTO_MODEL = "auto"
MODEL_PREFERENCES = ("flash", "pro")


def choose_model(names: list[str]) -> str | None:
    """Prefer a "flash" model, then a "pro" model, then whatever comes first."""
    if not names:
        return None
    for marker in MODEL_PREFERENCES:
        for name in names:
            if marker in name:
                return name
    return names[0]


def extract_text(data: dict) -> str:
    """Text of the first part of the first candidate, or "" if there is none."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        return ""
    return parts[0].get("text") or ""


class GeminiProvider(LLMProvider):
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"x-goog-api-key": self.api_key},
        )

    async def list_models(self) -> list[str]:
        """Names of the models that support generateContent, without the "models/" prefix."""
        async with self._client() as client:
            resp = await client.get(f"{self.base_url}/models", params={"pageSize": 1000})
            resp.raise_for_status()
            data = resp.json()
        names = []
        for m in data.get("models", []):
            if "generateContent" not in m.get("supportedGenerationMethods", []):
                continue
            names.append(m.get("name", "").removeprefix("models/"))
        return [n for n in names if n]

    async def discover_model(self) -> str:
        names = await self.list_models()
        chosen = choose_model(names)
        if chosen is None:
            raise ModelDiscoveryError("No Gemini model supporting generateContent is available for this key")
        log.info("Auto-selected model %s (from %d available)", chosen, len(names))
        return chosen

    async def prepare(self) -> None:
        if self.model == AUTO_MODEL:
            try:
                self.model = await self.discover_model()
            except httpx.HTTPError as e:
                raise ModelDiscoveryError(f"Could not list Gemini models: {e}") from e

    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        await self.prepare()
        log.debug("── PROMPT (%s) ──\n%s", self.model, prompt)
        generation_config: dict = {"temperature": temperature}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        t0 = time.monotonic()
        async with self._client() as client:
            resp = await client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": generation_config,
                },
            )
            resp.raise_for_status()
            data = resp.json()
        elapsed = time.monotonic() - t0

        text = extract_text(data)
        if not text:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise GenerationError(f"Gemini returned no text ({reason})")
        log.debug("── RESPONSE (%.1fs) ──\n%s", elapsed, text)
        return text

    def name(self) -> str:
        return f"gemini/{self.model}"
