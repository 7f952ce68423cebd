"""Shared test fixtures."""
from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from notion_quiz.config import Settings
from notion_quiz.notion import NotionClient

TODAY = date(2026, 10, 16)


class FakeLLM:
    """Fake LLM returning canned responses in order (the last one repeats)."""

    def __init__(self, responses=None, error: Exception | None = None):
        self._responses = responses or []
        self._error = error
        self.prompts: list[str] = []
        self.json_modes: list[bool] = []
        self.prepared = False

    async def prepare(self) -> None:
        self.prepared = True

    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        self.json_modes.append(json_mode)
        if self._error is not None:
            raise self._error
        idx = min(len(self.prompts) - 1, len(self._responses) - 1)
        return self._responses[idx]

    def name(self) -> str:
        return "fake-llm"

    @property
    def call_count(self):
        return len(self.prompts)


class FakeNotion:
    """Records requests made through an httpx.MockTransport."""

    def __init__(self, pages=None, query_status: int = 200, patch_status: int = 200):
        self.pages = pages or []
        self.query_status = query_status
        self.patch_status = patch_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.query_status != 200:
                return httpx.Response(self.query_status, json={"message": "query rejected"})
            return httpx.Response(200, json={"object": "list", "results": self.pages})
        if self.patch_status != 200:
            return httpx.Response(self.patch_status, json={"message": "validation_error"})
        return httpx.Response(200, json={"object": "page"})

    def client(self, **kwargs) -> NotionClient:
        return NotionClient(
            token="secret-token",
            database_id="db123",
            transport=httpx.MockTransport(self.handler),
            **kwargs,
        )

    @property
    def queries(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    @property
    def patches(self) -> list[tuple[str, dict]]:
        return [
            (r.url.path.rsplit("/", 1)[-1], json.loads(r.content)["properties"])
            for r in self.requests if r.method == "PATCH"
        ]


def make_page(page_id: str, word: str | None, last_quiz: str | None = None) -> dict:
    properties: dict = {
        "Name": {"title": [{"plain_text": word}] if word is not None else []},
        "Last Quiz": {"date": {"start": last_quiz} if last_quiz else None},
    }
    return {"object": "page", "id": page_id, "properties": properties}


def quiz_json(correct: str, question: str = "Pick the word", distractors=None) -> str:
    return json.dumps({
        "question": question,
        "correct": correct,
        "distractors": distractors or ["sad", "angry", "tired"],
    })


@pytest.fixture
def settings():
    return Settings(
        notion_db_id="db123",
        notion_token="secret-token",
        gemini_api_key="gemini-key",
    )


@pytest.fixture
def sample_pages():
    return [
        make_page("page-1", "happy"),
        make_page("page-2", "brisk", last_quiz="2026-10-10"),
        make_page("page-3", "terse", last_quiz=TODAY.isoformat()),
    ]
