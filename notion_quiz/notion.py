"""Read quiz candidates from a Notion database and write quizzes back."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

import httpx

from notion_quiz.errors import ConfigError, NotionError
from notion_quiz.models import QuizCandidate, RenderedQuiz

log = logging.getLogger("notion_quiz.notion")

NOTION_BASE_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
# Notion rejects rich-text segments longer than this.
RICH_TEXT_LIMIT = 2000

FILTER_MODES = ("review_stage", "due")


@dataclass
class NotionProperties:
    name: str = "Name"
    review_stage: str = "Review Stage"
    last_quiz: str = "Last Quiz"
    due: str = "Due"
    question: str = "❓ Question"
    answer_key: str = "🔑 Answer Key"
    my_answer: str = "✏️ My Answer"

    @classmethod
    def from_settings(cls, settings) -> NotionProperties:
        return cls(
            name=settings.prop_name,
            review_stage=settings.prop_review_stage,
            last_quiz=settings.prop_last_quiz,
            due=settings.prop_due,
            question=settings.prop_question,
            answer_key=settings.prop_answer_key,
            my_answer=settings.prop_my_answer,
        )


def build_filter(mode: str, props: NotionProperties) -> dict:
    """Server-side filter selecting the entries that are up for review."""
    if mode == "review_stage":
        return {"and": [{"property": props.review_stage, "number": {"greater_than": 0}}]}
    if mode == "due":
        return {
            "or": [
                {"property": props.last_quiz, "date": {"is_empty": True}},
                {"property": props.due, "checkbox": {"equals": True}},
            ]
        }
    raise ConfigError(f"Unknown filter mode: {mode!r} (expected one of {', '.join(FILTER_MODES)})")


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def page_to_candidate(page: dict, props: NotionProperties) -> QuizCandidate | None:
    """Map a Notion page to a candidate; None if it has no title text."""
    properties = page.get("properties") or {}
    title = (properties.get(props.name) or {}).get("title") or []
    word = title[0].get("plain_text", "").strip() if title else ""
    if not word:
        return None
    last_quiz = (properties.get(props.last_quiz) or {}).get("date") or {}
    return QuizCandidate(id=page["id"], word=word, last_quiz_date=_parse_date(last_quiz.get("start")))


def filter_quizzed_today(candidates: list[QuizCandidate], today: date) -> list[QuizCandidate]:
    return [c for c in candidates if c.last_quiz_date != today]


def _rich_text(content: str) -> list[dict]:
    return [{"text": {"content": content[:RICH_TEXT_LIMIT]}}]


def build_update_properties(rendered: RenderedQuiz, props: NotionProperties, today: date | None = None) -> dict:
    """Page properties for a generated quiz.

    The previous answer is cleared.  With *today* set, the entry is also
    stamped as quizzed and its due flag reset.
    """
    properties = {
        props.question: {"rich_text": _rich_text(rendered.text)},
        props.answer_key: {"rich_text": _rich_text(rendered.correct_label)},
        props.my_answer: {"rich_text": []},
    }
    if today is not None:
        properties[props.last_quiz] = {"date": {"start": today.isoformat()}}
        properties[props.due] = {"checkbox": False}
    return properties


class NotionClient:
    def __init__(
        self,
        token: str,
        database_id: str,
        props: NotionProperties | None = None,
        base_url: str = NOTION_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.database_id = database_id
        self.props = props or NotionProperties()
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> NotionClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _check(resp: httpx.Response, action: str) -> dict:
        if resp.is_success:
            return resp.json()
        try:
            detail = resp.json().get("message", resp.text)
        except ValueError:
            detail = resp.text
        raise NotionError(f"{action} failed ({resp.status_code}): {detail}", status_code=resp.status_code)

    async def query_candidates(self, filter: dict, page_size: int = 5) -> list[QuizCandidate]:
        resp = await self._client.post(
            f"{self.base_url}/databases/{self.database_id}/query",
            json={"page_size": page_size, "filter": filter},
        )
        data = self._check(resp, "Database query")
        candidates = []
        for page in data.get("results", []):
            candidate = page_to_candidate(page, self.props)
            if candidate is None:
                log.debug("Skipping page %s: no title text", page.get("id"))
                continue
            candidates.append(candidate)
        return candidates

    async def write_quiz(self, page_id: str, rendered: RenderedQuiz, today: date | None = None) -> None:
        resp = await self._client.patch(
            f"{self.base_url}/pages/{page_id}",
            json={"properties": build_update_properties(rendered, self.props, today)},
        )
        self._check(resp, f"Page update {page_id}")
