"""Drive one quiz run: query Notion, generate a quiz per word, write it back."""
from __future__ import annotations

import logging
import random
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

import httpx

from notion_quiz.errors import GenerationError, NotionError
from notion_quiz.models import QuizCandidate, QuizRecord, RenderedQuiz, RunSummary
from notion_quiz.normalizer import normalize_quiz
from notion_quiz.notion import build_filter, filter_quizzed_today
from notion_quiz.prompts import build_prompt, pick_style
from notion_quiz.quiz_builder import render_quiz, shuffle_candidates

if TYPE_CHECKING:
    from notion_quiz.config import Settings
    from notion_quiz.notion import NotionClient
    from notion_quiz.providers.base import LLMProvider

_log = logging.getLogger("notion_quiz.pipeline")

# Per-candidate outcomes
WRITTEN = "written"
SKIPPED = "skipped"
FAILED = "failed"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


async def generate_quiz(
    llm: LLMProvider,
    word: str,
    style: str | None = None,
    rng: random.Random | None = None,
    temperature: float = 0.7,
    json_mode: bool = False,
) -> tuple[QuizRecord, RenderedQuiz] | None:
    """Prompt the model for one word. Returns None when the output has no usable JSON."""
    style = style or pick_style(rng)
    prompt = build_prompt(word, style)
    _log.info("   - Generating [%s] for: \"%s\"", style, word)
    raw = await llm.generate(prompt.text, temperature=temperature, json_mode=json_mode)
    record = normalize_quiz(raw, word)
    if record is None:
        return None
    return record, render_quiz(record, rng)


async def quiz_candidate(
    candidate: QuizCandidate,
    settings: Settings,
    notion: NotionClient,
    llm: LLMProvider,
    rng: random.Random | None = None,
    today: date | None = None,
    dry_run: bool = False,
) -> str:
    """Generate and write the quiz for one candidate. Errors stay contained here."""
    try:
        result = await generate_quiz(
            llm, candidate.word, rng=rng,
            temperature=settings.temperature, json_mode=settings.json_mode,
        )
    except (httpx.HTTPError, GenerationError) as e:
        _log.warning("   ⚠️ Generation failed for '%s': %s", candidate.word, e)
        return FAILED
    if result is None:
        return SKIPPED

    _, rendered = result
    if dry_run:
        _log.info("   (dry run) %s → %s\n%s", candidate.word, rendered.correct_label, rendered.text)
        return WRITTEN

    stamp = (today or utc_today()) if settings.update_schedule else None
    try:
        await notion.write_quiz(candidate.id, rendered, today=stamp)
    except (httpx.HTTPError, NotionError) as e:
        _log.error("   ❌ Could not write quiz for '%s': %s", candidate.word, e)
        return FAILED
    _log.info("   ✅ Generated MCQ for %s (Ans: %s)", candidate.word, rendered.correct_label)
    return WRITTEN


async def run_quiz(
    settings: Settings,
    notion: NotionClient,
    llm: LLMProvider,
    rng: random.Random | None = None,
    today: date | None = None,
    dry_run: bool = False,
    limit: int | None = None,
) -> RunSummary:
    """Quiz every eligible candidate once, in random order.

    Source-query failures and model discovery errors propagate; anything that
    goes wrong for a single word is logged and counted instead.
    """
    today = today or utc_today()
    summary = RunSummary()

    await llm.prepare()
    query_filter = build_filter(settings.filter_mode, notion.props)
    candidates = await notion.query_candidates(query_filter, page_size=settings.page_size)
    summary.found = len(candidates)

    candidates = shuffle_candidates(filter_quizzed_today(candidates, today), rng)
    if limit is not None:
        candidates = candidates[:limit]
    summary.eligible = len(candidates)

    if not candidates:
        _log.info("✅ No words need quizzing today.")
        return summary

    _log.info("📝 Processing %d words with %s...", len(candidates), llm.name())
    for candidate in candidates:
        outcome = await quiz_candidate(candidate, settings, notion, llm, rng=rng, today=today, dry_run=dry_run)
        if outcome == WRITTEN:
            summary.written += 1
        elif outcome == SKIPPED:
            summary.skipped += 1
        else:
            summary.failed += 1

    _log.info("🎉 Done: %d written, %d skipped, %d failed", summary.written, summary.skipped, summary.failed)
    return summary
