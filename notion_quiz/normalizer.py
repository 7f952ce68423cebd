"""Turn free-form model output into a canonical QuizRecord."""
from __future__ import annotations

import json
import logging
import re

from notion_quiz.models import QuizRecord

_log = logging.getLogger("notion_quiz.normalizer")

DISTRACTOR_COUNT = 3
PLACEHOLDER_DISTRACTOR = "Incorrect Option"

LONG_KEYS = ("question", "correct", "distractors")
SHORT_KEYS = ("q", "a", "w")

_SPLIT_RE = re.compile(r"[,\-\n]")


def extract_json_text(raw: str) -> str:
    """Return the span from the first ``{`` to the last ``}``.

    Anything around it (prose, markdown fences) is dropped.  Without a
    usable brace pair the whole string is returned unchanged.
    """
    start = raw.find("{")
    end = raw.rfind("}")
    if start >= 0 and end > start:
        return raw[start : end + 1]
    return raw


def _coerce_distractors(value) -> list[str]:
    if isinstance(value, str):
        parts = _SPLIT_RE.split(value)
    elif isinstance(value, list):
        parts = [p for p in value if p is not None and not isinstance(p, (dict, list))]
    else:
        return []
    return [str(p).strip() for p in parts if str(p).strip()]


def _text(value) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _decode(data: dict) -> tuple[str, str, list[str]]:
    """Read (question, correct, distractors) from either key schema.

    Long-form keys are tried first; a field that is missing from the long
    form, or coerces to nothing, falls back to its short-form twin.
    """
    values = []
    for long_key, short_key, coerce in zip(LONG_KEYS, SHORT_KEYS, (_text, _text, _coerce_distractors)):
        value = coerce(data.get(long_key))
        if not value:
            value = coerce(data.get(short_key))
        values.append(value)
    question, correct, distractors = values
    return question, correct, distractors


def pad_distractors(distractors: list[str]) -> list[str]:
    padded = list(distractors[:DISTRACTOR_COUNT])
    while len(padded) < DISTRACTOR_COUNT:
        padded.append(PLACEHOLDER_DISTRACTOR)
    return padded


def normalize_quiz(raw: str, word: str) -> QuizRecord | None:
    """Parse model output into a QuizRecord, or None when it holds no JSON object.

    Missing question/answer fields are defaulted from *word* and the
    distractor list is padded or truncated to exactly three entries.
    """
    candidate = extract_json_text(raw or "")
    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError):
        # JSONDecodeError, oversized integer literals, runaway nesting
        _log.warning("  JSON parse error for '%s'. Raw output: %.300s", word, raw)
        return None
    if not isinstance(data, dict):
        _log.warning("  Expected a JSON object for '%s', got %s", word, type(data).__name__)
        return None

    question, correct, distractors = _decode(data)
    if len(distractors) < DISTRACTOR_COUNT:
        _log.info("  Model returned %d distractor(s) for '%s'. Auto-filling.", len(distractors), word)

    return QuizRecord(
        question=question or f"Quiz for {word}",
        correct_answer=correct or word,
        distractors=pad_distractors(distractors),
    )
