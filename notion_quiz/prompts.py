"""Prompt templates for quiz generation."""
from __future__ import annotations

import random

from notion_quiz.models import QUIZ_STYLES, QuizPrompt

TASK_LINE = 'Task: Create a Multiple Choice Quiz for the English word: "{word}". Type: {style}.'

SENTENCE_PROMPT = """\
Create a sentence where "{word}" fits perfectly, replacing it with "______".
JSON Output: {{
  "question": "The sentence...",
  "correct": "{word}",
  "distractors": ["word1", "word2", "word3"]
}}
(Distractors must be the same part of speech, plausible but wrong.)"""

DEFINITION_PROMPT = """\
Provide an English definition for "{word}".
JSON Output: {{
  "question": "Definition: ...",
  "correct": "{word}",
  "distractors": ["word1", "word2", "word3"]
}}"""

THESAURUS_PROMPT = """\
Provide synonyms for "{word}".
JSON Output: {{
  "question": "Which word means: [synonyms]?",
  "correct": "{word}",
  "distractors": ["word1", "word2", "word3"]
}}"""

OUTPUT_RULES = """\
IMPORTANT: Output RAW JSON only. Do not wrap in markdown blocks.
Ensure "distractors" is an array of 3 strings."""

PROMPTS = {
    "sentence": SENTENCE_PROMPT,
    "definition": DEFINITION_PROMPT,
    "thesaurus": THESAURUS_PROMPT,
}


def pick_style(rng: random.Random | None = None) -> str:
    return (rng or random).choice(QUIZ_STYLES)


def build_prompt(word: str, style: str) -> QuizPrompt:
    if style not in PROMPTS:
        raise ValueError(f"Unknown quiz style: {style!r} (expected one of {', '.join(QUIZ_STYLES)})")
    text = "\n".join([
        TASK_LINE.format(word=word, style=style),
        PROMPTS[style].format(word=word),
        OUTPUT_RULES,
    ])
    return QuizPrompt(word=word, style=style, text=text)
