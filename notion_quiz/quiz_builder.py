"""Shuffle candidates and answer options, and render the final question text."""
from __future__ import annotations

import random
from typing import TypeVar

from notion_quiz.models import OPTION_LABELS, QuizRecord, RenderedQuiz

T = TypeVar("T")


def shuffle_candidates(items: list[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of *items*."""
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


def render_quiz(record: QuizRecord, rng: random.Random | None = None) -> RenderedQuiz:
    """Shuffle the correct answer in among the distractors and label A-D.

    The correct option is tracked by flag, not by text, so a distractor that
    repeats the answer still leaves exactly one correct label.
    """
    options = [(record.correct_answer, True)] + [(d, False) for d in record.distractors]
    if len(options) != len(OPTION_LABELS):
        raise ValueError(f"expected {len(OPTION_LABELS) - 1} distractors, got {len(record.distractors)}")
    (rng or random).shuffle(options)

    lines = []
    labelled = []
    correct_label = ""
    for label, (text, is_correct) in zip(OPTION_LABELS, options):
        lines.append(f"{label}. {text}")
        labelled.append((label, text))
        if is_correct:
            correct_label = label

    text = record.question + "\n\n" + "\n".join(lines) + "\n"
    return RenderedQuiz(text=text, correct_label=correct_label, options=labelled)
