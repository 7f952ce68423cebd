from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

QUIZ_STYLES = ("sentence", "definition", "thesaurus")
OPTION_LABELS = ("A", "B", "C", "D")


@dataclass(frozen=True)
class QuizCandidate:
    id: str
    word: str
    last_quiz_date: date | None = None


@dataclass
class QuizPrompt:
    word: str
    style: str  # sentence | definition | thesaurus
    text: str


@dataclass
class QuizRecord:
    question: str
    correct_answer: str
    distractors: list[str]

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "correct": self.correct_answer,
            "distractors": list(self.distractors),
        }


@dataclass
class RenderedQuiz:
    text: str
    correct_label: str
    options: list[tuple[str, str]] = field(default_factory=list)  # (label, text)


@dataclass
class RunSummary:
    found: int = 0
    eligible: int = 0
    written: int = 0
    skipped: int = 0
    failed: int = 0
