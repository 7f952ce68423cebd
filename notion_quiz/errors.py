"""Exception types shared across the quiz pipeline."""
from __future__ import annotations


class QuizError(Exception):
    """Base class for notion-quiz errors."""


class ConfigError(QuizError):
    """Required configuration is missing or invalid. Fatal for the run."""


class ModelDiscoveryError(QuizError):
    """No generation model could be selected. Fatal for the run."""


class GenerationError(QuizError):
    """The model answered, but without usable text."""


class NotionError(QuizError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
