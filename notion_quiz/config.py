from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path

from notion_quiz.errors import ConfigError

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "gemini",
    "llm_model": "",
    "json_mode": False,
    "temperature": 0.7,
    "page_size": 5,
    "filter_mode": "review_stage",
    "update_schedule": True,
    "ollama_url": "http://localhost:11434",
    "request_timeout": 60.0,
    "prop_name": "Name",
    "prop_review_stage": "Review Stage",
    "prop_last_quiz": "Last Quiz",
    "prop_due": "Due",
    "prop_question": "❓ Question",
    "prop_answer_key": "🔑 Answer Key",
    "prop_my_answer": "✏️ My Answer",
}

# Environment variables win over config.json.
ENV_VARS = {
    "notion_db_id": "NOTION_DB_ID",
    "notion_token": "NOTION_TOKEN",
    "gemini_api_key": "GEMINI_API_KEY",
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "llm_model": "NOTION_QUIZ_MODEL",
    "filter_mode": "NOTION_QUIZ_FILTER",
    "page_size": "NOTION_QUIZ_PAGE_SIZE",
}

SECRET_FIELDS = {"notion_token", "gemini_api_key", "openai_api_key", "anthropic_api_key"}

# Key each hosted backend needs; ollama needs none.
PROVIDER_KEYS = {
    "gemini": "gemini_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}

# Used when llm_model is empty. "auto" asks Gemini which models the key can use.
PROVIDER_MODELS = {
    "gemini": "gemini-1.5-flash",
    "ollama": "qwen3:8b",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-20250514",
}


@dataclass
class Settings:
    notion_db_id: str = ""
    notion_token: str = ""
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    json_mode: bool = DEFAULTS["json_mode"]
    temperature: float = DEFAULTS["temperature"]
    page_size: int = DEFAULTS["page_size"]
    filter_mode: str = DEFAULTS["filter_mode"]
    update_schedule: bool = DEFAULTS["update_schedule"]
    ollama_url: str = DEFAULTS["ollama_url"]
    request_timeout: float = DEFAULTS["request_timeout"]
    prop_name: str = DEFAULTS["prop_name"]
    prop_review_stage: str = DEFAULTS["prop_review_stage"]
    prop_last_quiz: str = DEFAULTS["prop_last_quiz"]
    prop_due: str = DEFAULTS["prop_due"]
    prop_question: str = DEFAULTS["prop_question"]
    prop_answer_key: str = DEFAULTS["prop_answer_key"]
    prop_my_answer: str = DEFAULTS["prop_my_answer"]

    @property
    def model(self) -> str:
        return self.llm_model or PROVIDER_MODELS.get(self.llm_provider, "")

    def missing_credentials(self, need_notion: bool = True) -> list[str]:
        """Names of the required environment variables that are unset."""
        missing = []
        if need_notion:
            if not self.notion_db_id:
                missing.append(ENV_VARS["notion_db_id"])
            if not self.notion_token:
                missing.append(ENV_VARS["notion_token"])
        key_field = PROVIDER_KEYS.get(self.llm_provider)
        if key_field and not getattr(self, key_field):
            missing.append(ENV_VARS[key_field])
        return missing

    def validate(self, need_notion: bool = True) -> None:
        missing = self.missing_credentials(need_notion)
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}")
        if self.page_size < 1 or self.page_size > 100:
            raise ConfigError(f"page_size must be between 1 and 100 (got {self.page_size})")

    def to_dict(self, redact: bool = True) -> dict:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        if redact:
            for name in SECRET_FIELDS:
                if d[name]:
                    d[name] = "***"
        return d


def _coerce(name: str, value: str):
    """Convert an environment string to the type of the matching default."""
    default = DEFAULTS.get(name)
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{ENV_VARS[name]} must be an integer (got {value!r})") from None
    return value.strip()


def load_settings(environ: dict | None = None) -> Settings:
    env = os.environ if environ is None else environ
    raw: dict = {}
    if CONFIG_PATH.exists():
        try:
            raw = json.loads(CONFIG_PATH.read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"{CONFIG_PATH.name} is not valid JSON: {e}") from e
    known = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in raw.items() if k in known}

    for name, var in ENV_VARS.items():
        value = env.get(var)
        if value:
            filtered[name] = _coerce(name, value)
    return Settings(**filtered)
