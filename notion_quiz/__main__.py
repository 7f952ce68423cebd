"""CLI entry point for notion-quiz.

Usage:
  python -m notion_quiz run [--dry-run] [--limit N] [--verbose]
  python -m notion_quiz models
  python -m notion_quiz preview WORD [--style sentence|definition|thesaurus]
"""
from __future__ import annotations

import asyncio
import logging
import sys

from notion_quiz.config import Settings, load_settings
from notion_quiz.errors import ConfigError, QuizError
from notion_quiz.models import QUIZ_STYLES

COMMANDS = ("run", "models", "preview")

log = logging.getLogger("notion_quiz")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args and not args[0].startswith("-") else "run"
    rest = args[1:] if args and args[0] == command else args

    logging.basicConfig(
        level=logging.DEBUG if "--verbose" in rest else logging.INFO,
        format="%(name)s | %(message)s",
    )
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Commands: {', '.join(COMMANDS)}")
        return 1

    try:
        settings = load_settings()
        if command == "run":
            return _run(settings, rest)
        if command == "models":
            return _models(settings)
        return _preview(settings, rest)
    except QuizError as e:
        log.error("❌ %s", e)
        return 1
    except Exception:
        log.exception("❌ Fatal error")
        return 1


def _parse_flag(args: list[str], name: str, default: str | None) -> str | None:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _get_llm(settings: Settings):
    provider = settings.llm_provider
    if provider == "gemini":
        from notion_quiz.providers.llm_gemini import GeminiProvider
        return GeminiProvider(api_key=settings.gemini_api_key, model=settings.model, timeout=settings.request_timeout)
    elif provider == "ollama":
        from notion_quiz.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=settings.ollama_url, model=settings.model, timeout=settings.request_timeout)
    elif provider == "openai":
        from notion_quiz.providers.llm_openai import OpenAIProvider
        return OpenAIProvider(model=settings.model, api_key=settings.openai_api_key, timeout=settings.request_timeout)
    elif provider == "anthropic":
        from notion_quiz.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider(model=settings.model, api_key=settings.anthropic_api_key, timeout=settings.request_timeout)
    raise ConfigError(f"Unknown LLM provider: {provider}")


def _run(settings: Settings, args: list[str]) -> int:
    from notion_quiz.notion import NotionClient, NotionProperties
    from notion_quiz.pipeline import run_quiz

    limit_arg = _parse_flag(args, "--limit", None)
    limit = None
    if limit_arg is not None:
        if not (limit_arg.isascii() and limit_arg.isdigit()):
            print(f"--limit must be a non-negative integer (got {limit_arg})")
            print("Usage: python -m notion_quiz run [--dry-run] [--limit N] [--verbose]")
            return 1
        limit = int(limit_arg)
    settings.validate()
    dry_run = "--dry-run" in args
    llm = _get_llm(settings)
    log.debug("Settings: %s", settings.to_dict())

    async def go():
        async with NotionClient(
            token=settings.notion_token,
            database_id=settings.notion_db_id,
            props=NotionProperties.from_settings(settings),
            timeout=settings.request_timeout,
        ) as notion:
            return await run_quiz(
                settings, notion, llm,
                dry_run=dry_run,
                limit=limit,
            )

    log.info("🚀 Starting MCQ quiz generation%s...", " (dry run)" if dry_run else "")
    summary = asyncio.run(go())
    print(
        f"\nFound {summary.found}, eligible {summary.eligible}: "
        f"{summary.written} written, {summary.skipped} skipped, {summary.failed} failed"
    )
    return 0


def _models(settings: Settings) -> int:
    from notion_quiz.providers.llm_gemini import GeminiProvider, choose_model

    if settings.llm_provider != "gemini":
        print(f"Model listing is only available for gemini (configured: {settings.llm_provider})")
        return 1
    settings.validate(need_notion=False)
    llm = GeminiProvider(api_key=settings.gemini_api_key, timeout=settings.request_timeout)
    names = asyncio.run(llm.list_models())
    if not names:
        print("No models support generateContent for this key.")
        return 1
    chosen = choose_model(names)
    for n in names:
        print(f"{'*' if n == chosen else ' '} {n}")
    return 0


def _preview(settings: Settings, args: list[str]) -> int:
    from notion_quiz.pipeline import generate_quiz

    words = [a for i, a in enumerate(args) if not a.startswith("-") and (i == 0 or args[i - 1] != "--style")]
    if not words:
        print("Usage: python -m notion_quiz preview WORD [--style sentence|definition|thesaurus]")
        return 1
    style = _parse_flag(args, "--style", None)
    if style is not None and style not in QUIZ_STYLES:
        print(f"Unknown style: {style} (expected one of {', '.join(QUIZ_STYLES)})")
        return 1
    settings.validate(need_notion=False)
    llm = _get_llm(settings)

    async def go():
        await llm.prepare()
        return await generate_quiz(
            llm, words[0], style=style,
            temperature=settings.temperature, json_mode=settings.json_mode,
        )

    result = asyncio.run(go())
    if result is None:
        print(f"The model did not return a usable quiz for '{words[0]}'.")
        return 1
    _, rendered = result
    print(rendered.text)
    print(f"Answer: {rendered.correct_label}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
