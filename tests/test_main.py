"""Tests for the command-line entry point."""
from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeLLM, quiz_json
from notion_quiz.__main__ import _get_llm, main
from notion_quiz.config import Settings
from notion_quiz.errors import ConfigError
from notion_quiz.models import RunSummary
from notion_quiz.providers.llm_gemini import GeminiProvider
from notion_quiz.providers.llm_ollama import OllamaProvider
from notion_quiz.providers.llm_openai import OpenAIProvider


class TestGetLLM:
    def test_gemini(self, settings):
        llm = _get_llm(settings)
        assert isinstance(llm, GeminiProvider)
        assert llm.model == "gemini-1.5-flash"

    def test_ollama(self):
        llm = _get_llm(Settings(llm_provider="ollama", ollama_url="http://box:11434"))
        assert isinstance(llm, OllamaProvider)
        assert llm.base_url == "http://box:11434"

    def test_openai_gets_configured_key(self):
        llm = _get_llm(Settings(llm_provider="openai", openai_api_key="sk-test"))
        assert isinstance(llm, OpenAIProvider)
        assert llm.client.api_key == "sk-test"
        assert llm.model == "gpt-4o-mini"

    def test_unknown(self):
        with pytest.raises(ConfigError):
            _get_llm(Settings(llm_provider="palm"))


class TestMain:
    def test_unknown_command(self, capsys):
        assert main(["frobnicate"]) == 1
        assert "Unknown command" in capsys.readouterr().out

    def test_missing_config_exits_nonzero(self):
        with patch("notion_quiz.__main__.load_settings", return_value=Settings()):
            assert main(["run"]) == 1

    def test_run_success(self, settings, capsys):
        run = AsyncMock(return_value=RunSummary(found=3, eligible=2, written=2))
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.pipeline.run_quiz", run):
            assert main([]) == 0
        assert run.await_args.kwargs["dry_run"] is False
        assert "2 written" in capsys.readouterr().out

    def test_run_flags(self, settings):
        run = AsyncMock(return_value=RunSummary())
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.pipeline.run_quiz", run):
            assert main(["run", "--dry-run", "--limit", "2"]) == 0
        assert run.await_args.kwargs["dry_run"] is True
        assert run.await_args.kwargs["limit"] == 2

    @pytest.mark.parametrize("value", ["-1", "abc", "2.5", ""])
    def test_run_rejects_bad_limit(self, settings, value, capsys):
        run = AsyncMock(return_value=RunSummary())
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.pipeline.run_quiz", run):
            assert main(["run", "--limit", value]) == 1
        run.assert_not_awaited()
        assert "--limit must be a non-negative integer" in capsys.readouterr().out

    def test_run_limit_zero(self, settings):
        run = AsyncMock(return_value=RunSummary())
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.pipeline.run_quiz", run):
            assert main(["run", "--limit", "0"]) == 0
        assert run.await_args.kwargs["limit"] == 0

    def test_unexpected_error_exits_nonzero(self, settings):
        run = AsyncMock(side_effect=RuntimeError("kaboom"))
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.pipeline.run_quiz", run):
            assert main(["run"]) == 1

    def test_preview(self, settings, capsys):
        llm = FakeLLM(responses=[quiz_json("happy", question="Def: glad")])
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.__main__._get_llm", return_value=llm):
            assert main(["preview", "happy", "--style", "definition"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Def: glad")
        assert "Answer: " in out
        assert "Type: definition." in llm.prompts[0]

    def test_preview_bad_output(self, settings):
        llm = FakeLLM(responses=["no quiz here"])
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch("notion_quiz.__main__._get_llm", return_value=llm):
            assert main(["preview", "happy"]) == 1

    def test_preview_unknown_style(self, settings):
        with patch("notion_quiz.__main__.load_settings", return_value=settings):
            assert main(["preview", "happy", "--style", "riddle"]) == 1

    def test_preview_requires_word(self, settings):
        with patch("notion_quiz.__main__.load_settings", return_value=settings):
            assert main(["preview"]) == 1

    def test_models(self, settings, capsys):
        names = ["gemini-1.0-pro", "gemini-2.0-flash"]
        with patch("notion_quiz.__main__.load_settings", return_value=settings), \
             patch.object(GeminiProvider, "list_models", AsyncMock(return_value=names)):
            assert main(["models"]) == 0
        out = capsys.readouterr().out
        assert "* gemini-2.0-flash" in out
        assert "  gemini-1.0-pro" in out
