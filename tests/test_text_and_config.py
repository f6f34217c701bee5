"""Tests for text helpers, settings and prompt building."""

from __future__ import annotations

import pytest

from laborbot.config import Settings, load_settings
from laborbot.prompts import build_article_question, build_user_prompt
from laborbot.text import normalize, strip_whitespace, to_halfwidth_digits


class TestTextHelpers:
    def test_normalize_lowercases_and_drops_whitespace(self):
        assert normalize("  Help Me\tNow\n") == "helpmenow"

    def test_normalize_empty(self):
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_strip_whitespace_keeps_case(self):
        assert strip_whitespace("勞基法 第 24 條 ABC") == "勞基法第24條ABC"

    def test_fullwidth_digits(self):
        assert to_halfwidth_digits("第３８條") == "第38條"


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.reply_max_chars == 4500
        assert s.max_quick_replies == 4
        assert s.max_retries == 2
        assert s.detailed_tier.max_tokens > s.reduced_tier.max_tokens > s.concise_tier.max_tokens

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("REPLY_MAX_CHARS", "3000")
        monkeypatch.setenv("AI_MAX_RETRIES", "0")
        s = load_settings()
        assert s.reply_max_chars == 3000
        assert s.max_retries == 0

    def test_settings_are_frozen(self):
        with pytest.raises(AttributeError):
            Settings().max_retries = 5


class TestPrompts:
    def test_user_prompt_contains_question_and_date(self):
        prompt = build_user_prompt("  可以拒絕加班嗎？ ")
        assert "可以拒絕加班嗎？" in prompt
        assert "今天是 20" in prompt

    def test_article_question(self):
        assert "第 38 條" in build_article_question(38)
