"""Shared test fixtures for the laborbot test suite."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so config.py won't fail on module load.
    """
    os.environ.setdefault("LINE_CHANNEL_ACCESS_TOKEN", "test-line-token-123")
    os.environ.setdefault("LINE_CHANNEL_SECRET", "test-line-secret-456")
    os.environ.setdefault("METRICS_ENABLED", "false")


class FakeAnswerClient:
    """Scripted stand-in for ``AnswerClient``.

    ``outcomes`` is consumed one item per ``generate`` call: a string is
    returned, an exception instance is raised.  When exhausted, the last
    outcome repeats.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or ["AI 回答"]
        self.calls: list[dict] = []

    def generate(self, system_prompt, user_prompt, *, max_tokens, temperature, timeout):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "timeout": timeout,
            }
        )
        index = min(len(self.calls) - 1, len(self.outcomes) - 1)
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_answer_client():
    """Factory fixture: ``fake_answer_client("text", SomeError(...), ...)``."""
    return FakeAnswerClient


@pytest.fixture
def mock_metrics():
    return MagicMock()


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip backoff sleeps; returns the list of requested delays."""
    delays: list[float] = []
    monkeypatch.setattr("laborbot.services.retry.time.sleep", delays.append)
    return delays


@pytest.fixture
def sample_articles():
    from laborbot.tools.articles import ArticleRecord

    return (
        ArticleRecord(24, "延長工作時間之工資加給", "平日加班前兩小時加給三分之一以上。", ("加班費", "延長工時")),
        ArticleRecord(30, "正常工作時間", "每日不得超過八小時，每週不得超過四十小時。", ("工時上限", "正常工時")),
        ArticleRecord(38, "特別休假", "依年資給予特別休假。", ("特休", "特別休假", "年假")),
        ArticleRecord(21, "基本工資", "工資不得低於基本工資。", ("最低工資", "基本工資")),
    )


@pytest.fixture
def sample_faqs():
    from laborbot.tools.faqs import FaqRecord

    return (
        FaqRecord("加班費怎麼算？", "前 2 小時 1.34 倍。", ("加班費怎麼算", "加班怎麼算"), "加班"),
        FaqRecord("特休有幾天？", "滿 1 年 7 天。", ("特休有幾天", "特休天數"), "特休"),
        FaqRecord("被資遣有沒有遣散費？", "有，依年資計算。", ("遣散費", "資遣費"), "離職"),
    )


@pytest.fixture
def article_index(sample_articles):
    from laborbot.tools.articles import ArticleIndex

    return ArticleIndex(sample_articles)


@pytest.fixture
def faq_index(sample_faqs):
    from laborbot.tools.faqs import FaqIndex

    return FaqIndex(sample_faqs)
