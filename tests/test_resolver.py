"""Tests for intent resolution: branch order, replies and post-processing."""

from __future__ import annotations

import pytest

from laborbot.config import Settings
from laborbot.resolver import (
    DEFAULT_QUICK_REPLIES,
    CommandMatcher,
    IntentResolver,
    Matcher,
    QuickReply,
    Reply,
    ResolverContext,
    default_matchers,
    parse_ai_command,
    truncate_reply_text,
)
from laborbot.services.answer_client import AnswerTimeoutError
from laborbot.services.answer_gateway import AnswerGateway, AnswerMode

# ── Helpers ──────────────────────────────────────────────────────────


class _FixedMatcher(Matcher):
    name = "fixed"

    def __init__(self, reply: Reply) -> None:
        self._reply = reply

    def try_match(self, text: str) -> Reply:
        return self._reply


@pytest.fixture
def make_resolver(article_index, faq_index, mock_metrics):
    """Build a resolver; pass an answer client to enable AI."""

    def _make(client=None, matchers=None, settings=None):
        settings = settings or Settings()
        gateway = AnswerGateway(client, settings, metrics=mock_metrics)
        context = ResolverContext(article_index, faq_index, gateway, settings)
        return IntentResolver(context, matchers, metrics=mock_metrics)

    return _make


# ── Tests: commands ──────────────────────────────────────────────────


class TestCommands:
    @pytest.mark.parametrize("text", ["功能", "help", " HELP ", "使用 說明", "Menu"])
    def test_help_aliases(self, make_resolver, mock_metrics, text):
        reply = make_resolver().resolve(text)
        assert reply.text.startswith("🙋‍♂️ 勞基法小幫手 - 使用說明")
        mock_metrics.record_branch.assert_called_once_with("command")

    @pytest.mark.parametrize(
        ("text", "needle"),
        [("加班相關", "加班"), ("特休相關", "特休"), ("資遣相關", "資遣"), ("試算說明", "加班費試算")],
    )
    def test_category_commands(self, make_resolver, text, needle):
        assert needle in make_resolver().resolve(text).text

    def test_command_must_be_exact(self, make_resolver, mock_metrics):
        make_resolver().resolve("功能很多嗎今天天氣")
        assert mock_metrics.record_branch.call_args[0][0] != "command"


# ── Tests: AI mode ───────────────────────────────────────────────────


class TestParseAiCommand:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("ai/ 責任制合法嗎", (AnswerMode.CONCISE, "責任制合法嗎")),
            ("AI+責任制合法嗎", (AnswerMode.CONCISE, "責任制合法嗎")),
            ("ai/ 詳細 責任制合法嗎", (AnswerMode.DETAILED, "責任制合法嗎")),
            ("ai/詳細責任制合法嗎", (AnswerMode.DETAILED, "責任制合法嗎")),
            ("ai/ detailed can I refuse", (AnswerMode.DETAILED, "can I refuse")),
            ("ai/", (AnswerMode.CONCISE, "")),
        ],
    )
    def test_parses_mode_and_question(self, text, expected):
        assert parse_ai_command(text) == expected

    def test_non_ai_text(self):
        assert parse_ai_command("加班費怎麼算") is None
        assert parse_ai_command("aid 計畫") is None


class TestAiMode:
    def test_detailed_request_uses_detailed_tier(self, make_resolver, fake_answer_client, no_sleep):
        client = fake_answer_client("責任制需經核備。")
        reply = make_resolver(client).resolve("ai/ 詳細 責任制合法嗎")

        assert reply.text.startswith("🧭 AI 解析結果")
        assert "責任制需經核備。" in reply.text
        assert "AI 生成" in reply.text
        assert client.calls[0]["max_tokens"] == 900

    def test_empty_question_prompts_for_one(self, make_resolver, fake_answer_client):
        client = fake_answer_client()
        reply = make_resolver(client).resolve("ai/   ")
        assert "請在 ai/ 後面接著輸入你的問題" in reply.text
        assert client.calls == []

    def test_ai_failure_gives_unavailable_message(self, make_resolver, fake_answer_client, no_sleep):
        client = fake_answer_client(AnswerTimeoutError("slow"))
        reply = make_resolver(client).resolve("ai/ 可以拒絕加班嗎")
        assert "你問的是：可以拒絕加班嗎" in reply.text
        assert "AI 服務目前忙碌" in reply.text

    def test_ai_prefix_beats_article_reference(self, make_resolver, mock_metrics):
        make_resolver().resolve("ai/ 勞基法第24條是什麼")
        mock_metrics.record_branch.assert_called_once_with("ai_mode")


# ── Tests: calculator ────────────────────────────────────────────────


class TestCalculator:
    def test_computes_breakdown(self, make_resolver, mock_metrics):
        reply = make_resolver().resolve("加班費試算 時薪=183 平日=2")
        assert "合計：約 487 元" in reply.text
        mock_metrics.record_branch.assert_called_once_with("calculator")

    def test_invalid_wage_shows_usage(self, make_resolver):
        reply = make_resolver().resolve("加班費試算 時薪=0 平日=2")
        assert reply.text.startswith("🧮 加班費試算需要一個大於 0 的時薪喔！")

    def test_rates_come_from_settings(self, make_resolver):
        reply = make_resolver(settings=Settings(weekday_rate1=1.5)).resolve("加班費試算 時薪=100 平日=2")
        assert "合計：約 300 元" in reply.text


# ── Tests: article numbers ───────────────────────────────────────────


class TestArticleNumber:
    def test_stored_article(self, make_resolver, mock_metrics):
        reply = make_resolver().resolve("查勞基法第24條")
        assert "🧾 你查的是：勞動基準法第 24 條" in reply.text
        assert "延長工作時間之工資加給" in reply.text
        mock_metrics.record_branch.assert_called_once_with("article_number")

    def test_unknown_article_asks_ai(self, make_resolver, fake_answer_client, no_sleep):
        client = fake_answer_client("第99條的大意是……")
        reply = make_resolver(client).resolve("勞基法99條")
        assert "勞動基準法第 99 條" in reply.text
        assert "第99條的大意是" in reply.text
        assert "第 99 條" in client.calls[0]["user_prompt"]

    def test_unknown_article_without_ai(self, make_resolver):
        reply = make_resolver().resolve("勞基法第99條")
        assert "你查的是：勞基法第 99 條" in reply.text
        assert "目前我還沒有這一條的整理資料" in reply.text

    def test_article_reference_beats_faq(self, make_resolver, mock_metrics):
        # "加班費怎麼算" alone would hit the FAQ
        make_resolver().resolve("第30條 加班費怎麼算")
        mock_metrics.record_branch.assert_called_once_with("article_number")


# ── Tests: keyword branches ──────────────────────────────────────────


class TestKeywordBranches:
    def test_faq_match(self, make_resolver, mock_metrics):
        reply = make_resolver().resolve("加班費怎麼算？")
        assert reply.text.startswith("❓ 加班費怎麼算？")
        mock_metrics.record_branch.assert_called_once_with("faq")

    def test_article_keyword_match(self, make_resolver, mock_metrics):
        reply = make_resolver().resolve("最低工資是多少")
        assert "勞動基準法第 21 條" in reply.text
        mock_metrics.record_branch.assert_called_once_with("article_keyword")

    def test_faq_beats_article_keyword(self, make_resolver, mock_metrics):
        # "特休" also hits article 38, but the FAQ is checked first
        reply = make_resolver().resolve("特休有幾天")
        assert reply.text.startswith("❓ 特休有幾天？")


# ── Tests: fallback ──────────────────────────────────────────────────


class TestFallback:
    def test_ai_fallback_answer(self, make_resolver, fake_answer_client, mock_metrics, no_sleep):
        client = fake_answer_client("可以依第14條終止契約。")
        reply = make_resolver(client).resolve("老闆一直罵人怎麼辦")

        assert reply.text.startswith("🧭 AI 解析結果")
        assert "📎 相關條文：" in reply.text
        assert client.calls[0]["max_tokens"] == 400
        mock_metrics.record_branch.assert_called_once_with("ai_fallback")

    def test_guidance_without_ai(self, make_resolver):
        reply = make_resolver().resolve("今天天氣很好")
        assert reply.text.startswith("你說的是：今天天氣很好")

    def test_guidance_after_ai_failure(self, make_resolver, fake_answer_client, no_sleep):
        client = fake_answer_client(AnswerTimeoutError("slow"))
        reply = make_resolver(client).resolve("今天天氣很好")
        assert "暫時無法使用 AI 協助回答" in reply.text

    def test_matcher_list_without_fallback(self, make_resolver, mock_metrics):
        resolver = make_resolver(matchers=[CommandMatcher()])
        reply = resolver.resolve("隨便說說")
        assert reply.text.startswith("你說的是：隨便說說")
        mock_metrics.record_branch.assert_called_once_with("guidance")


# ── Tests: resolver behaviour ────────────────────────────────────────


class TestResolver:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_input_gets_help(self, make_resolver, mock_metrics, text):
        reply = make_resolver().resolve(text)
        assert "使用說明" in reply.text
        mock_metrics.record_branch.assert_called_once_with("blank")

    def test_default_matcher_order(self, make_resolver):
        names = [m.name for m in make_resolver().matchers]
        assert names == [
            "command",
            "ai_mode",
            "calculator",
            "article_number",
            "faq",
            "article_keyword",
            "ai_fallback",
        ]

    def test_injected_command_takes_priority(self, make_resolver, article_index, faq_index, mock_metrics):
        gateway = AnswerGateway(None, metrics=mock_metrics)
        context = ResolverContext(article_index, faq_index, gateway)
        custom = CommandMatcher({"勞基法第24條": lambda: "自訂指令"})
        resolver = IntentResolver(context, [custom, *default_matchers(context)[1:]], metrics=mock_metrics)

        assert resolver.resolve("勞基法第24條").text == "自訂指令"
        assert resolver.resolve("勞基法第30條").text.startswith("🧾")

    def test_every_reply_has_default_quick_replies(self, make_resolver):
        reply = make_resolver().resolve("加班費怎麼算？")
        assert reply.quick_replies == DEFAULT_QUICK_REPLIES

    def test_quick_replies_are_capped(self, make_resolver):
        many = tuple(QuickReply(f"q{i}", f"t{i}") for i in range(7))
        reply = make_resolver(matchers=[_FixedMatcher(Reply("x", many))]).resolve("hi")
        assert len(reply.quick_replies) == 4
        assert reply.quick_replies[0].label == "q0"

    def test_long_reply_is_truncated(self, make_resolver):
        settings = Settings()
        long_reply = Reply("字" * 6000)
        reply = make_resolver(matchers=[_FixedMatcher(long_reply)]).resolve("hi")

        assert len(reply.text) == settings.reply_max_chars
        assert reply.text.endswith(settings.truncation_marker)

    def test_reply_at_limit_is_untouched(self, make_resolver):
        text = "字" * 4500
        reply = make_resolver(matchers=[_FixedMatcher(Reply(text))]).resolve("hi")
        assert reply.text == text


class TestTruncateReplyText:
    def test_short_text_unchanged(self):
        assert truncate_reply_text("abc", 10, "…") == "abc"

    def test_cut_text_ends_with_marker(self):
        assert truncate_reply_text("abcdefghij", 6, "..") == "abcd.."

    def test_limit_shorter_than_marker(self):
        assert truncate_reply_text("abcdefghij", 2, "...") == ".."
