"""Intent resolution: one inbound text in, exactly one reply out.

The resolver walks an ordered list of matchers and the first one that
returns a :class:`Reply` wins::

    1. CommandMatcher         exact commands (功能 / 加班相關 / ...)
    2. AiModeMatcher          "ai/" or "ai+" prefix, optional 詳細 marker
    3. CalculatorMatcher      加班費試算 key=value ...
    4. ArticleNumberMatcher   "勞基法第24條" → stored article or AI explanation
    5. FaqMatcher             keyword-scored FAQ
    6. ArticleKeywordMatcher  keyword-scored article
    7. AiFallbackMatcher      concise AI answer, else static guidance

Later matchers only run when every earlier one declined, and the last one
always answers.  Dependencies (indices, gateway, settings) are injected
through :class:`ResolverContext`; nothing here is a module-level global.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from laborbot import messages
from laborbot.config import Settings
from laborbot.services.answer_gateway import AnswerGateway, AnswerMode
from laborbot.services.metrics import MetricsClient, metrics as default_metrics
from laborbot.text import normalize
from laborbot.tools import overtime
from laborbot.tools.articles import ArticleIndex, format_article_reply
from laborbot.tools.faqs import FaqIndex, format_faq_reply
from laborbot.tools.references import extract_single_reference

logger = logging.getLogger(__name__)


# ── Reply types ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class QuickReply:
    """A suggested next action: button *label* that sends *text*."""

    label: str
    text: str


DEFAULT_QUICK_REPLIES: tuple[QuickReply, ...] = (
    QuickReply("功能說明", "功能"),
    QuickReply("加班相關", "加班相關"),
    QuickReply("特休相關", "特休相關"),
    QuickReply("離職相關", "離職相關"),
)


@dataclass(frozen=True)
class Reply:
    text: str
    quick_replies: tuple[QuickReply, ...] = DEFAULT_QUICK_REPLIES


def truncate_reply_text(text: str, limit: int, marker: str) -> str:
    """Cut *text* to at most *limit* characters, ending with *marker* if cut."""
    if len(text) <= limit:
        return text
    keep = max(limit - len(marker), 0)
    return text[:keep] + marker[: limit - keep]


# ── Context ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ResolverContext:
    """Everything the matchers read.  Built once at start-up."""

    articles: ArticleIndex
    faqs: FaqIndex
    gateway: AnswerGateway
    settings: Settings = field(default_factory=Settings)


# ── Matchers ─────────────────────────────────────────────────────────


class Matcher:
    """One priority branch.  ``try_match`` returns ``None`` to pass."""

    name = "matcher"

    def try_match(self, text: str) -> Reply | None:
        raise NotImplementedError


CommandTable = Mapping[str, Callable[[], str]]

DEFAULT_COMMANDS: dict[str, Callable[[], str]] = {
    **dict.fromkeys(("功能", "help", "使用說明", "menu"), messages.help_message),
    "加班相關": messages.overtime_examples_message,
    **dict.fromkeys(("特休相關", "休假相關"), messages.annual_leave_examples_message),
    **dict.fromkeys(("離職相關", "資遣相關", "離職資遣相關"), messages.resignation_examples_message),
    **dict.fromkeys(("加班費試算說明", "試算說明"), overtime.usage_message),
}


class CommandMatcher(Matcher):
    """Exact commands, compared after case-folding and whitespace removal."""

    name = "command"

    def __init__(self, commands: CommandTable | None = None) -> None:
        table = DEFAULT_COMMANDS if commands is None else commands
        self._commands = {normalize(k): v for k, v in table.items()}

    def try_match(self, text: str) -> Reply | None:
        build = self._commands.get(normalize(text))
        return Reply(build()) if build else None


AI_PREFIXES: tuple[str, ...] = ("ai/", "ai+")
DETAILED_MARKERS: frozenset[str] = frozenset({"詳細", "detailed", "detail", "詳"})


def parse_ai_command(text: str) -> tuple[AnswerMode, str] | None:
    """Split an AI-mode command into ``(mode, question)``.

    Returns ``None`` when *text* does not start with an AI prefix.  The
    question may be empty; the caller decides what to say then.
    """
    stripped = text.lstrip()
    if stripped[:3].lower() not in AI_PREFIXES:
        return None

    rest = stripped[3:].strip()
    mode = AnswerMode.CONCISE
    head, _, tail = rest.partition(" ")
    if head.lower() in DETAILED_MARKERS:
        mode, rest = AnswerMode.DETAILED, tail.strip()
    elif rest.startswith("詳細"):
        mode, rest = AnswerMode.DETAILED, rest[len("詳細"):].strip()
    return mode, rest


class AiModeMatcher(Matcher):
    name = "ai_mode"

    def __init__(self, gateway: AnswerGateway) -> None:
        self._gateway = gateway

    def try_match(self, text: str) -> Reply | None:
        parsed = parse_ai_command(text)
        if parsed is None:
            return None
        mode, question = parsed
        if not question:
            return Reply(messages.ai_question_prompt_message())

        logger.info("Explicit AI request (mode=%s)", mode.value)
        answer = self._gateway.answer(question, mode)
        if answer is None:
            return Reply(messages.ai_unavailable_message(question))
        return Reply(messages.ai_answer_message(answer))


class CalculatorMatcher(Matcher):
    name = "calculator"

    def __init__(self, settings: Settings) -> None:
        self._defaults = overtime.OvertimePayParams(
            weekday_rate1=settings.weekday_rate1,
            weekday_rate2=settings.weekday_rate2,
            rest_rate=settings.rest_rate,
            holiday_rate=settings.holiday_rate,
        )

    def try_match(self, text: str) -> Reply | None:
        if not overtime.is_calculator_command(text):
            return None
        result = overtime.compute(overtime.parse_args(text, self._defaults))
        if isinstance(result, overtime.InvalidWage):
            logger.info("Calculator rejected input: %s", result.reason)
            return Reply(overtime.usage_message())
        return Reply(overtime.format_breakdown(result))


class ArticleNumberMatcher(Matcher):
    """Explicit article references: stored summary, AI, or "not yet"."""

    name = "article_number"

    def __init__(self, articles: ArticleIndex, gateway: AnswerGateway) -> None:
        self._articles = articles
        self._gateway = gateway

    def try_match(self, text: str) -> Reply | None:
        number = extract_single_reference(text)
        if number is None:
            return None

        record = self._articles.lookup_by_number(number)
        if record is not None:
            return Reply(format_article_reply(number, record))

        logger.info("No local summary for article %d; asking AI", number)
        answer = self._gateway.explain_article(number)
        if answer is None:
            return Reply(messages.article_not_available_message(number))
        return Reply(messages.ai_article_message(number, answer))


class FaqMatcher(Matcher):
    name = "faq"

    def __init__(self, faqs: FaqIndex) -> None:
        self._faqs = faqs

    def try_match(self, text: str) -> Reply | None:
        record = self._faqs.find_best(text)
        return Reply(format_faq_reply(record)) if record else None


class ArticleKeywordMatcher(Matcher):
    name = "article_keyword"

    def __init__(self, articles: ArticleIndex) -> None:
        self._articles = articles

    def try_match(self, text: str) -> Reply | None:
        record = self._articles.lookup_by_keyword(text)
        if record is None:
            return None
        logger.info("Article keyword match: article %d", record.number)
        return Reply(format_article_reply(record.number, record))


class AiFallbackMatcher(Matcher):
    """Last resort; always answers."""

    name = "ai_fallback"

    def __init__(self, gateway: AnswerGateway) -> None:
        self._gateway = gateway

    def try_match(self, text: str) -> Reply:
        answer = self._gateway.answer(text, AnswerMode.CONCISE)
        if answer is None:
            return Reply(messages.guidance_message(text))
        return Reply(messages.ai_answer_message(answer))


def default_matchers(context: ResolverContext) -> list[Matcher]:
    return [
        CommandMatcher(),
        AiModeMatcher(context.gateway),
        CalculatorMatcher(context.settings),
        ArticleNumberMatcher(context.articles, context.gateway),
        FaqMatcher(context.faqs),
        ArticleKeywordMatcher(context.articles),
        AiFallbackMatcher(context.gateway),
    ]


# ── Resolver ─────────────────────────────────────────────────────────


class IntentResolver:
    def __init__(
        self,
        context: ResolverContext,
        matchers: Sequence[Matcher] | None = None,
        *,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._context = context
        self._matchers: tuple[Matcher, ...] = tuple(
            default_matchers(context) if matchers is None else matchers
        )
        self._metrics = metrics or default_metrics

    @property
    def matchers(self) -> tuple[Matcher, ...]:
        return self._matchers

    def resolve(self, text: str | None) -> Reply:
        """Return the reply from the first matcher that accepts *text*."""
        text = text or ""
        if not text.strip():
            return self._finish("blank", Reply(messages.help_message()))

        for matcher in self._matchers:
            reply = matcher.try_match(text)
            if reply is not None:
                return self._finish(matcher.name, reply)

        # Only reachable with a custom matcher list lacking a fallback.
        return self._finish("guidance", Reply(messages.guidance_message(text)))

    def _finish(self, branch: str, reply: Reply) -> Reply:
        s = self._context.settings
        logger.info("Resolved via %s branch", branch)
        self._metrics.record_branch(branch)
        return Reply(
            text=truncate_reply_text(reply.text, s.reply_max_chars, s.truncation_marker),
            quick_replies=reply.quick_replies[: s.max_quick_replies],
        )
