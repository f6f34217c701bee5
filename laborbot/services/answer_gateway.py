"""AI answer gateway: timeouts, retries and graceful degradation.

Each logical question walks a strictly sequential ladder of tiers::

    DETAILED request:  detailed ──exhausted──▶ reduced ──exhausted──▶ concise ──exhausted──▶ None
    CONCISE request:   concise  ──exhausted──▶ None

Within a tier, transient failures (timeouts, connection problems, 429,
5xx) are retried with exponential backoff and jitter; a permanent failure
(bad key, bad request, empty completion) exhausts the tier immediately.
The first successful tier wins and its text gets a citation list for
every "第N條" it mentions.

The gateway never raises for provider failures and never caches; the
caller turns ``None`` into a locally written message.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass

from laborbot.config import Settings, TierSettings
from laborbot.prompts import (
    CONCISE_SYSTEM_PROMPT,
    DETAILED_SYSTEM_PROMPT,
    REDUCED_SYSTEM_PROMPT,
    build_article_question,
    build_user_prompt,
)
from laborbot.services.answer_client import AnswerClient
from laborbot.services.metrics import MetricsClient, metrics as default_metrics
from laborbot.services.retry import RetriesExhausted, RetryPolicy, call_with_retry, exponential_backoff
from laborbot.tools.references import extract_all_references, format_citations

logger = logging.getLogger(__name__)


class AnswerMode(enum.Enum):
    CONCISE = "concise"
    DETAILED = "detailed"


@dataclass(frozen=True)
class GatewayTier:
    name: str
    system_prompt: str
    max_tokens: int
    timeout: float
    temperature: float


def _tier(name: str, system_prompt: str, cfg: TierSettings) -> GatewayTier:
    return GatewayTier(
        name=name,
        system_prompt=system_prompt,
        max_tokens=cfg.max_tokens,
        timeout=cfg.timeout_seconds,
        temperature=cfg.temperature,
    )


class AnswerGateway:
    """Turn a question into AI text, or ``None`` when every tier fails."""

    def __init__(
        self,
        client: AnswerClient | None,
        settings: Settings | None = None,
        *,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or Settings()
        self._metrics = metrics or default_metrics

        s = self._settings
        self.detailed_tier = _tier("detailed", DETAILED_SYSTEM_PROMPT, s.detailed_tier)
        self.reduced_tier = _tier("reduced", REDUCED_SYSTEM_PROMPT, s.reduced_tier)
        self.concise_tier = _tier("concise", CONCISE_SYSTEM_PROMPT, s.concise_tier)
        self._backoff = exponential_backoff(
            base=s.backoff_base_seconds,
            cap=s.backoff_cap_seconds,
            jitter=s.backoff_jitter_seconds,
        )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def ladder(self, mode: AnswerMode) -> tuple[GatewayTier, ...]:
        """Tiers tried, in order, for *mode*."""
        if mode is AnswerMode.DETAILED:
            return (self.detailed_tier, self.reduced_tier, self.concise_tier)
        return (self.concise_tier,)

    def _policy(self, tier: GatewayTier) -> RetryPolicy:
        return RetryPolicy(
            timeout=tier.timeout,
            max_retries=self._settings.max_retries,
            backoff=self._backoff,
        )

    def _call(self, tier: GatewayTier, user_prompt: str, timeout: float) -> str:
        t0 = time.perf_counter()
        try:
            text = self._client.generate(
                tier.system_prompt,
                user_prompt,
                max_tokens=tier.max_tokens,
                temperature=tier.temperature,
                timeout=timeout,
            )
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            self._metrics.record_failure(
                "anthropic", f"generate/{tier.name}",
                error_type=type(exc).__name__, latency_ms=elapsed,
            )
            raise
        elapsed = (time.perf_counter() - t0) * 1000
        self._metrics.record_success("anthropic", f"generate/{tier.name}", latency_ms=elapsed)
        return text

    def _run_tier(self, tier: GatewayTier, user_prompt: str) -> str | None:
        try:
            text = call_with_retry(
                self._policy(tier),
                lambda timeout: self._call(tier, user_prompt, timeout),
                label=f"AI answer [{tier.name}]",
            )
        except RetriesExhausted as exc:
            self._metrics.record_tier(tier.name, succeeded=False, attempts=exc.attempts)
            logger.warning("AI tier %s exhausted: %s", tier.name, exc.last_error)
            return None
        self._metrics.record_tier(tier.name, succeeded=True)
        return text

    def answer(self, question: str, mode: AnswerMode = AnswerMode.CONCISE) -> str | None:
        """Answer *question*, degrading through the tiers of *mode*."""
        if self._client is None:
            logger.warning("AI answer requested but no answer client is configured")
            return None

        user_prompt = build_user_prompt(question)
        for tier in self.ladder(mode):
            text = self._run_tier(tier, user_prompt)
            if text is not None:
                logger.info("AI answer produced by tier %s", tier.name)
                return with_citations(text)
            logger.info("Degrading past AI tier %s", tier.name)

        logger.error("All AI tiers exhausted for mode %s", mode.value)
        return None

    def explain_article(self, number: int) -> str | None:
        """Concise AI explanation of an article missing from the local data."""
        return self.answer(build_article_question(number), AnswerMode.CONCISE)


def with_citations(text: str) -> str:
    """Append a link list for every article *text* cites."""
    body = text.strip()
    citations = format_citations(extract_all_references(body))
    if not citations:
        return body
    return f"{body}\n\n{citations}"
