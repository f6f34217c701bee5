"""Text-generation client for AI answers, built on LangChain's Anthropic chat
model.

One call = one network round-trip.  The Anthropic SDK's own retries are
switched off (``max_retries=0``) because retry and degradation are decided
by :mod:`laborbot.services.answer_gateway`; this module only translates SDK
exceptions into the small taxonomy below so callers can tell transient
failures from permanent ones.
"""

from __future__ import annotations

import logging
import threading

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage

from laborbot.config import ANTHROPIC_API_KEY, MODEL_NAME

logger = logging.getLogger(__name__)


class AnswerServiceError(Exception):
    """Base class for failed text-generation calls."""

    transient: bool = False

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AnswerTimeoutError(AnswerServiceError):
    transient = True


class AnswerConnectionError(AnswerServiceError):
    transient = True


class AnswerRateLimitedError(AnswerServiceError):
    transient = True


class AnswerServerError(AnswerServiceError):
    """5xx from the provider."""

    transient = True


class AnswerClientError(AnswerServiceError):
    """4xx other than 429: bad key, bad request, ...  Never retried."""


class AnswerUnknownError(AnswerServiceError):
    """Anything unexpected, including an empty completion."""


def translate_error(exc: Exception) -> AnswerServiceError:
    """Map an exception raised by the Anthropic SDK onto our taxonomy."""
    if isinstance(exc, AnswerServiceError):
        return exc
    # APITimeoutError subclasses APIConnectionError, so check it first.
    if isinstance(exc, anthropic.APITimeoutError):
        return AnswerTimeoutError(f"Request timed out: {exc}")
    if isinstance(exc, anthropic.APIConnectionError):
        return AnswerConnectionError(f"Connection failed: {exc}")
    if isinstance(exc, anthropic.APIStatusError):
        status = exc.status_code
        if status == 429:
            return AnswerRateLimitedError(f"Rate limited: {exc}", status_code=status)
        if status >= 500:
            return AnswerServerError(f"Server error {status}: {exc}", status_code=status)
        return AnswerClientError(f"Client error {status}: {exc}", status_code=status)
    return AnswerUnknownError(f"{type(exc).__name__}: {exc}")


def _content_text(content: str | list | None) -> str:
    """Flatten message content (plain string or list of content blocks)."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class AnswerClient:
    """``generate(system, user, ...) -> text`` over a Claude chat model.

    Chat models are built lazily, one per ``(max_tokens, temperature,
    timeout)`` combination, and reused across requests.
    """

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self._api_key = api_key or ANTHROPIC_API_KEY
        self._model = model or MODEL_NAME
        self._models: dict[tuple[int, float, float], ChatAnthropic] = {}
        self._lock = threading.Lock()

    def _build_model(self, max_tokens: int, temperature: float, timeout: float) -> ChatAnthropic:
        return ChatAnthropic(
            model=self._model,
            api_key=self._api_key,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
            max_retries=0,
        )

    def _get_model(self, max_tokens: int, temperature: float, timeout: float) -> ChatAnthropic:
        key = (max_tokens, temperature, timeout)
        with self._lock:
            if key not in self._models:
                self._models[key] = self._build_model(max_tokens, temperature, timeout)
            return self._models[key]

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        """Return the completion text.

        Raises:
            AnswerServiceError: a subclass describing why the call failed.
        """
        llm = self._get_model(max_tokens, temperature, timeout)
        try:
            response = llm.invoke(
                [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
            )
        except Exception as exc:
            raise translate_error(exc) from exc

        text = _content_text(response.content).strip()
        if not text:
            raise AnswerUnknownError("Model returned an empty completion")
        return text


def build_answer_client() -> AnswerClient | None:
    """Return a client when an API key is configured, else ``None``."""
    if not ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY is not set; AI answers are disabled")
        return None
    logger.info("AI answers enabled (model: %s)", MODEL_NAME)
    return AnswerClient()
