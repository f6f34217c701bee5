"""Retry with exponential backoff and jitter.

A :class:`RetryPolicy` bundles everything one retry sequence needs (the
per-attempt timeout, how many extra attempts are allowed, the backoff
schedule and the transient-failure test) so different gateway tiers can
share :func:`call_with_retry` with different settings.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetriesExhausted(Exception):
    """Raised when every attempt of a retry sequence has failed."""

    def __init__(self, last_error: Exception, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Gave up after {attempts} attempt(s): {last_error}")


def exponential_backoff(
    base: float = 0.5, cap: float = 4.0, jitter: float = 0.25,
) -> Callable[[int], float]:
    """Return ``attempt -> delay``: ``min(cap, base * 2**(attempt-1))`` plus
    a uniform random jitter in ``[0, jitter]``."""

    def _delay(attempt: int) -> float:
        return min(cap, base * (2 ** (attempt - 1))) + random.uniform(0, jitter)

    return _delay


def is_transient_error(exc: Exception) -> bool:
    return bool(getattr(exc, "transient", False))


@dataclass(frozen=True)
class RetryPolicy:
    timeout: float
    max_retries: int = 2
    backoff: Callable[[int], float] = exponential_backoff()
    is_transient: Callable[[Exception], bool] = is_transient_error


def call_with_retry(
    policy: RetryPolicy,
    fn: Callable[[float], T],
    *,
    label: str = "call",
) -> T:
    """Run ``fn(policy.timeout)`` until it succeeds or the policy gives up.

    Transient failures are retried up to ``policy.max_retries`` times with
    a backoff sleep in between; any other failure ends the sequence at once.

    Raises:
        RetriesExhausted: wrapping the last error.
    """
    max_attempts = policy.max_retries + 1
    attempt = 0
    while True:
        attempt += 1
        try:
            return fn(policy.timeout)
        except Exception as exc:
            if not policy.is_transient(exc):
                logger.warning(
                    "%s failed permanently on attempt %d/%d (%s); not retrying",
                    label, attempt, max_attempts, type(exc).__name__,
                )
                raise RetriesExhausted(exc, attempt) from exc
            if attempt >= max_attempts:
                logger.warning(
                    "%s failed on attempt %d/%d (%s); retries exhausted",
                    label, attempt, max_attempts, type(exc).__name__,
                )
                raise RetriesExhausted(exc, attempt) from exc

            delay = policy.backoff(attempt)
            logger.warning(
                "%s attempt %d/%d failed (%s). Retrying in %.1fs…",
                label, attempt, max_attempts, type(exc).__name__, delay,
            )
            time.sleep(delay)
