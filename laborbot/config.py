"""Centralized configuration for the labor-law helper bot.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/laborbot/<VARIABLE_NAME>``.

Tunables that used to be scattered across the parsing and reply code
(rates, truncation limit, retry counts, tier budgets) live in the
:class:`Settings` structure, built once by :func:`load_settings`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))

_DATA_DIR = Path(__file__).resolve().parent / "data"


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415 — lazy import to avoid boto3 dep in tests

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/laborbot/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _optional_env(name: str) -> str | None:
    """Return a config value from env-var or SSM, or ``None`` when unset."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value
    if _ON_AWS:
        return _get_ssm_parameter(name)
    return None


def _require_env(name: str) -> str:
    """Return a config value from env-var or SSM, or raise a clear error."""
    value = _optional_env(name)
    if value:
        return value
    raise OSError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store /laborbot/{name} (AWS)."
    )


# ── LINE Messaging API ──────────────────────────────────────────────
LINE_CHANNEL_ACCESS_TOKEN: str = _require_env("LINE_CHANNEL_ACCESS_TOKEN")
LINE_CHANNEL_SECRET: str = _require_env("LINE_CHANNEL_SECRET")
LINE_API_BASE_URL: str = os.getenv("LINE_API_BASE_URL", "https://api.line.me")

# ── LLM (optional: without a key the bot answers from local data only) ──
ANTHROPIC_API_KEY: str | None = _optional_env("ANTHROPIC_API_KEY")
MODEL_NAME: str = os.getenv("MODEL_NAME", "claude-haiku-4-5")

# ── Reference data ──────────────────────────────────────────────────
ARTICLES_PATH: Path = Path(os.getenv("ARTICLES_PATH", str(_DATA_DIR / "articles.json")))
FAQS_PATH: Path = Path(os.getenv("FAQS_PATH", str(_DATA_DIR / "faqs.json")))

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")


# ── Tunables ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TierSettings:
    """Token budget, timeout and temperature for one gateway tier."""

    max_tokens: int
    timeout_seconds: float
    temperature: float = 0.3


@dataclass(frozen=True)
class Settings:
    """Every behavioural default of the bot in one place.

    Attributes:
        reply_max_chars: Safe outgoing text length.  LINE rejects text
            messages over 5000 characters, so replies are cut below that.
        truncation_marker: Appended to a reply that had to be cut.
        max_quick_replies: Suggested next actions attached to a reply.
        detailed_tier / reduced_tier / concise_tier: Gateway tier budgets,
            tried in that order when a detailed answer is requested.
        max_retries: Extra attempts per tier after a transient failure.
        backoff_base_seconds / backoff_cap_seconds / backoff_jitter_seconds:
            Exponential backoff parameters (``base * 2**(n-1)``, capped,
            plus uniform random jitter).
        weekday_rate1 / weekday_rate2 / rest_rate / holiday_rate:
            Default overtime multipliers for the pay calculator.
    """

    reply_max_chars: int = 4500
    truncation_marker: str = "\n…（內容過長，已截斷）"
    max_quick_replies: int = 4

    detailed_tier: TierSettings = TierSettings(max_tokens=900, timeout_seconds=25.0)
    reduced_tier: TierSettings = TierSettings(max_tokens=550, timeout_seconds=18.0)
    concise_tier: TierSettings = TierSettings(max_tokens=400, timeout_seconds=12.0)

    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    backoff_cap_seconds: float = 4.0
    backoff_jitter_seconds: float = 0.25

    weekday_rate1: float = 1.33
    weekday_rate2: float = 1.66
    rest_rate: float = 2.0
    holiday_rate: float = 2.0


def load_settings() -> Settings:
    """Build the settings structure, honouring a few env overrides."""
    settings = Settings(
        reply_max_chars=int(os.getenv("REPLY_MAX_CHARS", "4500")),
        max_retries=int(os.getenv("AI_MAX_RETRIES", "2")),
    )
    logger.debug("Settings loaded: %s", settings)
    return settings
