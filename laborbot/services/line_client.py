"""HTTP client for the LINE Messaging API (reply and push).

LINE docs: https://developers.line.biz/en/reference/messaging-api/
Requests carry the channel access token as a Bearer token.

Reply tokens are single-use, so requests are *not* retried: a retried
reply after a lost response would either fail or double-send.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from laborbot.config import LINE_API_BASE_URL, LINE_CHANNEL_ACCESS_TOKEN
from laborbot.resolver import Reply
from laborbot.services.metrics import MetricsClient, metrics as default_metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0
MAX_QUICK_REPLY_ITEMS = 13  # LINE hard limit; the resolver caps far lower
MAX_LABEL_CHARS = 20


class LineAPIError(Exception):
    """Raised when a LINE Messaging API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def build_text_message(reply: Reply) -> dict[str, Any]:
    """LINE text message object, with quick-reply buttons when present."""
    message: dict[str, Any] = {"type": "text", "text": reply.text}
    items = [
        {
            "type": "action",
            "action": {
                "type": "message",
                "label": qr.label[:MAX_LABEL_CHARS],
                "text": qr.text,
            },
        }
        for qr in reply.quick_replies[:MAX_QUICK_REPLY_ITEMS]
    ]
    if items:
        message["quickReply"] = {"items": items}
    return message


class LineClient:
    """Thin wrapper around the two LINE endpoints the bot needs."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        *,
        metrics: MetricsClient | None = None,
    ):
        self._token = token or LINE_CHANNEL_ACCESS_TOKEN
        self._client = httpx.Client(
            base_url=base_url or LINE_API_BASE_URL,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
            },
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        self._metrics = metrics or default_metrics

    def _post(self, path: str, payload: dict[str, Any]) -> None:
        t0 = time.perf_counter()
        try:
            response = self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            self._metrics.record_failure(
                "line", f"POST {path}", error_type=type(exc).__name__, latency_ms=elapsed,
            )
            raise LineAPIError(f"LINE request failed: {exc}") from exc

        elapsed = (time.perf_counter() - t0) * 1000
        if response.status_code >= 400:
            self._metrics.record_failure(
                "line", f"POST {path}",
                error_type=str(response.status_code), latency_ms=elapsed,
            )
            raise LineAPIError(
                f"LINE API error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        self._metrics.record_success("line", f"POST {path}", latency_ms=elapsed)

    def reply(self, reply_token: str, reply: Reply) -> None:
        """Answer an inbound event using its reply token."""
        self._post(
            "/v2/bot/message/reply",
            {"replyToken": reply_token, "messages": [build_text_message(reply)]},
        )
        logger.info("Reply sent (%d chars)", len(reply.text))

    def push(self, user_id: str, reply: Reply) -> None:
        """Send a message to *user_id* without a reply token."""
        self._post(
            "/v2/bot/message/push",
            {"to": user_id, "messages": [build_text_message(reply)]},
        )
        logger.info("Push sent to %s (%d chars)", user_id, len(reply.text))

    def close(self) -> None:
        self._client.close()
