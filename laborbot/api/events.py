"""Per-event processing for a LINE webhook batch.

Events in one batch are independent: they run concurrently and a failure
in one is logged and contained, so siblings still get their replies and
the webhook can always acknowledge the batch.
"""

from __future__ import annotations

import asyncio
import logging

from laborbot import messages
from laborbot.api.schemas import LineEvent
from laborbot.resolver import IntentResolver, Reply
from laborbot.services.line_client import LineClient

logger = logging.getLogger(__name__)

# Reply tokens LINE uses for the console "Verify" button and test pings.
SENTINEL_REPLY_TOKENS = frozenset({"0" * 32, "f" * 32})


def is_sentinel(event: LineEvent) -> bool:
    return event.reply_token in SENTINEL_REPLY_TOKENS


class EventDispatcher:
    def __init__(self, resolver: IntentResolver, line_client: LineClient) -> None:
        self._resolver = resolver
        self._line = line_client

    async def handle_batch(self, events: list[LineEvent]) -> None:
        """Process every event concurrently; never raises."""
        await asyncio.gather(*(self._handle_safely(event) for event in events))

    async def _handle_safely(self, event: LineEvent) -> None:
        try:
            await self.handle_event(event)
        except Exception:
            logger.exception("Error while handling %s event", event.type)

    async def handle_event(self, event: LineEvent) -> None:
        if is_sentinel(event):
            logger.info("Verification event received; nothing to do")
            return

        if event.type == "follow":
            await self._send(event, Reply(messages.welcome_message()))
            logger.info("Welcome message sent")
            return

        if event.type != "message" or event.message is None or event.message.type != "text":
            logger.info("Ignoring non-text event (%s)", event.type)
            return

        text = event.message.text or ""
        logger.info("User text: %s", text)
        # Resolution may block on AI calls with backoff sleeps.
        reply = await asyncio.to_thread(self._resolver.resolve, text)
        await self._send(event, reply)

    async def _send(self, event: LineEvent, reply: Reply) -> None:
        if event.reply_token:
            await asyncio.to_thread(self._line.reply, event.reply_token, reply)
        elif event.source and event.source.user_id:
            await asyncio.to_thread(self._line.push, event.source.user_id, reply)
        else:
            logger.warning("No reply token or user id on %s event; reply dropped", event.type)
