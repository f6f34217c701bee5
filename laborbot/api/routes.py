"""FastAPI route definitions: the LINE webhook plus small JSON endpoints."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import logging

from fastapi import APIRouter, Header, HTTPException, Request
from pydantic import ValidationError

from laborbot.api.schemas import (
    HealthResponse,
    LineWebhookPayload,
    QuickReplyOut,
    ResolveRequest,
    ResolveResponse,
)
from laborbot.config import LINE_CHANNEL_SECRET

logger = logging.getLogger(__name__)

router = APIRouter()
webhook_router = APIRouter()


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check ``X-Line-Signature``: base64(HMAC-SHA256(channel secret, body))."""
    if not signature:
        return False
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode("ascii")
    return hmac.compare_digest(expected, signature)


def _get_state(request: Request, name: str):
    """Fetch a component built by the lifespan, or 503 while starting up."""
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=503,
            detail="The bot is still starting up. Please try again in a moment.",
        )
    return value


# ── LINE webhook ─────────────────────────────────────────────────────


@webhook_router.post("/webhook")
async def line_webhook(
    request: Request,
    x_line_signature: str | None = Header(None),
):
    """Receive a batch of LINE events.

    Once the signature checks out the batch is always acknowledged with
    200, even if individual events fail, so LINE does not redeliver it.
    """
    body = await request.body()
    if not verify_signature(body, x_line_signature, LINE_CHANNEL_SECRET):
        logger.warning("Rejected webhook call with a bad signature")
        raise HTTPException(status_code=401, detail="Invalid signature.")

    try:
        payload = LineWebhookPayload.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("Malformed webhook payload: %s", exc)
        raise HTTPException(status_code=400, detail="Malformed payload.") from exc

    dispatcher = _get_state(request, "dispatcher")
    logger.info("Webhook batch with %d event(s)", len(payload.events))
    await dispatcher.handle_batch(payload.events)
    return {"status": "ok"}


# ── JSON API ─────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    context = getattr(request.app.state, "context", None)
    if context is None:
        return HealthResponse(status="starting")
    return HealthResponse(
        articles_loaded=len(context.articles),
        faqs_loaded=len(context.faqs),
        ai_enabled=context.gateway.enabled,
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(body: ResolveRequest, http_request: Request):
    """Run the resolver on one message and return the reply it would send."""
    resolver = _get_state(http_request, "resolver")
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        reply = await asyncio.to_thread(resolver.resolve, body.message)
    except Exception as e:
        logger.exception("[%s] Error resolving message", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e

    return ResolveResponse(
        reply=reply.text,
        quick_replies=[QuickReplyOut(label=q.label, text=q.text) for q in reply.quick_replies],
    )
