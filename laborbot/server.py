"""FastAPI server for the labor-law helper LINE bot.

Run with:
    uv run uvicorn laborbot.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from laborbot.api.events import EventDispatcher
from laborbot.api.routes import router, webhook_router
from laborbot.config import (
    ARTICLES_PATH,
    CORS_ORIGINS,
    FAQS_PATH,
    SERVER_HOST,
    SERVER_PORT,
    load_settings,
)
from laborbot.resolver import IntentResolver, ResolverContext
from laborbot.services.answer_client import build_answer_client
from laborbot.services.answer_gateway import AnswerGateway
from laborbot.services.line_client import LineClient
from laborbot.tools.articles import ArticleIndex
from laborbot.tools.faqs import FaqIndex
from laborbot.tools.loader import load_articles, load_faqs

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


def build_context() -> ResolverContext:
    """Load reference data and wire the AI gateway."""
    settings = load_settings()
    return ResolverContext(
        articles=ArticleIndex(load_articles(ARTICLES_PATH)),
        faqs=FaqIndex(load_faqs(FAQS_PATH)),
        gateway=AnswerGateway(build_answer_client(), settings),
        settings=settings,
    )


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the read-only resolver context once and share it via app state."""
    logger.info("Loading reference data…")
    context = build_context()
    line_client = LineClient()
    resolver = IntentResolver(context)

    application.state.context = context
    application.state.resolver = resolver
    application.state.dispatcher = EventDispatcher(resolver, line_client)
    logger.info(
        "Bot ready: %d articles, %d FAQs, AI %s.",
        len(context.articles), len(context.faqs),
        "enabled" if context.gateway.enabled else "disabled",
    )
    yield
    line_client.close()


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="Labor Standards Act Helper",
    description="LINE bot answering Taiwan Labor Standards Act questions.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info(
        "[%s] %s %s", request_id, request.method, request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── Register routes ──────────────────────────────────────────────────
app.include_router(webhook_router)
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": "Labor Standards Act Helper",
        "version": "1.0.0",
        "webhook": "POST /webhook",
        "health": "/api/health",
    }


if __name__ == "__main__":
    logger.info("Starting LINE bot server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "laborbot.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
