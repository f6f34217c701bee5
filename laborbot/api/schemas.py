"""Pydantic schemas for the LINE webhook and the local resolve endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LineSource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = "user"
    user_id: str | None = Field(None, alias="userId")


class LineMessage(BaseModel):
    type: str
    id: str | None = None
    text: str | None = None


class LineEvent(BaseModel):
    """One webhook event.  Fields the bot does not use are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    reply_token: str | None = Field(None, alias="replyToken")
    source: LineSource | None = None
    message: LineMessage | None = None


class LineWebhookPayload(BaseModel):
    destination: str | None = None
    events: list[LineEvent] = Field(default_factory=list)


class ResolveRequest(BaseModel):
    """Ask the resolver directly (manual testing, no LINE involved)."""

    message: str = Field(..., min_length=1, max_length=2000, description="The user's message")


class QuickReplyOut(BaseModel):
    label: str
    text: str


class ResolveResponse(BaseModel):
    reply: str = Field(..., description="The bot's reply text")
    quick_replies: list[QuickReplyOut] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "laborbot"
    articles_loaded: int = 0
    faqs_loaded: int = 0
    ai_enabled: bool = False
