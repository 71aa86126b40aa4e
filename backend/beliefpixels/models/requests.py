"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MessagePart(BaseModel):
    type: str = Field(default="text", description="Part type; only 'text' parts are read")
    text: str | None = None


class ChatMessage(BaseModel):
    id: str | None = Field(default=None, description="Message id in the chat store")
    role: str = Field(..., description="Speaker role, e.g. user or assistant")
    parts: list[MessagePart] = Field(default_factory=list)


class PixelGenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(default="", alias="chatId")
    user_id: str = Field(..., alias="userId", min_length=1)
    user_email: str = Field(default="", alias="userEmail")
    messages: list[ChatMessage] = Field(default_factory=list)


class ExtractRequest(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
