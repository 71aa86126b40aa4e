"""Stored pixel records and their flat metadata encoding."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from beliefpixels.errors import PixelValidationError
from beliefpixels.models.stage import (
    PixelDraft,
    StageVector,
    decode_color_stage,
    encode_color_stage,
)

logger = logging.getLogger(__name__)

FlatValue = str | int | float | bool


def document_text(statement: str, context: str) -> str:
    """Canonical text that gets embedded for a pixel."""
    return f"context: {context}\nstatement: {statement}"


def utc_now_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 value into an aware datetime. None if unparseable.

    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class PixelMetadata(BaseModel):
    """Metadata stored next to a pixel's embedding.

    ``color_stage`` is a nested value here; it is only flattened to a JSON
    string by :meth:`to_flat` at the store edge. It reads back as None when a
    stored record carries an unreadable value.
    """

    model_config = ConfigDict(populate_by_name=True)

    statement: str = ""
    context: str = ""
    explanation: str = ""
    color_stage: StageVector | None = None
    confidence_score: float = 0.0
    too_nuanced: bool = False
    absolute_thinking: bool = False
    chat_id: str = Field(default="", alias="chatId")
    user_email: str = Field(default="", alias="userEmail")
    timestamp: str = ""

    @classmethod
    def from_draft(
        cls,
        draft: PixelDraft,
        *,
        chat_id: str = "",
        user_email: str = "",
        timestamp: str | None = None,
    ) -> PixelMetadata:
        return cls(
            statement=draft.statement,
            context=draft.context,
            explanation=draft.explanation,
            color_stage=draft.color_stage,
            confidence_score=draft.confidence_score,
            too_nuanced=draft.too_nuanced,
            absolute_thinking=draft.absolute_thinking,
            chat_id=chat_id or "",
            user_email=user_email or "",
            timestamp=timestamp or utc_now_iso(),
        )

    def to_flat(self) -> dict[str, FlatValue]:
        """Flat str/number/bool mapping accepted by the vector store."""
        if self.color_stage is None:
            raise PixelValidationError("Cannot store a pixel without a color_stage")
        return {
            "statement": self.statement,
            "context": self.context,
            "explanation": self.explanation,
            "color_stage": encode_color_stage(self.color_stage),
            "confidence_score": float(self.confidence_score),
            "too_nuanced": bool(self.too_nuanced),
            "absolute_thinking": bool(self.absolute_thinking),
            "chatId": self.chat_id,
            "userEmail": self.user_email,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_flat(cls, flat: Mapping[str, Any] | None) -> PixelMetadata:
        flat = dict(flat or {})
        raw_stage = flat.pop("color_stage", None)
        stage = None
        if raw_stage:
            try:
                stage = decode_color_stage(raw_stage)
            except PixelValidationError as e:
                logger.warning("Unreadable color_stage in stored metadata: %s", e)

        return cls(
            statement=str(flat.get("statement") or ""),
            context=str(flat.get("context") or ""),
            explanation=str(flat.get("explanation") or ""),
            color_stage=stage,
            confidence_score=float(flat.get("confidence_score") or 0.0),
            too_nuanced=bool(flat.get("too_nuanced", False)),
            absolute_thinking=bool(flat.get("absolute_thinking", False)),
            chat_id=str(flat.get("chatId") or ""),
            user_email=str(flat.get("userEmail") or ""),
            timestamp=str(flat.get("timestamp") or ""),
        )


class PixelRecords(BaseModel):
    """Every record in one user's collection, as four parallel lists."""

    ids: list[str] = Field(default_factory=list)
    embeddings: list[list[float]] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    metadatas: list[PixelMetadata] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids)
