"""Out-of-band pixel import from a JSON array.

Entries are independent: a bad entry is logged and counted, and the rest of
the batch still runs. Imported pixels carry empty chatId/userEmail.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from beliefpixels.errors import PixelError, PixelValidationError
from beliefpixels.models.pixel import (
    PixelMetadata,
    document_text,
    format_timestamp,
    parse_timestamp,
    utc_now_iso,
)
from beliefpixels.models.stage import StageVector
from beliefpixels.store.embedding_store import EmbeddingStore

logger = logging.getLogger(__name__)


class ImportPixel(BaseModel):
    statement: str = Field(..., min_length=1)
    context: str = Field(..., min_length=1)
    explanation: str = ""
    color_stage: StageVector
    confidence_score: float = Field(default=0.1, ge=0.1, le=1.0)
    too_nuanced: bool = False
    absolute_thinking: bool = False


class ImportEntry(BaseModel):
    text: str | None = None
    timestamp: str | None = None
    pixel: ImportPixel


@dataclass
class ImportSummary:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    imported_ids: list[str] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)


def load_entries(path: Path | str) -> list[Any]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise PixelValidationError("JSON file must contain an array of pixel objects")
    return data


def prepare_entry(raw: Any) -> tuple[str, PixelMetadata]:
    """Validate one raw entry into (document text, metadata)."""
    try:
        entry = ImportEntry.model_validate(raw)
    except SchemaError as e:
        raise PixelValidationError(str(e)) from e

    if entry.timestamp:
        moment = parse_timestamp(entry.timestamp)
        if moment is None:
            raise PixelValidationError(
                f"Invalid timestamp format: {entry.timestamp}. Must be ISO 8601 "
                '(e.g. "2024-01-15T10:30:00.000Z")'
            )
        timestamp = format_timestamp(moment)
    else:
        timestamp = utc_now_iso()

    pixel = entry.pixel
    text = entry.text if entry.text is not None else document_text(pixel.statement, pixel.context)
    metadata = PixelMetadata(
        statement=pixel.statement,
        context=pixel.context,
        explanation=pixel.explanation,
        color_stage=pixel.color_stage,
        confidence_score=pixel.confidence_score,
        too_nuanced=pixel.too_nuanced,
        absolute_thinking=pixel.absolute_thinking,
        chat_id="",
        user_email="",
        timestamp=timestamp,
    )
    return text, metadata


async def import_pixels(
    store: EmbeddingStore,
    user_id: str,
    entries: Sequence[Any],
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> ImportSummary:
    summary = ImportSummary(total=len(entries))

    for i, raw in enumerate(entries, start=1):
        try:
            text, metadata = prepare_entry(raw)
            pixel_id = id_factory()
            await store.add(user_id, text, metadata, pixel_id)
        except PixelError as e:
            summary.failed += 1
            summary.errors.append((i, str(e)))
            logger.error("[%d/%d] Failed to import pixel: %s", i, summary.total, e)
            continue

        summary.succeeded += 1
        summary.imported_ids.append(pixel_id)
        statement = metadata.statement
        preview = statement[:50] + ("..." if len(statement) > 50 else "")
        logger.info("[%d/%d] Imported: %r", i, summary.total, preview)

    logger.info(
        "Import finished: %d succeeded, %d failed, %d total",
        summary.succeeded,
        summary.failed,
        summary.total,
    )
    return summary
