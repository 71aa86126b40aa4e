"""Extraction → storage → mark-processed, in that order.

A batch's messages are marked processed only after its pixel (if any) is
durably stored. A storage failure aborts the batch before marking, so the
caller can resubmit the identical batch. A crash between a successful store
and the mark step yields a duplicate pixel on retry; with
``deterministic_ids`` the retry reuses the same id instead.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from beliefpixels.extraction.extractor import Extractor
from beliefpixels.models.pixel import PixelMetadata, document_text, utc_now_iso
from beliefpixels.models.requests import ChatMessage
from beliefpixels.models.stage import ExtractionResult, PixelExtraction
from beliefpixels.pipeline.processed_log import MessageMarker
from beliefpixels.store.embedding_store import EmbeddingStore

logger = logging.getLogger(__name__)

# Namespace for batch-derived pixel ids
_PIXEL_ID_NAMESPACE = uuid.UUID("0b6f1d0e-5a43-4c6e-9a55-3f2f1f6c9d21")


def batch_pixel_id(chat_id: str, message_ids: Sequence[str]) -> str:
    """Same chat + same message set → same id."""
    key = chat_id + "|" + ",".join(sorted(message_ids))
    return str(uuid.uuid5(_PIXEL_ID_NAMESPACE, key))


@dataclass
class ProcessingOutcome:
    status: Literal["done", "error"]
    result: ExtractionResult | None = None
    pixel_id: str | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "done"


class ProcessingCoordinator:
    def __init__(
        self,
        extractor: Extractor,
        store: EmbeddingStore,
        marker: MessageMarker,
        deterministic_ids: bool = False,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self.extractor = extractor
        self.store = store
        self.marker = marker
        self.deterministic_ids = deterministic_ids
        self.clock = clock

    async def process(
        self,
        chat_id: str,
        messages: Sequence[ChatMessage],
        user_id: str,
        user_email: str = "",
    ) -> ProcessingOutcome:
        message_ids = [m.id for m in messages if m.id]
        logger.info(
            "Processing chat %s for user %s (%d messages)", chat_id, user_id, len(messages)
        )

        try:
            result = await self.extractor.extract(messages)

            pixel_id = None
            if isinstance(result, PixelExtraction):
                pixel_id = await self._store_pixel(result, chat_id, message_ids, user_id, user_email)

            # Commit point: only reached once the pixel (if any) is stored
            if message_ids:
                await self.marker.mark_processed(message_ids)
        except Exception as e:
            logger.exception("Processing failed for chat %s: %s", chat_id, e)
            return ProcessingOutcome(status="error", error=str(e))

        return ProcessingOutcome(status="done", result=result, pixel_id=pixel_id)

    async def _store_pixel(
        self,
        extraction: PixelExtraction,
        chat_id: str,
        message_ids: list[str],
        user_id: str,
        user_email: str,
    ) -> str:
        draft = extraction.pixel
        metadata = PixelMetadata.from_draft(
            draft,
            chat_id=chat_id,
            user_email=user_email,
            timestamp=self.clock(),
        )
        if self.deterministic_ids and message_ids:
            pixel_id = batch_pixel_id(chat_id, message_ids)
        else:
            pixel_id = str(uuid.uuid4())

        await self.store.add(
            user_id,
            document_text(draft.statement, draft.context),
            metadata,
            pixel_id,
        )
        return pixel_id
