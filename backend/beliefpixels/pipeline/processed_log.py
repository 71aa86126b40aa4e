"""Processed-message marks: JSONL-backed stand-in for the chat store.

The chat database that owns messages lives outside this service; the
coordinator only needs ``mark_processed``. Each call appends one line:
``{"message_ids": [...], "marked_at": "..."}``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from beliefpixels.models.pixel import utc_now_iso

logger = logging.getLogger(__name__)


class MessageMarker(Protocol):
    async def mark_processed(self, message_ids: Sequence[str]) -> None: ...


class ProcessedMessageLog:
    """Append-only log of processed message ids."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    async def mark_processed(self, message_ids: Sequence[str]) -> None:
        await asyncio.to_thread(self._append, list(message_ids))

    def _append(self, message_ids: list[str]) -> None:
        line = json.dumps({"message_ids": message_ids, "marked_at": utc_now_iso()})
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        logger.info("Marked %d messages processed", len(message_ids))

    def processed_ids(self) -> set[str]:
        if not self.path.exists():
            return set()
        ids: set[str] = set()
        with open(self.path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    ids.update(json.loads(line).get("message_ids", []))
        return ids

    def is_processed(self, message_id: str) -> bool:
        return message_id in self.processed_ids()
