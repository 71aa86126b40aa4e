"""Belief extraction: chat transcript → language model → validated result.

Two stages:
1. ``strip_code_fence``: pure text normalization of the raw model answer.
2. ``parse_model_output``: JSON decode + schema validation into a
   ``PixelExtraction`` or ``NoPixel``.

No retries happen here. Any provider failure, malformed JSON or schema
violation is raised as ``ExtractionError``; a legitimate decline from the
model comes back as ``NoPixel``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Awaitable, Callable, Sequence

from beliefpixels.errors import ExtractionError, PixelValidationError
from beliefpixels.models.requests import ChatMessage
from beliefpixels.models.stage import ExtractionResult, parse_extraction

logger = logging.getLogger(__name__)

EMPTY_TRANSCRIPT = "No messages"

CompleteFn = Callable[[str, str], Awaitable[str]]


def format_transcript(messages: Sequence[ChatMessage]) -> str:
    """One ``role: text`` line per message; non-text parts contribute nothing."""
    lines = []
    for msg in messages:
        text = " ".join(
            (part.text or "") if part.type == "text" else "" for part in msg.parts
        )
        lines.append(f"{msg.role}: {text}")
    return "\n".join(lines) or EMPTY_TRANSCRIPT


def build_user_prompt(messages: Sequence[ChatMessage]) -> str:
    return f"Chat log:\n{format_transcript(messages)}"


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)
    return cleaned.strip()


def parse_model_output(raw_text: str) -> ExtractionResult:
    cleaned = strip_code_fence(raw_text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Model output is not valid JSON: {e}", raw_text=raw_text) from e

    try:
        return parse_extraction(data)
    except PixelValidationError as e:
        raise ExtractionError(f"Model output failed validation: {e}", raw_text=raw_text) from e


async def _default_complete(system: str, prompt: str) -> str:
    from beliefpixels.llm.client import complete_text

    return await complete_text(system, prompt, task="extract")


class Extractor:
    """Runs the belief-extraction prompt over a conversation."""

    def __init__(
        self,
        complete: CompleteFn | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self._complete = complete or _default_complete
        self._system_prompt = system_prompt

    @property
    def system_prompt(self) -> str:
        if self._system_prompt is None:
            from beliefpixels.llm.prompts import get_prompt_template

            self._system_prompt = get_prompt_template("extract")
        return self._system_prompt

    async def extract(self, messages: Sequence[ChatMessage]) -> ExtractionResult:
        prompt = build_user_prompt(messages)
        try:
            raw_text = await self._complete(self.system_prompt, prompt)
        except Exception as e:
            raise ExtractionError(f"Language model call failed: {e}") from e

        logger.debug("Extraction raw output (%d chars): %s", len(raw_text), raw_text[:500])
        result = parse_model_output(raw_text)
        logger.info("Extraction finished: %s", type(result).__name__)
        return result
