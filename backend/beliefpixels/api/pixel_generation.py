"""POST /api/pixel-generation: extract, store and mark a chat batch.
POST /api/extract: extraction preview, nothing stored or marked."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from beliefpixels.dependencies import get_coordinator, get_extractor
from beliefpixels.errors import ExtractionError, LLMNotConfiguredError
from beliefpixels.extraction.extractor import Extractor
from beliefpixels.models.requests import ExtractRequest, PixelGenerationRequest
from beliefpixels.models.responses import ProcessResponse
from beliefpixels.pipeline.coordinator import ProcessingCoordinator

router = APIRouter()
logger = logging.getLogger(__name__)

_FAILED = ProcessResponse(status="error", message="Failed to process request")


@router.post("/pixel-generation", response_model=ProcessResponse, response_model_exclude_none=True)
async def pixel_generation(
    req: PixelGenerationRequest,
    coordinator: ProcessingCoordinator = Depends(get_coordinator),
):
    outcome = await coordinator.process(
        chat_id=req.chat_id,
        messages=req.messages,
        user_id=req.user_id,
        user_email=req.user_email,
    )
    if not outcome.ok:
        return JSONResponse(status_code=500, content=_FAILED.model_dump(exclude_none=True))

    return ProcessResponse(
        status="done",
        result=outcome.result.model_dump(exclude_none=True) if outcome.result else None,
        pixel_id=outcome.pixel_id,
    )


@router.post("/extract", response_model=ProcessResponse, response_model_exclude_none=True)
async def extract_preview(
    req: ExtractRequest,
    extractor: Extractor = Depends(get_extractor),
):
    try:
        result = await extractor.extract(req.messages)
    except (ExtractionError, LLMNotConfiguredError) as e:
        logger.warning("Extraction preview failed: %s", e)
        return JSONResponse(status_code=500, content=_FAILED.model_dump(exclude_none=True))

    return ProcessResponse(status="done", result=result.model_dump(exclude_none=True))
