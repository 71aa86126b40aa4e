"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from beliefpixels import __version__
from beliefpixels.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@router.get("/prompts")
async def prompts() -> dict[str, str]:
    from beliefpixels.llm.prompts import get_all_templates

    return get_all_templates()
