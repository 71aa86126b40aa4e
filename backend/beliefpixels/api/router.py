"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from beliefpixels.api import health, pixel_generation, pixels

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(pixel_generation.router)
api_router.include_router(pixels.router)
