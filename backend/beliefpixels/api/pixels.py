"""GET/DELETE /api/pixels and GET /api/pixels/projection for the current user."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from beliefpixels.dependencies import get_current_user_id, get_store
from beliefpixels.errors import StoreError
from beliefpixels.models.responses import DeleteResponse, PixelsResponse, ProjectionResponse
from beliefpixels.presentation.points import build_points, filter_by_time_range
from beliefpixels.store.embedding_store import EmbeddingStore

router = APIRouter()
logger = logging.getLogger(__name__)

_UNAVAILABLE = "Pixel store unavailable"


def _store_unavailable(action: str, user_id: str, exc: StoreError) -> HTTPException:
    # Full diagnostics stay in the log; the client gets a generic message
    logger.error("Store error while %s for user %s: %s", action, user_id, exc)
    return HTTPException(status_code=503, detail=_UNAVAILABLE)


@router.get("/pixels", response_model=PixelsResponse)
async def list_pixels(
    user_id: str = Depends(get_current_user_id),
    store: EmbeddingStore = Depends(get_store),
) -> PixelsResponse:
    try:
        records = await store.get_all(user_id)
    except StoreError as e:
        raise _store_unavailable("fetching pixels", user_id, e) from e

    return PixelsResponse(
        ids=records.ids,
        embeddings=records.embeddings,
        documents=records.documents,
        metadatas=records.metadatas,
    )


@router.delete("/pixels", response_model=DeleteResponse, response_model_exclude_none=True)
async def delete_pixels(
    id: str | None = Query(default=None, description="Pixel id; omit to delete all"),
    user_id: str = Depends(get_current_user_id),
    store: EmbeddingStore = Depends(get_store),
) -> DeleteResponse:
    try:
        if id:
            await store.delete(user_id, id)
            return DeleteResponse(success=True, deleted_id=id)
        count = await store.delete_all(user_id)
    except StoreError as e:
        raise _store_unavailable("deleting pixels", user_id, e) from e
    return DeleteResponse(success=True, deleted_count=count)


@router.get("/pixels/projection", response_model=ProjectionResponse)
async def pixel_projection(
    start: str | None = Query(default=None, description="ISO-8601 lower bound, inclusive"),
    end: str | None = Query(default=None, description="ISO-8601 upper bound, inclusive"),
    scale: float | None = Query(default=None, gt=0),
    compact: bool = False,
    user_id: str = Depends(get_current_user_id),
    store: EmbeddingStore = Depends(get_store),
) -> ProjectionResponse:
    if scale is None:
        scale = 3.0 if compact else 5.0

    try:
        records = await store.get_all(user_id)
    except StoreError as e:
        raise _store_unavailable("projecting pixels", user_id, e) from e

    # Project the full set first so a narrower range does not move points
    points = build_points(records, scale=scale)
    total = len(points)
    if start is not None or end is not None:
        try:
            points = filter_by_time_range(points, start, end)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    return ProjectionResponse(points=points, total=total, scale=scale)
