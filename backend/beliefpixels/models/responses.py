"""API response models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from beliefpixels.models.pixel import PixelMetadata
from beliefpixels.presentation.points import PixelPoint


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class ProcessResponse(BaseModel):
    status: Literal["done", "error"]
    result: dict[str, Any] | None = None
    pixel_id: str | None = Field(default=None, serialization_alias="pixelId")
    message: str | None = None


class PixelsResponse(BaseModel):
    ids: list[str] = Field(default_factory=list)
    embeddings: list[list[float]] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    metadatas: list[PixelMetadata] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    success: bool = True
    deleted_id: str | None = Field(default=None, serialization_alias="deletedId")
    deleted_count: int | None = Field(default=None, serialization_alias="deletedCount")


class ProjectionResponse(BaseModel):
    points: list[PixelPoint] = Field(default_factory=list)
    total: int = 0
    scale: float = 5.0
