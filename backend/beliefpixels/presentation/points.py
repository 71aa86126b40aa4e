"""Projected, colored pixel points and time-range filtering."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar

import numpy as np
from pydantic import BaseModel, Field

from beliefpixels.models.pixel import PixelRecords, parse_timestamp
from beliefpixels.presentation.palette import (
    color_for_stage,
    most_prominent_dimension,
    top_dimensions_by_absolute_value,
)
from beliefpixels.projection.pca import DEFAULT_SCALE, project_embeddings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PixelPoint(BaseModel):
    id: str
    position: tuple[float, float, float]
    color: str
    prominent_stage: str | None = None
    top_stages: list[tuple[str, float]] = Field(default_factory=list)
    statement: str = "Untitled Pixel"
    document: str = ""
    confidence_score: float | None = None
    timestamp: str = ""
    color_stage: dict[str, float] | None = None


def build_points(
    records: PixelRecords,
    scale: float = DEFAULT_SCALE,
    rng: np.random.Generator | None = None,
) -> list[PixelPoint]:
    """Project every record's embedding and attach its display attributes."""
    if len(records) == 0:
        return []

    positions = project_embeddings(records.embeddings, scale=scale, rng=rng)

    points = []
    for i, pixel_id in enumerate(records.ids):
        meta = records.metadatas[i]
        stage = meta.color_stage
        prominent = most_prominent_dimension(stage)
        x, y, z = (float(c) for c in positions[i])
        points.append(
            PixelPoint(
                id=pixel_id,
                position=(x, y, z),
                color=color_for_stage(prominent),
                prominent_stage=prominent,
                top_stages=top_dimensions_by_absolute_value(stage, 2),
                statement=meta.statement or "Untitled Pixel",
                document=records.documents[i],
                confidence_score=meta.confidence_score or None,
                timestamp=meta.timestamp,
                color_stage=stage.as_dict() if stage is not None else None,
            )
        )
    logger.debug("Built %d pixel points (scale=%.1f)", len(points), scale)
    return points


def _default_timestamp(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("timestamp")
    return getattr(item, "timestamp", None)


def filter_by_time_range(
    pixels: Iterable[T],
    start: datetime | str | None,
    end: datetime | str | None,
    timestamp_of: Callable[[T], Any] = _default_timestamp,
) -> list[T]:
    """Keep pixels whose timestamp lies in [start, end], bounds inclusive.

    A None bound is open. Pixels without a parseable timestamp are dropped.
    """
    lower = parse_timestamp(start) if start is not None else None
    upper = parse_timestamp(end) if end is not None else None
    if start is not None and lower is None:
        raise ValueError(f"Unparseable start bound: {start!r}")
    if end is not None and upper is None:
        raise ValueError(f"Unparseable end bound: {end!r}")

    kept = []
    for pixel in pixels:
        moment = parse_timestamp(timestamp_of(pixel))
        if moment is None:
            continue
        if lower is not None and moment < lower:
            continue
        if upper is not None and moment > upper:
            continue
        kept.append(pixel)
    return kept
