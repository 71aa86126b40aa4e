"""Stage vector and extraction-result schemas.

A stage vector scores a belief against ten developmental stages. Each score
lies in [-1, 1]: positive means aligned with the stage, negative means
counter-aligned. The model answer is either a pixel or an explicit decline,
never both and never neither.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from beliefpixels.errors import PixelValidationError

STAGE_NAMES: tuple[str, ...] = (
    "beige",
    "purple",
    "red",
    "blue",
    "orange",
    "green",
    "yellow",
    "turquoise",
    "coral",
    "teal",
)

StageScore = Annotated[float, Field(ge=-1.0, le=1.0)]


class StageVector(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    beige: StageScore = Field(..., description="Survival, instinct")
    purple: StageScore = Field(..., description="Tribal, magical thinking")
    red: StageScore = Field(..., description="Power, impulsivity, ego")
    blue: StageScore = Field(..., description="Order, rules, tradition")
    orange: StageScore = Field(..., description="Achievement, innovation")
    green: StageScore = Field(..., description="Equality, empathy")
    yellow: StageScore = Field(..., description="Systemic, integrative")
    turquoise: StageScore = Field(..., description="Holistic, lived experience")
    coral: StageScore = Field(..., description="Radical authenticity")
    teal: StageScore = Field(..., description="Systematic inner purification")

    def as_dict(self) -> dict[str, float]:
        """Scores keyed by stage, in canonical stage order."""
        return {name: float(getattr(self, name)) for name in STAGE_NAMES}


def validate_stage_vector(data: Any) -> StageVector:
    if isinstance(data, StageVector):
        return data
    try:
        return StageVector.model_validate(data)
    except SchemaError as e:
        raise PixelValidationError(f"Invalid color_stage: {e}") from e


def encode_color_stage(stage: StageVector) -> str:
    """Flatten a stage vector into the string stored in record metadata."""
    return json.dumps(stage.as_dict())


def decode_color_stage(raw: str | Mapping[str, Any]) -> StageVector:
    """Inverse of :func:`encode_color_stage`. Accepts an already-decoded mapping too."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PixelValidationError(f"color_stage is not valid JSON: {e}") from e
    return validate_stage_vector(raw)


class PixelDraft(BaseModel):
    """An extracted belief before it gets an id, embedding and timestamp."""

    statement: str = Field(..., min_length=1, description="Clear, concise belief statement")
    context: str = Field(..., min_length=1, description="When/why this belief arose")
    explanation: str = Field(default="", description="Why the belief maps to these stages")
    color_stage: StageVector
    confidence_score: float = Field(..., ge=0.1, le=1.0)
    too_nuanced: bool
    absolute_thinking: bool


class PixelExtraction(BaseModel):
    pixel: PixelDraft


class NoPixel(BaseModel):
    no_pixel: Literal[True] = True
    reason: str | None = None


ExtractionResult = Union[PixelExtraction, NoPixel]


def parse_extraction(data: Any) -> ExtractionResult:
    """Validate a decoded model answer into exactly one result variant."""
    if not isinstance(data, dict):
        raise PixelValidationError(
            f"Extraction output must be an object, got {type(data).__name__}"
        )

    has_pixel = data.get("pixel") is not None
    declined = data.get("no_pixel") is True

    if has_pixel and declined:
        raise PixelValidationError("Extraction output has both 'pixel' and 'no_pixel'")

    try:
        if has_pixel:
            return PixelExtraction.model_validate({"pixel": data["pixel"]})
        if declined:
            return NoPixel.model_validate({"no_pixel": True, "reason": data.get("reason")})
    except SchemaError as e:
        raise PixelValidationError(str(e)) from e

    raise PixelValidationError("Extraction output has neither 'pixel' nor 'no_pixel: true'")
