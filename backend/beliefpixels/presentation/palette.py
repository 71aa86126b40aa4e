"""Stage → display color."""

from __future__ import annotations

from collections.abc import Mapping

from beliefpixels.models.stage import STAGE_NAMES, StageVector

DEFAULT_COLOR = "#808080"

COLOR_PALETTE: dict[str, str] = {
    "beige": "#f5f5dc",
    "purple": "#800080",
    "red": "#ff0000",
    "blue": "#0000ff",
    "orange": "#ffa500",
    "green": "#008000",
    "yellow": "#ffff00",
    "turquoise": "#40e0d0",
    "coral": "#ff7f50",
    "teal": "#008080",
}


def color_for_stage(stage: str | None, default: str = DEFAULT_COLOR) -> str:
    if not stage:
        return default
    return COLOR_PALETTE.get(stage.lower(), default)


def _scores(stage_vector: StageVector | Mapping[str, float] | None) -> dict[str, float]:
    if stage_vector is None:
        return {}
    if isinstance(stage_vector, StageVector):
        return stage_vector.as_dict()
    return {str(k): float(v) for k, v in stage_vector.items()}


def most_prominent_dimension(
    stage_vector: StageVector | Mapping[str, float] | None,
) -> str | None:
    """Stage with the largest absolute score; ties go to the earlier canonical stage.

    Returns None for a missing or empty vector so the caller can fall back
    to a neutral color.
    """
    scores = _scores(stage_vector)
    if not scores:
        return None

    ordered = [name for name in STAGE_NAMES if name in scores]
    ordered += [name for name in scores if name not in STAGE_NAMES]

    best: str | None = None
    best_abs = -1.0
    for name in ordered:
        magnitude = abs(scores[name])
        if magnitude > best_abs:
            best, best_abs = name, magnitude
    return best


def top_dimensions_by_absolute_value(
    stage_vector: StageVector | Mapping[str, float] | None,
    k: int = 2,
) -> list[tuple[str, float]]:
    """The ``k`` highest-magnitude (stage, score) pairs, largest first."""
    scores = _scores(stage_vector)
    ranked = sorted(scores.items(), key=lambda item: abs(item[1]), reverse=True)
    return ranked[: max(k, 0)]


def color_for_vector(stage_vector: StageVector | Mapping[str, float] | None) -> str:
    return color_for_stage(most_prominent_dimension(stage_vector))
