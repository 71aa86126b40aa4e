"""Task → model selection. Unlisted tasks run on the cheap tier."""

from __future__ import annotations

from beliefpixels.config import settings

_TASK_TIERS = {
    "extract": "mid",
}


def get_model_for_task(task: str) -> str:
    tier = _TASK_TIERS.get(task, "cheap")
    return getattr(settings, f"model_{tier}")
