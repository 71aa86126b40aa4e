"""System prompts per task."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from beliefpixels.config import settings

_PROMPT_DIR = Path(__file__).parent

_TASK_PROMPT_FILES = {
    "extract": "belief_extraction.md",
}


@lru_cache(maxsize=8)
def _read_prompt(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def get_prompt_template(task: str) -> str:
    """System prompt for a task. ``EXTRACTION_PROMPT_PATH`` overrides the packaged file."""
    if settings.extraction_prompt_path:
        return _read_prompt(settings.extraction_prompt_path)
    filename = _TASK_PROMPT_FILES.get(task, _TASK_PROMPT_FILES["extract"])
    return _read_prompt(str(_PROMPT_DIR / filename))


def get_all_templates() -> dict[str, str]:
    return {task: get_prompt_template(task) for task in _TASK_PROMPT_FILES}
