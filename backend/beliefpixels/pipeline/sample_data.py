"""Sample import data: one entry per day, drifting through all ten stages.

Entries cycle through three themes (work, romantic, community). Romantic and
community climb linearly from beige to teal over the whole run. Work climbs
to yellow, dips back to red, then recovers. Every second week is a
transition week whose vectors blend the current stage (0.3) with the next
one (0.7). The output is a list in the batch-import format.
"""

from __future__ import annotations

import json
import logging
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from beliefpixels.models.pixel import format_timestamp
from beliefpixels.models.stage import STAGE_NAMES

logger = logging.getLogger(__name__)

THEMES = ("work", "romantic", "community")
DEFAULT_START = datetime(2024, 1, 1, tzinfo=timezone.utc)
DEFAULT_WEEKS = 20
DAYS_PER_WEEK = 7

_EARLY_STAGES = frozenset({"beige", "purple", "red"})
_WORK_CLIMB = ("beige", "purple", "red", "blue", "orange", "green", "yellow")
_WORK_RECOVERY = ("blue", "orange", "green", "yellow")

# (statement, context) per stage and theme
STATEMENT_BANK: dict[str, dict[str, tuple[str, str]]] = {
    "beige": {
        "work": (
            "I don't know how I'm going to pay rent this month",
            "User is in immediate financial crisis and cannot think past the present.",
        ),
        "romantic": (
            "I'm just trying to get through each day without falling apart",
            "User is overwhelmed and focused on basic functioning.",
        ),
        "community": (
            "I have no one to turn to when things get really bad",
            "User feels isolated and without any support system.",
        ),
    },
    "purple": {
        "work": (
            "I keep getting the maintenance tasks while others get the interesting work",
            "User feels outside the team's core and wants to belong to it.",
        ),
        "romantic": (
            "I change how I act depending on how my partner reacts to me",
            "User seeks approval and adapts to keep the relationship safe.",
        ),
        "community": (
            "Everyone in this new city already has their group and I'm outside it",
            "User is looking for a tribe to be part of.",
        ),
    },
    "red": {
        "work": (
            "I hate that everyone expects replies to work emails at 11pm",
            "User resents the power others hold over their time.",
        ),
        "romantic": (
            "We keep having the same fight and I refuse to back down",
            "User is caught in a power struggle with their partner.",
        ),
        "community": (
            "People only listen when I'm the loudest one in the room",
            "User equates influence with dominance.",
        ),
    },
    "blue": {
        "work": (
            "If everyone just followed the process we wouldn't have these problems",
            "User trusts rules and order to fix dysfunction.",
        ),
        "romantic": (
            "A good partner keeps their commitments no matter what",
            "User holds the relationship to fixed duties and rules.",
        ),
        "community": (
            "Our neighborhood association needs clearer rules for everyone",
            "User looks to structure and tradition to hold the group together.",
        ),
    },
    "orange": {
        "work": (
            "I need to hit my targets this quarter to get promoted",
            "User is driven by achievement and measurable success.",
        ),
        "romantic": (
            "I'm treating dating like a project I can optimize",
            "User applies strategy and goals to relationships.",
        ),
        "community": (
            "Networking events are only worth it if they advance my career",
            "User values connections for their strategic payoff.",
        ),
    },
    "green": {
        "work": (
            "I want our team decisions to include everyone's voice",
            "User prizes consensus and fairness at work.",
        ),
        "romantic": (
            "We're learning to talk about our feelings without blaming each other",
            "User centers empathy and emotional honesty in the relationship.",
        ),
        "community": (
            "I started volunteering because everyone deserves support",
            "User is motivated by equality and care for others.",
        ),
    },
    "yellow": {
        "work": (
            "I can see how the incentives in our org produce the behavior I used to blame people for",
            "User reasons about systems rather than individuals.",
        ),
        "romantic": (
            "Our conflicts make sense once I see the patterns we both bring from our families",
            "User integrates several perspectives on the relationship.",
        ),
        "community": (
            "Different groups in town need different things and that's fine",
            "User holds competing value systems without needing one to win.",
        ),
    },
    "turquoise": {
        "work": (
            "My work feels like one small part of something much larger",
            "User experiences work as part of a living whole.",
        ),
        "romantic": (
            "Loving my partner feels connected to how I relate to everything",
            "User sees love as part of a wider interconnectedness.",
        ),
        "community": (
            "I feel the whole neighborhood as one organism",
            "User has a holistic, felt sense of community.",
        ),
    },
    "coral": {
        "work": (
            "I've stopped performing at work and just show up as I am",
            "User acts from radical authenticity at work.",
        ),
        "romantic": (
            "I tell my partner exactly what I feel even when it's uncomfortable",
            "User practices unguarded honesty in love.",
        ),
        "community": (
            "I no longer hide the parts of me that don't fit the group",
            "User chooses authenticity over belonging.",
        ),
    },
    "teal": {
        "work": (
            "Work flows naturally when I'm fully present with it",
            "User experiences work as a practice of presence.",
        ),
        "romantic": (
            "Love feels like a state of being rather than something I have to manage",
            "User experiences love without strategy or control.",
        ),
        "community": (
            "Connection happens on its own when I stop trying to create it",
            "User sees community as a natural expression of being.",
        ),
    },
}


def work_stage(week: int) -> str:
    """Work climbs to yellow, dips to red for two weeks, then recovers."""
    if week < 14:
        return _WORK_CLIMB[min(week // 2, len(_WORK_CLIMB) - 1)]
    if week < 16:
        return "red"
    return _WORK_RECOVERY[min(week - 16, len(_WORK_RECOVERY) - 1)]


def linear_stage(week: int, total_weeks: int = DEFAULT_WEEKS) -> str:
    index = int(week / total_weeks * len(STAGE_NAMES))
    return STAGE_NAMES[min(index, len(STAGE_NAMES) - 1)]


def stage_vector(weights: dict[str, float]) -> dict[str, float]:
    """Full ten-stage mapping, zero everywhere except ``weights``."""
    vector = {name: 0.0 for name in STAGE_NAMES}
    vector.update(weights)
    return vector


def _stage_for(theme: str, week: int, total_weeks: int) -> str:
    if theme == "work":
        return work_stage(week)
    return linear_stage(week, total_weeks)


def generate_sample_entries(
    weeks: int = DEFAULT_WEEKS,
    start: datetime = DEFAULT_START,
    rng: random.Random | None = None,
) -> list[dict[str, Any]]:
    """One batch-import entry per day for ``weeks`` weeks from ``start``."""
    rng = rng or random.Random()
    entries: list[dict[str, Any]] = []
    theme_index = 0

    for week in range(weeks):
        transition_week = week % 2 == 1
        for day in range(DAYS_PER_WEEK):
            theme = THEMES[theme_index % len(THEMES)]
            theme_index += 1

            current = _stage_for(theme, week, weeks)
            upcoming = _stage_for(theme, week + 1, weeks) if week < weeks - 1 else current

            if transition_week and upcoming != current:
                vector = stage_vector({current: 0.3, upcoming: 0.7})
                label = f"{current} → {upcoming}"
                dominant = upcoming
            else:
                vector = stage_vector({current: 1.0})
                label = current
                dominant = current

            statement, context = STATEMENT_BANK[dominant][theme]
            if rng.random() < 0.5:
                # Half the contexts carry their day number
                context = f"{context} Day {week * DAYS_PER_WEEK + day + 1}."

            timestamp = start + timedelta(days=week * DAYS_PER_WEEK + day)
            entries.append(
                {
                    "timestamp": format_timestamp(timestamp),
                    "pixel": {
                        "statement": statement,
                        "context": context,
                        "explanation": f"Reflection on {theme} theme showing {label} stage characteristics.",
                        "color_stage": vector,
                        "confidence_score": 0.7,
                        "too_nuanced": False,
                        "absolute_thinking": current in _EARLY_STAGES,
                    },
                }
            )

    logger.info("Generated %d sample entries over %d weeks", len(entries), weeks)
    return entries


def write_sample_file(path: Path | str, entries: list[dict[str, Any]]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")
    return out
