"""Tests for the sample-data generator and its CLI."""

from __future__ import annotations

import asyncio
import json
import random
from datetime import datetime, timezone

from beliefpixels import cli
from beliefpixels.models.pixel import parse_timestamp
from beliefpixels.models.stage import STAGE_NAMES
from beliefpixels.pipeline.batch_import import import_pixels, load_entries, prepare_entry
from beliefpixels.pipeline.sample_data import (
    DEFAULT_START,
    STATEMENT_BANK,
    generate_sample_entries,
    linear_stage,
    work_stage,
)
from beliefpixels.presentation.points import filter_by_time_range


def test_one_entry_per_day_from_start():
    entries = generate_sample_entries(rng=random.Random(0))

    assert len(entries) == 20 * 7
    assert entries[0]["timestamp"] == "2024-01-01T00:00:00.000Z"
    assert entries[1]["timestamp"] == "2024-01-02T00:00:00.000Z"
    days = [parse_timestamp(e["timestamp"]) for e in entries]
    assert days == sorted(days)
    assert (days[-1] - days[0]).days == 139


def test_every_entry_passes_import_validation():
    entries = generate_sample_entries(rng=random.Random(1))
    for raw in entries:
        _, meta = prepare_entry(raw)
        assert meta.color_stage is not None
        assert meta.confidence_score == 0.7


def test_sample_covers_all_stages():
    entries = generate_sample_entries(rng=random.Random(2))
    dominant = {
        max(e["pixel"]["color_stage"].items(), key=lambda kv: kv[1])[0] for e in entries
    }
    assert dominant == set(STAGE_NAMES)


def test_transition_weeks_blend_two_stages():
    entries = generate_sample_entries(rng=random.Random(3))
    week_one = entries[7:14]
    blended = [e for e in week_one if sorted(e["pixel"]["color_stage"].values())[-2:] == [0.3, 0.7]]
    assert blended
    week_zero = entries[:7]
    assert all(max(e["pixel"]["color_stage"].values()) == 1.0 for e in week_zero)


def test_stage_progressions():
    assert [work_stage(w) for w in (0, 2, 12, 14, 15, 16, 19)] == [
        "beige", "purple", "yellow", "red", "red", "blue", "yellow",
    ]
    assert linear_stage(0) == "beige"
    assert linear_stage(19) == "teal"


def test_absolute_thinking_only_in_early_stages():
    entries = generate_sample_entries(weeks=2, rng=random.Random(4))
    assert all(e["pixel"]["absolute_thinking"] for e in entries[:7])


def test_statement_bank_is_complete():
    assert set(STATEMENT_BANK) == set(STAGE_NAMES)
    for themes in STATEMENT_BANK.values():
        assert set(themes) == {"work", "romantic", "community"}


def test_sample_imports_and_filters_by_month(tmp_path, store):
    path = tmp_path / "sample.json"
    assert cli.sample_main(["--output", str(path), "--weeks", "8", "--seed", "5"]) == 0

    entries = load_entries(path)
    summary = asyncio.run(import_pixels(store, "user-1", entries))
    assert summary.failed == 0
    assert summary.succeeded == 56

    records = asyncio.run(store.get_all("user-1"))
    january = filter_by_time_range(
        records.metadatas, "2024-01-01T00:00:00Z", "2024-01-31T23:59:59.999Z"
    )
    assert len(january) == 31


def test_sample_cli_start_option(tmp_path):
    path = tmp_path / "out" / "sample.json"
    code = cli.sample_main(["--output", str(path), "--weeks", "1", "--start", "2025-03-01"])

    assert code == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data) == 7
    assert data[0]["timestamp"] == "2025-03-01T00:00:00.000Z"


def test_sample_cli_rejects_bad_arguments(tmp_path):
    path = tmp_path / "sample.json"
    assert cli.sample_main(["--output", str(path), "--start", "someday"]) == 1
    assert cli.sample_main(["--output", str(path), "--weeks", "0"]) == 1
    assert not path.exists()


def test_default_start():
    assert DEFAULT_START == datetime(2024, 1, 1, tzinfo=timezone.utc)
