"""Command-line tools.

Usage:
    belief-pixels-import <user_id> <json_file>
    belief-pixels-sample [--output PATH] [--weeks N] [--start ISO] [--seed N]

The importer exits 1 if the file is unreadable or any entry failed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys

from dotenv import load_dotenv

from beliefpixels.errors import PixelError
from beliefpixels.models.pixel import parse_timestamp
from beliefpixels.pipeline.batch_import import import_pixels, load_entries
from beliefpixels.pipeline.sample_data import (
    DEFAULT_START,
    DEFAULT_WEEKS,
    generate_sample_entries,
    write_sample_file,
)

logger = logging.getLogger("beliefpixels.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="belief-pixels-import",
        description="Batch import pixels from a JSON file into the vector store",
    )
    parser.add_argument("user_id", help="Owner of the imported pixels")
    parser.add_argument("json_file", help="Path to a JSON array of {text?, timestamp?, pixel}")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from beliefpixels.dependencies import build_store

    try:
        entries = load_entries(args.json_file)
    except (OSError, ValueError, PixelError) as e:
        logger.error("Fatal error reading %s: %s", args.json_file, e)
        return 1

    logger.info("Found %d pixels to import for user %s", len(entries), args.user_id)
    summary = asyncio.run(import_pixels(build_store(), args.user_id, entries))

    print("Summary:")
    print(f"  Successfully imported: {summary.succeeded}")
    print(f"  Failed: {summary.failed}")
    print(f"  Total: {summary.total}")
    return 1 if summary.failed else 0


def build_sample_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="belief-pixels-sample",
        description="Write sample pixels, one per day, in the batch import format",
    )
    parser.add_argument("--output", default="sample-month-data.json", help="Where to write the JSON array")
    parser.add_argument("--weeks", type=int, default=DEFAULT_WEEKS)
    parser.add_argument("--start", default=None, help="ISO-8601 date of the first entry")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    return parser


def sample_main(argv: list[str] | None = None) -> int:
    args = build_sample_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    start = DEFAULT_START
    if args.start:
        start = parse_timestamp(args.start)
        if start is None:
            logger.error("Invalid --start value: %s", args.start)
            return 1
    if args.weeks < 1:
        logger.error("--weeks must be at least 1, got %d", args.weeks)
        return 1

    entries = generate_sample_entries(args.weeks, start, random.Random(args.seed))
    try:
        path = write_sample_file(args.output, entries)
    except OSError as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1

    print(f"Generated {len(entries)} entries")
    print(f"Saved to: {path}")
    print(f"Date range: {entries[0]['timestamp']} to {entries[-1]['timestamp']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
