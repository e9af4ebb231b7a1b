from __future__ import annotations

"""Command line entry point for a harvest run."""

import argparse
import asyncio
from pathlib import Path
from typing import Sequence

from agility.harvester import config
from agility.harvester.config_validation import validate_runtime_config
from agility.harvester.errors import HarvestError
from agility.harvester.run import run_harvest
from agility.harvester.utils import ensure_dirs, log_line


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Harvest past agility events (participants, info, runs) into JSON.",
    )
    parser.add_argument("--root-site", default=None, help="Site root, overrides ROOT_SITE.")
    parser.add_argument(
        "--max-jobs",
        type=int,
        default=None,
        help="Maximum number of concurrent lanes (MAX_PARALLEL_JOBS, default 4).",
    )
    parser.add_argument("--index-file", type=Path, default=None)
    parser.add_argument("--output", type=Path, default=None)
    parser.add_argument(
        "--refresh-index",
        action="store_true",
        help="Scrape the event index again even if a cache file exists.",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window.")
    parser.add_argument(
        "--replay",
        type=Path,
        default=Path(config.REPLAY_DIR) if config.REPLAY_DIR else None,
        help="Directory of recorded pages (manifest.json + html) to harvest offline.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    ensure_dirs()
    if args.root_site:
        config.ROOT_SITE = args.root_site.strip()
    if args.max_jobs is not None:
        config.MAX_PARALLEL_JOBS = args.max_jobs

    try:
        validate_runtime_config("replay" if args.replay else "cli")
        result = asyncio.run(
            run_harvest(
                max_jobs=config.MAX_PARALLEL_JOBS,
                index_file=args.index_file,
                output_file=args.output,
                refresh_index=args.refresh_index,
                headless=False if args.headed else None,
                replay_dir=args.replay,
            )
        )
    except (HarvestError, ValueError) as exc:
        log_line(f"Harvest failed: {exc}")
        return 1

    log_line(
        f"Harvested {result['entries']} events into {result['output_file']} "
        f"(summary {result['summary_file']})"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
