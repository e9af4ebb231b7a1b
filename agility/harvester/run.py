"""Playwright-driven harvester for the agility event site.

Workflow:

- Sign in once on a single page (``session.login``).
- Load the event index from the cache file, or scrape the past-events listing
  and cache it.
- Open K = min(N, MAX_PARALLEL_JOBS) lane pages in the same browser context so
  they share the login session.
- Each lane claims events from the shared backlog and runs the participants,
  info and runs phases for them.
- Once the backlog has drained, write the full dataset in index order and a
  run summary.

Any fatal error stops every lane and is re-raised from ``run_harvest``;
nothing but the index cache survives an aborted run.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import async_playwright

from . import config
from .completion import CompletionDetector
from .extractor import make_entry_processor
from .index import load_or_acquire_index
from .logging_utils import _error_event, _harvest_event
from .models import FullEntry, IndexEntry
from .navigation import Sleep
from .page_client import PageClient, PlaywrightPage
from .progress import LoggingProgressSink, ProgressSink
from .replay import ReplayPage
from .scheduler import Scheduler, lane_count
from .session import login
from .telemetry import RunTelemetry
from .utils import ensure_dirs, log_line, save_json_file, setup_run_logger


async def harvest_backlog(
    backlog: Sequence[IndexEntry],
    pages: Sequence[PageClient],
    *,
    output_file: Path,
    progress: Optional[ProgressSink] = None,
    telemetry: Optional[RunTelemetry] = None,
    sleep: Sleep = asyncio.sleep,
) -> List[FullEntry]:
    """Extract every entry of ``backlog`` across ``pages`` and write ``output_file``.

    One lane runs per page (at most one per entry). The output is written
    exactly once, by the completion detector, after the last lane released
    its last entry.
    """

    records = [FullEntry(entry) for entry in backlog]

    def finalize() -> None:
        save_json_file(output_file, [record.to_dict() for record in records])
        if telemetry is not None:
            telemetry.record_lanes(scheduler.completed_per_lane)
        if progress is not None:
            progress.finish()
        log_line(f"All jobs finished! see {output_file}")

    detector = CompletionDetector(len(records), on_finalize=finalize)
    scheduler = Scheduler(
        records,
        pages,
        make_entry_processor(sleep=sleep),
        detector=detector,
        progress=progress,
    )
    log_line(f"Spawning {len(scheduler.pages)} jobs...")
    await scheduler.run()
    return records


async def _harvest_live(
    *,
    index_path: Path,
    output_path: Path,
    max_jobs: int,
    refresh_index: bool,
    headless: bool,
    progress: ProgressSink,
    telemetry: RunTelemetry,
) -> List[FullEntry]:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        context = await browser.new_context()
        try:
            page = await PlaywrightPage.open(context)
            await login(page)
            backlog = await load_or_acquire_index(page, index_path, refresh=refresh_index)
            pages = [
                await PlaywrightPage.open(context)
                for _ in range(lane_count(len(backlog), max_jobs))
            ]
            return await harvest_backlog(
                backlog,
                pages,
                output_file=output_path,
                progress=progress,
                telemetry=telemetry,
            )
        finally:
            await context.close()
            await browser.close()


async def _harvest_replay(
    replay_dir: Path,
    *,
    index_path: Path,
    output_path: Path,
    max_jobs: int,
    refresh_index: bool,
    progress: ProgressSink,
    telemetry: RunTelemetry,
) -> List[FullEntry]:
    index_page = ReplayPage.from_directory(replay_dir)
    backlog = await load_or_acquire_index(index_page, index_path, refresh=refresh_index)
    pages = [
        ReplayPage.from_directory(replay_dir)
        for _ in range(lane_count(len(backlog), max_jobs))
    ]
    return await harvest_backlog(
        backlog,
        pages,
        output_file=output_path,
        progress=progress,
        telemetry=telemetry,
    )


async def run_harvest(
    *,
    root_site: Optional[str] = None,
    max_jobs: Optional[int] = None,
    index_file: Optional[Path] = None,
    output_file: Optional[Path] = None,
    refresh_index: bool = False,
    headless: Optional[bool] = None,
    replay_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Public entrypoint: run one complete harvest and return a summary."""

    ensure_dirs()
    log_path = setup_run_logger()

    if root_site:
        config.ROOT_SITE = root_site.strip()
    jobs = max(1, max_jobs if max_jobs is not None else config.MAX_PARALLEL_JOBS)
    index_path = Path(index_file) if index_file is not None else config.INDEX_FILE
    output_path = Path(output_file) if output_file is not None else config.OUTPUT_FILE

    telemetry = RunTelemetry(mode="replay" if replay_dir else "live")
    progress = LoggingProgressSink()
    _harvest_event(
        "state",
        phase="start",
        run_id=telemetry.run_id,
        mode=telemetry.mode,
        max_jobs=jobs,
        index_file=str(index_path),
        output_file=str(output_path),
    )

    try:
        if replay_dir is not None:
            records = await _harvest_replay(
                Path(replay_dir),
                index_path=index_path,
                output_path=output_path,
                max_jobs=jobs,
                refresh_index=refresh_index,
                progress=progress,
                telemetry=telemetry,
            )
        else:
            records = await _harvest_live(
                index_path=index_path,
                output_path=output_path,
                max_jobs=jobs,
                refresh_index=refresh_index,
                headless=config.HEADLESS if headless is None else headless,
                progress=progress,
                telemetry=telemetry,
            )
    except Exception as exc:
        _error_event(exc, run_id=telemetry.run_id, mode=telemetry.mode)
        log_line(f"[RUN][FATAL] Harvest aborted: {exc}")
        raise

    telemetry.record_entries(records)
    summary_path = telemetry.finalize({"output_file": str(output_path), "log_file": str(log_path)})
    return {
        "run_id": telemetry.run_id,
        "entries": len(records),
        "output_file": str(output_path),
        "summary_file": str(summary_path),
        "log_file": str(log_path),
    }


__all__ = ["harvest_backlog", "run_harvest"]
