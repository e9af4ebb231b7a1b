from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from .completion import CompletionDetector
from .logging_utils import _harvest_event
from .models import FullEntry
from .page_client import PageClient
from .progress import ProgressSink

StatusFn = Callable[[str], None]
EntryProcessor = Callable[[PageClient, FullEntry, StatusFn], Awaitable[None]]


def lane_count(backlog_size: int, max_lanes: int) -> int:
    """Return K = min(N, max) with at least one lane for a non-empty backlog."""

    if backlog_size <= 0:
        return 0
    return max(1, min(backlog_size, max_lanes))


class _NullProgress:
    def update(self, lane_id: int, completed: int, total: int, text: str) -> None:
        return None

    def finish(self, text: str = "All jobs finished!") -> None:
        return None


class Scheduler:
    """Run ``process`` over ``records`` on one lane per page.

    Each lane loops: claim the next backlog position from the detector,
    process that record on its own page, release, repeat until the cursor is
    exhausted. Lanes never wait for each other, so backlog order fixes the
    order in which work is claimed, not the order in which it completes.

    The first exception raised by any lane cancels its siblings and is
    re-raised from ``run``; the detector then never finalises. A non-empty
    backlog needs at least one page.
    """

    def __init__(
        self,
        records: Sequence[FullEntry],
        pages: Sequence[PageClient],
        process: EntryProcessor,
        *,
        detector: Optional[CompletionDetector] = None,
        progress: Optional[ProgressSink] = None,
    ) -> None:
        if detector is not None and detector.total != len(records):
            raise ValueError("detector total does not match the backlog size")
        self.records = records
        self.pages = list(pages[: lane_count(len(records), len(pages))])
        if len(records) and not self.pages:
            raise ValueError("no lane pages for a non-empty backlog")
        self.process = process
        self.detector = detector or CompletionDetector(len(records))
        self.progress: ProgressSink = progress or _NullProgress()
        self.completed_per_lane: List[int] = [0] * len(self.pages)

    @property
    def total_per_lane(self) -> int:
        if not self.pages:
            return 0
        return len(self.records) // len(self.pages)

    async def run(self) -> None:
        _harvest_event(
            "lane",
            step="spawn",
            lanes=len(self.pages),
            backlog=len(self.records),
        )
        if not self.pages:
            await self.detector.check()
            return

        tasks = [
            asyncio.create_task(self._lane(lane_id, page), name=f"lane-{lane_id}")
            for lane_id, page in enumerate(self.pages)
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _lane(self, lane_id: int, page: PageClient) -> None:
        total = self.total_per_lane
        self.progress.update(lane_id, 0, total, "waiting...")

        while True:
            index = self.detector.claim()
            if index is None:
                break
            record = self.records[index]
            completed = self.completed_per_lane[lane_id]

            def status(text: str, *, _completed: int = completed) -> None:
                self.progress.update(lane_id, _completed, total, text)

            _harvest_event("lane", step="claim", lane=lane_id, index=index, entry=record.entry.id)
            try:
                await self.process(page, record, status)
                self.completed_per_lane[lane_id] += 1
                self.progress.update(
                    lane_id,
                    self.completed_per_lane[lane_id],
                    total,
                    f"{record.entry.title} - done",
                )
            except BaseException as exc:
                self.detector.fail(exc)
                raise
            finally:
                await self.detector.release()

        _harvest_event(
            "lane",
            step="exhausted",
            lane=lane_id,
            completed=self.completed_per_lane[lane_id],
        )


__all__ = ["Scheduler", "EntryProcessor", "StatusFn", "lane_count"]
