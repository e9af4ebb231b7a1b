from __future__ import annotations

"""Progress reporting for harvest lanes.

The scheduler only knows the ``ProgressSink`` protocol; how updates are shown
is up to the sink. ``LoggingProgressSink`` writes them to the run log.
"""

from dataclasses import dataclass
from typing import Dict, Protocol

from .utils import log_line


class ProgressSink(Protocol):
    def update(self, lane_id: int, completed: int, total: int, text: str) -> None: ...

    def finish(self, text: str = "All jobs finished!") -> None: ...


@dataclass
class LaneProgress:
    total: int
    completed: int = 0
    text: str = "waiting..."


class LoggingProgressSink:
    """Keep the latest state of every lane and log each change."""

    def __init__(self) -> None:
        self.lanes: Dict[int, LaneProgress] = {}

    def update(self, lane_id: int, completed: int, total: int, text: str) -> None:
        lane = self.lanes.setdefault(lane_id, LaneProgress(total=total))
        lane.total = total
        lane.completed = completed
        lane.text = text
        log_line(f"[LANE {lane_id}] {completed}/{total} - {text}")

    def finish(self, text: str = "All jobs finished!") -> None:
        for lane in self.lanes.values():
            lane.completed = max(lane.completed, lane.total or 1)
            lane.text = text
        log_line(text)


__all__ = [
    "ProgressSink",
    "LaneProgress",
    "LoggingProgressSink",
]
