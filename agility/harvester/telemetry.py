"""Run summaries written next to the harvest output."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .models import FullEntry
from .utils import save_json_file


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


class RunTelemetry:
    """Collect per-run counters and persist them as ``run_<id>.json``."""

    def __init__(self, mode: str, runs_dir: Optional[Path] = None) -> None:
        self.run_id = f"{_ts()}_{uuid.uuid4().hex[:8]}"
        self.mode = mode
        self.runs_dir = Path(runs_dir) if runs_dir is not None else config.RUNS_DIR
        self.started_at = time.time()
        self.summary: Dict[str, Any] = defaultdict(int)
        self.lanes: List[int] = []

    def record_entries(self, records: Sequence[FullEntry]) -> None:
        self.summary["entries"] = len(records)
        for record in records:
            if record.entry.is_cancelled:
                self.summary["cancelled"] += 1
            if record.participants is not None:
                self.summary["with_participants"] += 1
                self.summary["participants"] += len(record.participants)
            if record.info is not None:
                self.summary["with_info"] += 1
            if record.runs is not None:
                self.summary["with_runs"] += 1
                self.summary["runs"] += len(record.runs)

    def record_lanes(self, completed_per_lane: Sequence[int]) -> None:
        self.lanes = list(completed_per_lane)

    def finalize(self, extra: Optional[Dict[str, Any]] = None) -> Path:
        payload = {
            "run_id": self.run_id,
            "mode": self.mode,
            "started_at": self.started_at,
            "ended_at": time.time(),
            "lanes": self.lanes,
            "summary": dict(self.summary),
            **(extra or {}),
        }
        path = self.runs_dir / f"run_{self.run_id}.json"
        save_json_file(path, payload)
        return path


__all__ = ["RunTelemetry"]
