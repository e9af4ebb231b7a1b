from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from . import config

LOGGER = logging.getLogger("agility")
_LOGGER_INITIALISED = False


def _configure_logger(log_path: Path | None) -> None:
    """Configure the shared logger for stdout and, optionally, ``log_path``."""

    global _LOGGER_INITIALISED

    for handler in list(LOGGER.handlers):
        LOGGER.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # noqa: BLE001
            continue

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    LOGGER.addHandler(stream_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        LOGGER.addHandler(file_handler)

    LOGGER.setLevel(logging.INFO)
    LOGGER.propagate = False

    _LOGGER_INITIALISED = True


def _ensure_logger() -> None:
    """Initialise a stdout-only logger lazily."""

    if _LOGGER_INITIALISED:
        return
    _configure_logger(None)


def setup_run_logger() -> Path:
    """Rotate to a fresh timestamped log file for the current run."""

    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    log_path = config.LOG_DIR / f"harvest_{timestamp}.log"
    _configure_logger(log_path)
    LOGGER.info("Logging to %s", log_path)
    return log_path


def ensure_dirs() -> None:
    """Ensure that the directories the harvester writes into exist."""

    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)


def log_line(message: str) -> None:
    """Write a timestamped log line to stdout and the active log file."""

    _ensure_logger()
    LOGGER.info(message)


def load_json_file(path: Path) -> Any:
    """Return the decoded JSON document at ``path``.

    Raises ``FileNotFoundError`` or ``json.JSONDecodeError`` for callers that
    need to tell an absent file from a corrupt one.
    """

    with Path(path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def save_json_file(path: Path, payload: Any) -> None:
    """Persist ``payload`` as indented JSON, replacing ``path`` atomically."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)

    tmp_path.replace(path)


__all__ = [
    "LOGGER",
    "setup_run_logger",
    "ensure_dirs",
    "log_line",
    "load_json_file",
    "save_json_file",
]
