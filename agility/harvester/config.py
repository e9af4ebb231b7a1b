"""Configuration constants for the agility event harvester."""
from __future__ import annotations

import os
from pathlib import Path


def _env_flag(env_var: str, default: str) -> bool:
    return os.getenv(env_var, default).strip().lower() not in {"0", "false", "no"}


DATA_DIR: Path = Path(os.getenv("AGILITY_DATA_DIR", "."))
LOG_DIR: Path = Path(os.getenv("AGILITY_LOG_DIR", str(DATA_DIR / "logs")))
RUNS_DIR: Path = Path(os.getenv("AGILITY_RUNS_DIR", str(DATA_DIR / "runs")))
INDEX_FILE: Path = Path(os.getenv("AGILITY_INDEX_FILE", str(DATA_DIR / "index.json")))
OUTPUT_FILE: Path = Path(
    os.getenv("AGILITY_OUTPUT_FILE", str(DATA_DIR / "agility-data.json"))
)
# Directory of recorded pages (manifest.json + html files) for offline runs.
REPLAY_DIR: str = os.getenv("AGILITY_REPLAY_DIR", "").strip()

ROOT_SITE: str = os.getenv("ROOT_SITE", "").strip()
USER_EMAIL: str = os.getenv("USER_EMAIL", "")
USER_PASSWORD: str = os.getenv("USER_PASSWORD", "")

LOGIN_PATH: tuple[str, ...] = ("user", "login")
INDEX_PATH: tuple[str, ...] = ("zone", "events", "past_all")

MAX_PARALLEL_JOBS: int = int(os.getenv("MAX_PARALLEL_JOBS", "4"))

# Milliseconds, matching the historical environment variable.
CHEVRON_EXPANSION_DELAY: int = int(os.getenv("CHEVRON_EXPANSION_DELAY", "250"))
CHEVRON_SETTLE_SECONDS: float = float(os.getenv("CHEVRON_SETTLE_SECONDS", "0.1"))
NAV_RETRY_INTERVAL_SECONDS: float = float(os.getenv("NAV_RETRY_INTERVAL_SECONDS", "0.5"))

HEADLESS: bool = _env_flag("AGILITY_HEADLESS", "1")


def _parse_timeout_seconds(env_var: str, default: int, *, minimum: int = 1) -> int:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


# Playwright timeouts (seconds)
# Navigation timeout for page.goto calls; a timeout counts as a failed attempt.
PLAYWRIGHT_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds(
    "AGILITY_NAV_TIMEOUT_SECONDS", 30
)
# Upper bound for "network idle" settle waits after navigation.
PLAYWRIGHT_IDLE_TIMEOUT_SECONDS: int = _parse_timeout_seconds(
    "AGILITY_IDLE_TIMEOUT_SECONDS", 30
)


def chevron_expansion_delay_seconds() -> float:
    """Return the post-expansion delay in seconds."""

    return CHEVRON_EXPANSION_DELAY / 1000.0


def site_url(*parts: str) -> str:
    """Join ``parts`` onto ``ROOT_SITE`` with single slashes."""

    root = ROOT_SITE.rstrip("/")
    path = "/".join(part.strip("/") for part in parts if part and part.strip("/"))
    return f"{root}/{path}" if path else root


__all__ = [
    "DATA_DIR",
    "LOG_DIR",
    "RUNS_DIR",
    "INDEX_FILE",
    "OUTPUT_FILE",
    "REPLAY_DIR",
    "ROOT_SITE",
    "USER_EMAIL",
    "USER_PASSWORD",
    "MAX_PARALLEL_JOBS",
    "CHEVRON_EXPANSION_DELAY",
    "CHEVRON_SETTLE_SECONDS",
    "NAV_RETRY_INTERVAL_SECONDS",
    "HEADLESS",
    "PLAYWRIGHT_NAV_TIMEOUT_SECONDS",
    "PLAYWRIGHT_IDLE_TIMEOUT_SECONDS",
    "chevron_expansion_delay_seconds",
    "site_url",
]
