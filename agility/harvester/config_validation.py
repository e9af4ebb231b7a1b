from __future__ import annotations

from typing import Literal

from . import config
from .logging_utils import _harvest_event
from .utils import log_line

Entrypoint = Literal["cli", "replay", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _harvest_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def _clamp(field_name: str, value: int, adjusted: int, *, entrypoint: Entrypoint) -> int:
    _harvest_event(
        "state",
        phase="config",
        context="runtime_validation",
        kind="config_adjustment",
        field=field_name,
        value=value,
        adjusted=adjusted,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {field_name}={value} is out of range; clamping to {adjusted}.")
    return adjusted


def validate_runtime_config(entrypoint: Entrypoint) -> None:
    """Validate runtime configuration for the given entrypoint.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    Non-fatal adjustments (e.g. clamping the lane count) are logged but do not
    raise. Live runs need the site root and both credentials; replay runs and
    tests do not.
    """

    if entrypoint == "cli":
        if not config.ROOT_SITE:
            _raise_config_error(
                "ROOT_SITE must be set for live harvests.",
                entrypoint=entrypoint,
                error="root_site_missing",
            )
        if not config.USER_EMAIL or not config.USER_PASSWORD:
            _raise_config_error(
                "USER_EMAIL and USER_PASSWORD must be set for live harvests.",
                entrypoint=entrypoint,
                error="credentials_missing",
            )

    if config.MAX_PARALLEL_JOBS < 1:
        config.MAX_PARALLEL_JOBS = _clamp(
            "MAX_PARALLEL_JOBS", config.MAX_PARALLEL_JOBS, 1, entrypoint=entrypoint
        )

    delay_fields = [
        ("CHEVRON_EXPANSION_DELAY", config.CHEVRON_EXPANSION_DELAY),
        ("CHEVRON_SETTLE_SECONDS", config.CHEVRON_SETTLE_SECONDS),
        ("NAV_RETRY_INTERVAL_SECONDS", config.NAV_RETRY_INTERVAL_SECONDS),
    ]
    for field_name, value in delay_fields:
        if value < 0:
            _raise_config_error(
                f"{field_name} must be non-negative.",
                entrypoint=entrypoint,
                error="invalid_delay",
            )


__all__ = ["validate_runtime_config", "Entrypoint"]
