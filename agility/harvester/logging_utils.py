from __future__ import annotations

from typing import Any

from .utils import log_line


def _harvest_event(label: str = "", *, phase: str | None = None, **fields: Any) -> None:
    """Emit a structured harvester log line.

    Lines look like ``[HARVEST][NAV] attempt=2, url='...'``. ``phase`` may be
    used as a keyword alias for the label; when both are given, ``phase`` is
    kept in the payload so the event stage is still recorded.
    """

    try:
        phase_label = label or (phase or "")
        if phase and label:
            fields.setdefault("phase", phase)
        payload = ", ".join(f"{k}={repr(v)}" for k, v in sorted(fields.items()))
        log_line(f"[HARVEST][{phase_label.upper()}] {payload}")
    except Exception:
        # Never let logging break the harvest.
        return


def _error_event(exc: BaseException, **fields: Any) -> None:
    """Emit an ``error`` event for ``exc``, including its error code if any."""

    code = getattr(exc, "error_code", None)
    _harvest_event(
        "error",
        error_code=code,
        error_type=type(exc).__name__,
        error=str(exc)[:200],
        **fields,
    )


__all__ = ["_harvest_event", "_error_event"]
