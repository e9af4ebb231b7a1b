from __future__ import annotations

"""Exceptions raised by the harvester.

Every fatal condition is a ``HarvestError`` subclass. They are never caught
inside a lane: they travel through the phase and lane boundaries unchanged and
``run.run_harvest`` is the one place that turns them into job termination.
"""

from typing import Any, Optional

from .error_codes import ErrorCode


class HarvestError(Exception):
    error_code: str = ErrorCode.INTERNAL

    def __init__(self, message: str, *, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code


class ValidationError(HarvestError):
    """A required field could not be derived from a freshly scraped entry."""

    error_code = ErrorCode.VALIDATION

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = dict(context or {})


class FatalSelectorMiss(HarvestError):
    """A structurally required element is absent and there is no degraded path."""

    error_code = ErrorCode.SELECTOR_MISS

    def __init__(self, selector: str, *, where: str = "page") -> None:
        super().__init__(
            f"FATAL! Selector {selector!r} did not match anything on {where}, "
            "this signals a change in the site structure."
        )
        self.selector = selector
        self.where = where


class ExpansionFailure(HarvestError):
    """No collapsed-row toggle could be activated in an expandable row."""

    error_code = ErrorCode.EXPANSION


class TabularParseError(HarvestError):
    """A value fragment arrived before its governing section or field label."""

    error_code = ErrorCode.TABULAR


class TransientNavigationFailure(Exception):
    """A single failed navigation attempt.

    Only ever raised by page clients and absorbed by
    ``navigation.goto_with_retry``; never a ``HarvestError``.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        super().__init__(f"Navigation to {url} failed: {reason}" if reason else url)
        self.url = url
        self.reason = reason


__all__ = [
    "HarvestError",
    "ValidationError",
    "FatalSelectorMiss",
    "ExpansionFailure",
    "TabularParseError",
    "TransientNavigationFailure",
]
