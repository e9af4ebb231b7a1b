from __future__ import annotations

"""Error code taxonomy for harvest failures.

Codes appear in structured ``error`` events and on every ``HarvestError`` so
that a failed run can be explained from its log alone.
"""


class ErrorCode:
    VALIDATION = "entry_validation_failed"
    SELECTOR_MISS = "required_selector_missing"
    NAVIGATION = "navigation_failed"
    EXPANSION = "chevron_expansion_failed"
    MISSING_HEADER = "run_header_missing"
    TABULAR = "tabular_order_violation"
    INTERNAL = "internal_error"


__all__ = ["ErrorCode"]
