from __future__ import annotations

import asyncio
from typing import Optional

from . import config
from .errors import ExpansionFailure
from .logging_utils import _harvest_event
from .navigation import Sleep
from .page_client import PageElement

# LiveView toggles; the site prunes collapsed row content from the DOM.
CHEVRON_SELECTOR = ":scope [phx-click]"


async def expand_chevron(
    root: PageElement,
    *,
    settle_seconds: Optional[float] = None,
    expansion_delay: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Open the collapsed content of ``root`` by clicking its first working toggle.

    Candidates are tried in document order and the index of the one that
    worked is returned. Raises ``ExpansionFailure`` when no candidate could be
    clicked, including when the row has none.
    """

    settle = config.CHEVRON_SETTLE_SECONDS if settle_seconds is None else settle_seconds
    delay = (
        config.chevron_expansion_delay_seconds()
        if expansion_delay is None
        else expansion_delay
    )

    await sleep(settle)
    candidates = await root.query_all(CHEVRON_SELECTOR)
    for index, candidate in enumerate(candidates):
        try:
            await candidate.click()
        except Exception as exc:  # noqa: BLE001
            _harvest_event(
                "chevron",
                step="candidate_failed",
                index=index,
                candidates=len(candidates),
                error=str(exc)[:200],
            )
            continue
        await sleep(delay)
        return index

    raise ExpansionFailure(
        f"FATAL! Could not expand chevron ({len(candidates)} candidate(s) tried)"
    )


__all__ = ["CHEVRON_SELECTOR", "expand_chevron"]
