from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from . import config
from .error_codes import ErrorCode
from .logging_utils import _harvest_event
from .page_client import PageClient

Sleep = Callable[[float], Awaitable[None]]


async def goto_with_retry(
    page: PageClient,
    url: str,
    *,
    interval: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Navigate ``page`` to ``url``, retrying every ``interval`` seconds forever.

    Any exception from ``page.goto`` counts as a transient failure. The call
    only returns once navigation succeeded, and returns the number of attempts
    it took. A site that never comes back keeps the lane here until the
    operator stops the process.
    """

    delay = config.NAV_RETRY_INTERVAL_SECONDS if interval is None else interval
    attempt = 0
    while True:
        attempt += 1
        try:
            await page.goto(url)
        except Exception as exc:  # noqa: BLE001
            _harvest_event(
                "nav",
                step="goto_retry",
                error_code=ErrorCode.NAVIGATION,
                attempt=attempt,
                url=url,
                error=str(exc)[:200],
            )
            await sleep(delay)
            continue
        if attempt > 1:
            _harvest_event("nav", step="goto_recovered", attempts=attempt, url=url)
        return attempt


async def navigate_and_settle(
    page: PageClient,
    url: str,
    *,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """Navigate with retry, then wait for the page's network to go idle."""

    await goto_with_retry(page, url, sleep=sleep)
    await page.wait_for_settle()


__all__ = ["Sleep", "goto_with_retry", "navigate_and_settle"]
