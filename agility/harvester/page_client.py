"""Page interaction capability used by every extraction step.

The harvester never talks to Playwright directly outside this module: lanes,
the extractor, the chevron expander and the tabular reader only see the
``PageClient`` / ``PageElement`` protocols below. ``PlaywrightPage`` is the
live implementation; ``replay.ReplayPage`` serves recorded HTML.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from playwright.async_api import (
    BrowserContext,
    ElementHandle,
    Error as PWError,
    Page,
    TimeoutError as PWTimeout,
)

from . import config
from .errors import TransientNavigationFailure
from .utils import log_line


class PageElement(Protocol):
    async def query_one(self, selector: str) -> Optional["PageElement"]: ...

    async def query_all(self, selector: str) -> List["PageElement"]: ...

    async def text(self) -> Optional[str]: ...

    async def attribute(self, name: str) -> Optional[str]: ...

    async def href(self) -> Optional[str]: ...

    async def class_name(self) -> str: ...

    async def tag_name(self) -> str: ...

    async def click(self) -> None: ...

    async def type_text(self, value: str) -> None: ...


class PageClient(Protocol):
    @property
    def url(self) -> str: ...

    async def goto(self, url: str) -> None:
        """Navigate to ``url``; raise ``TransientNavigationFailure`` on failure."""

    async def wait_for_settle(self) -> None: ...

    async def wait_for_navigation(self, from_url: str) -> None: ...

    async def query_one(self, selector: str) -> Optional[PageElement]: ...

    async def query_all(self, selector: str) -> List[PageElement]: ...

    async def close(self) -> None: ...


async def get_text(node: Optional[PageElement]) -> str:
    """Return the trimmed text content of ``node``.

    Raises ``ValueError`` when the node is missing or has no text content.
    """

    if node is None:
        raise ValueError("Can't extract text from a missing node")
    text = await node.text()
    if text is None:
        raise ValueError(f"Node {node!r} did not contain any content")
    return text.strip()


class PlaywrightElement:
    """``PageElement`` backed by a Playwright ``ElementHandle``."""

    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    def __repr__(self) -> str:
        return f"PlaywrightElement({self._handle!r})"

    @classmethod
    def wrap_all(cls, handles: Sequence[ElementHandle]) -> List[PageElement]:
        return [cls(handle) for handle in handles]

    async def query_one(self, selector: str) -> Optional[PageElement]:
        handle = await self._handle.query_selector(selector)
        return PlaywrightElement(handle) if handle is not None else None

    async def query_all(self, selector: str) -> List[PageElement]:
        return self.wrap_all(await self._handle.query_selector_all(selector))

    async def text(self) -> Optional[str]:
        return await self._handle.evaluate("(el) => el.textContent")

    async def attribute(self, name: str) -> Optional[str]:
        return await self._handle.get_attribute(name)

    async def href(self) -> Optional[str]:
        # The DOM property resolves relative links against the page URL.
        return await self._handle.evaluate("(el) => el.href ?? null")

    async def class_name(self) -> str:
        return await self._handle.evaluate("(el) => el.getAttribute('class') || ''")

    async def tag_name(self) -> str:
        return await self._handle.evaluate("(el) => el.tagName")

    async def click(self) -> None:
        await self._handle.click()

    async def type_text(self, value: str) -> None:
        await self._handle.type(value)


class PlaywrightPage:
    """``PageClient`` backed by one Playwright ``Page`` (one lane's session)."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @classmethod
    async def open(cls, context: BrowserContext) -> "PlaywrightPage":
        return cls(await context.new_page())

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str) -> None:
        try:
            await self._page.goto(
                url, timeout=config.PLAYWRIGHT_NAV_TIMEOUT_SECONDS * 1000
            )
        except (PWTimeout, PWError) as exc:
            raise TransientNavigationFailure(url, str(exc)) from exc

    async def wait_for_settle(self) -> None:
        try:
            await self._page.wait_for_load_state(
                "networkidle", timeout=config.PLAYWRIGHT_IDLE_TIMEOUT_SECONDS * 1000
            )
        except PWTimeout:
            log_line(f"networkidle timeout on {self._page.url}; continuing.")

    async def wait_for_navigation(self, from_url: str) -> None:
        await self._page.wait_for_url(
            lambda current: current != from_url,
            timeout=config.PLAYWRIGHT_NAV_TIMEOUT_SECONDS * 1000,
        )
        await self.wait_for_settle()

    async def query_one(self, selector: str) -> Optional[PageElement]:
        handle = await self._page.query_selector(selector)
        return PlaywrightElement(handle) if handle is not None else None

    async def query_all(self, selector: str) -> List[PageElement]:
        return PlaywrightElement.wrap_all(await self._page.query_selector_all(selector))

    async def close(self) -> None:
        if not self._page.is_closed():
            await self._page.close()


__all__ = [
    "PageElement",
    "PageClient",
    "PlaywrightElement",
    "PlaywrightPage",
    "get_text",
]
