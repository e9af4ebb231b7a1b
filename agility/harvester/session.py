from __future__ import annotations

"""Signing in to the event site.

Every lane page is opened from the browser context used here, so the session
cookies set by ``login`` apply to all of them.
"""

from typing import Optional

from . import config
from .errors import FatalSelectorMiss
from .logging_utils import _harvest_event
from .navigation import goto_with_retry
from .page_client import PageClient, PageElement
from .site_selectors import LOGIN_SELECTORS, LoginSelectors
from .utils import log_line


async def _get_or_die(page: PageClient, selector: str) -> PageElement:
    element = await page.query_one(selector)
    if element is None:
        raise FatalSelectorMiss(selector, where="login page")
    return element


async def accept_cookies(page: PageClient, *, selectors: LoginSelectors = LOGIN_SELECTORS) -> int:
    """Click every consent button on the page; the banner gets in the way of clicks."""

    clicked = 0
    for candidate in await page.query_all(selectors.buttons):
        raw: Optional[str] = await candidate.text()
        if raw and selectors.cookie_consent.search(raw):
            await candidate.click()
            clicked += 1
            log_line("Cookies accepted!")
    return clicked


async def login(
    page: PageClient,
    *,
    email: Optional[str] = None,
    password: Optional[str] = None,
    selectors: LoginSelectors = LOGIN_SELECTORS,
) -> None:
    """Sign in with the configured credentials and dismiss the cookie banner."""

    _harvest_event("login", step="start")
    await goto_with_retry(page, config.site_url(*config.LOGIN_PATH))

    email_input = await _get_or_die(page, selectors.email)
    await email_input.type_text(config.USER_EMAIL if email is None else email)
    password_input = await _get_or_die(page, selectors.password)
    await password_input.type_text(config.USER_PASSWORD if password is None else password)

    signin = await _get_or_die(page, selectors.submit)
    login_url = page.url
    await signin.click()
    await page.wait_for_navigation(login_url)

    accepted = await accept_cookies(page, selectors=selectors)
    _harvest_event("login", step="done", url=page.url, cookie_buttons=accepted)


__all__ = ["login", "accept_cookies"]
