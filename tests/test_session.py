import asyncio

import pytest

from conftest import LOGIN_URL, page
from agility.harvester import config
from agility.harvester.errors import FatalSelectorMiss
from agility.harvester.replay import ReplayPage
from agility.harvester.session import accept_cookies, login


def test_login_types_configured_credentials_and_accepts_cookies(site_pages, monkeypatch):
    monkeypatch.setattr(config, "USER_EMAIL", "handler@example.com")
    monkeypatch.setattr(config, "USER_PASSWORD", "s3cret")
    replay = ReplayPage(site_pages)

    async def scenario():
        await login(replay)
        email = await (await replay.query_one("#user_email")).attribute("value")
        password = await (await replay.query_one("#user_password")).attribute("value")
        return email, password

    assert asyncio.run(scenario()) == ("handler@example.com", "s3cret")
    assert replay.visits == [LOGIN_URL]
    clicked = [node.get_text() for node in replay.clicks]
    assert clicked == ["Sign in", "I agree", "i AGREE to all"]


def test_explicit_credentials_override_config(site_pages):
    replay = ReplayPage(site_pages)

    async def scenario():
        await login(replay, email="other@example.com", password="pw")
        return await (await replay.query_one("#user_email")).attribute("value")

    assert asyncio.run(scenario()) == "other@example.com"


def test_login_without_signin_button_is_fatal():
    replay = ReplayPage(
        {LOGIN_URL: page('<input id="user_email"><input id="user_password">')}
    )

    with pytest.raises(FatalSelectorMiss, match="#signin"):
        asyncio.run(login(replay, email="a", password="b"))


def test_accept_cookies_without_banner_clicks_nothing():
    replay = ReplayPage({LOGIN_URL: page("<button>Continue</button>")})

    async def scenario():
        await replay.goto(LOGIN_URL)
        return await accept_cookies(replay)

    assert asyncio.run(scenario()) == 0
    assert replay.clicks == []
