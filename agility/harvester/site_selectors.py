from __future__ import annotations

"""CSS selectors and URL markers for the agility event site."""

import re
from dataclasses import dataclass
from typing import Pattern


@dataclass(frozen=True)
class LoginSelectors:
    email: str = "#user_email"
    password: str = "#user_password"
    submit: str = "#signin"
    buttons: str = "button"
    cookie_consent: Pattern[str] = re.compile(r"I agree", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class IndexSelectors:
    """Past-events listing. Each ``#events`` child is one event card."""

    entries: str = "#events > *"
    inner: str = ":scope > div"
    data_row: str = ":scope > :nth-child(1)"
    link_row: str = ":scope > :nth-child(2)"
    short_date: str = ":scope > :nth-child(1) > :nth-child(1)"
    issuer: str = ":scope > :nth-child(1) > :nth-child(2)"
    title: str = ":scope > :nth-child(2) > :nth-child(1)"
    host_club: str = ":scope > :nth-child(2) > :nth-child(2)"
    location: str = ":scope > :nth-child(2) > :nth-child(3) > :nth-child(1)"
    flag: str = ":scope > :nth-child(2) > :nth-child(3) > :nth-child(2)"
    cancelled_marker: str = ":scope > :nth-child(1) > *"
    links: str = ":scope > :nth-child(2) a"
    info_link: Pattern[str] = re.compile(r"events/info")
    runs_link: Pattern[str] = re.compile(r"/runs")
    participants_link: Pattern[str] = re.compile(r"/participants_list")


@dataclass(frozen=True)
class EntrySelectors:
    """Per-event pages visited by the three extraction phases."""

    participant_rows: str = "#participants_list > *"
    info_grids: str = "main > div > div > div.grid.grid-cols-2"
    info_messages: str = "div.rules > .rules > *"
    message_heading_tag: str = "H1"
    run_index_rows: str = "#runs_list > div"
    run_links: str = ":scope a"
    combined_results: Pattern[str] = re.compile(r"/combined_results")
    run_header: str = "#header_component > div > div"
    run_title: str = ":scope > :nth-child(1) > :nth-child(1)"
    run_type: str = ":scope > :nth-child(2)"
    run_status: str = ":scope > :nth-child(3) span"
    run_result_rows: str = "#results_comb_list > div"


LOGIN_SELECTORS = LoginSelectors()
INDEX_SELECTORS = IndexSelectors()
ENTRY_SELECTORS = EntrySelectors()

__all__ = [
    "LoginSelectors",
    "IndexSelectors",
    "EntrySelectors",
    "LOGIN_SELECTORS",
    "INDEX_SELECTORS",
    "ENTRY_SELECTORS",
]
