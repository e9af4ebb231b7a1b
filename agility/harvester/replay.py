"""Offline page client that replays recorded HTML.

A replay directory holds a ``manifest.json`` mapping absolute URLs to HTML
file names next to it::

    {"https://site.example/events/info/12": "info_12.html", ...}

Pages are parsed with BeautifulSoup (html5lib) and queried with the same CSS
selectors the live client uses. Markup is assumed to be fully materialised, so
clicks only record that they happened. A URL missing from the manifest fails
navigation exactly like an unreachable live page, which means the navigator
keeps retrying it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from .errors import TransientNavigationFailure
from .utils import load_json_file, log_line

MANIFEST_NAME = "manifest.json"


class ReplayElement:
    """``PageElement`` over a BeautifulSoup tag."""

    def __init__(self, node: Tag, page: "ReplayPage") -> None:
        self._node = node
        self._page = page

    def __repr__(self) -> str:
        return f"ReplayElement(<{self._node.name}>)"

    async def query_one(self, selector: str) -> Optional["ReplayElement"]:
        node = self._node.select_one(selector)
        return ReplayElement(node, self._page) if node is not None else None

    async def query_all(self, selector: str) -> List["ReplayElement"]:
        return [ReplayElement(node, self._page) for node in self._node.select(selector)]

    async def text(self) -> Optional[str]:
        return self._node.get_text()

    async def attribute(self, name: str) -> Optional[str]:
        value = self._node.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    async def href(self) -> Optional[str]:
        raw = self._node.get("href")
        if raw is None:
            return None
        return urljoin(self._page.url, str(raw))

    async def class_name(self) -> str:
        return " ".join(self._node.get("class") or [])

    async def tag_name(self) -> str:
        return (self._node.name or "").upper()

    async def click(self) -> None:
        self._page.clicks.append(self._node)

    async def type_text(self, value: str) -> None:
        self._node["value"] = value


class ReplayPage:
    """``PageClient`` serving pages from an in-memory ``url -> html`` mapping."""

    def __init__(self, pages: Mapping[str, str]) -> None:
        self._pages: Dict[str, str] = dict(pages)
        self._soup: Optional[BeautifulSoup] = None
        self._url = "about:blank"
        self.visits: List[str] = []
        self.clicks: List[Tag] = []

    @classmethod
    def from_directory(cls, directory: Path) -> "ReplayPage":
        directory = Path(directory)
        manifest = load_json_file(directory / MANIFEST_NAME)
        pages = {
            str(url): (directory / str(name)).read_text(encoding="utf-8")
            for url, name in manifest.items()
        }
        log_line(f"[REPLAY] Loaded {len(pages)} recorded pages from {directory}")
        return cls(pages)

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str) -> None:
        self.visits.append(url)
        html = self._pages.get(url)
        if html is None:
            raise TransientNavigationFailure(url, "page not recorded")
        self._soup = BeautifulSoup(html, "html5lib")
        self._url = url

    async def wait_for_settle(self) -> None:
        return None

    async def wait_for_navigation(self, from_url: str) -> None:
        return None

    def _document(self) -> BeautifulSoup:
        if self._soup is None:
            raise RuntimeError("ReplayPage queried before any navigation")
        return self._soup

    async def query_one(self, selector: str) -> Optional[ReplayElement]:
        node = self._document().select_one(selector)
        return ReplayElement(node, self) if node is not None else None

    async def query_all(self, selector: str) -> List[ReplayElement]:
        return [ReplayElement(node, self) for node in self._document().select(selector)]

    async def close(self) -> None:
        self._soup = None


__all__ = ["ReplayElement", "ReplayPage", "MANIFEST_NAME"]
