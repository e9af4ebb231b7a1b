"""Building and caching the past-events index (the harvest backlog).

The index is scraped once from the listing page and written to the cache file.
Later runs read the cache instead. Delete the file (or pass
``--refresh-index``) to scrape it again.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .errors import FatalSelectorMiss, ValidationError
from .logging_utils import _harvest_event
from .models import IndexEntry
from .navigation import navigate_and_settle
from .page_client import PageClient, PageElement, get_text
from .site_selectors import INDEX_SELECTORS, IndexSelectors
from .utils import load_json_file, log_line, save_json_file


async def _require(root: PageElement, selector: str, *, where: str) -> PageElement:
    element = await root.query_one(selector)
    if element is None:
        raise FatalSelectorMiss(selector, where=where)
    return element


async def entry_from_element(
    entry_id: str,
    element: PageElement,
    *,
    selectors: IndexSelectors = INDEX_SELECTORS,
) -> IndexEntry:
    """Build an ``IndexEntry`` from one event card of the listing.

    Missing card rows raise ``FatalSelectorMiss``. A missing required text
    field logs everything that was found and raises ``ValidationError``.
    """

    where = f"index entry {entry_id}"
    inner = await _require(element, selectors.inner, where=where)
    data_row = await _require(inner, selectors.data_row, where=where)
    link_row = await _require(inner, selectors.link_row, where=where)

    nodes: Dict[str, Optional[PageElement]] = {
        "shortDate": await data_row.query_one(selectors.short_date),
        "issuer": await data_row.query_one(selectors.issuer),
        "title": await data_row.query_one(selectors.title),
        "hostClub": await data_row.query_one(selectors.host_club),
        "location": await data_row.query_one(selectors.location),
        "flag": await data_row.query_one(selectors.flag),
    }
    cancelled_marker = await link_row.query_one(selectors.cancelled_marker)

    participants_url: Optional[str] = None
    runs_url: Optional[str] = None
    info_url: Optional[str] = None
    unknown_urls: List[str] = []
    for link in await link_row.query_all(selectors.links):
        href = await link.href()
        if not href:
            continue
        if selectors.info_link.search(href):
            info_url = href
        elif selectors.runs_link.search(href):
            runs_url = href
        elif selectors.participants_link.search(href):
            participants_url = href
        else:
            unknown_urls.append(href)

    try:
        issuer_node = nodes["issuer"]
        return IndexEntry(
            id=entry_id,
            short_date=await get_text(nodes["shortDate"]),
            issuer=await get_text(issuer_node) if issuer_node is not None else None,
            title=await get_text(nodes["title"]),
            host_club=await get_text(nodes["hostClub"]),
            location=await get_text(nodes["location"]),
            flag=await get_text(nodes["flag"]),
            participants_url=participants_url,
            runs_url=runs_url,
            info_url=info_url,
            is_cancelled=cancelled_marker is not None,
            unknown_urls=tuple(unknown_urls),
        )
    except ValueError as exc:
        context: Dict[str, Any] = {
            name: repr(node) if node is not None else None for name, node in nodes.items()
        }
        context.update(
            participantsUrl=participants_url,
            runsUrl=runs_url,
            infoUrl=info_url,
            isCancelled=cancelled_marker is not None,
        )
        log_line(f"[INDEX][ERROR] Invalid entry {entry_id}: {context}")
        raise ValidationError(f"Error validating entry {entry_id}: {exc}", context=context) from exc


async def acquire_index(
    page: PageClient,
    *,
    selectors: IndexSelectors = INDEX_SELECTORS,
) -> List[IndexEntry]:
    """Scrape the full past-events listing in page order."""

    await navigate_and_settle(page, config.site_url(*config.INDEX_PATH))
    elements = await page.query_all(selectors.entries)
    total = len(elements)
    _harvest_event("index", step="listing_loaded", total=total)

    entries: List[IndexEntry] = []
    for position, element in enumerate(elements, start=1):
        entry_id = (await element.attribute("id")) or ""
        entry = await entry_from_element(entry_id, element, selectors=selectors)
        entries.append(entry)
        log_line(f"[INDEX] {position}/{total} - {entry.title} ({entry_id})")
    return entries


def load_index_cache(path: Path) -> Optional[List[IndexEntry]]:
    """Return the cached index, or ``None`` if it is missing or unreadable."""

    try:
        raw = load_json_file(path)
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as exc:
        log_line(f"[INDEX] Ignoring unreadable index cache {path}: {exc}")
        return None

    if not isinstance(raw, list):
        log_line(f"[INDEX] Ignoring index cache {path}: expected a JSON array")
        return None
    try:
        return [IndexEntry.from_dict(item) for item in raw]
    except (KeyError, TypeError, AttributeError) as exc:
        log_line(f"[INDEX] Ignoring malformed index cache {path}: {exc!r}")
        return None


def save_index_cache(path: Path, entries: List[IndexEntry]) -> None:
    """Write ``entries`` to ``path`` atomically."""

    save_json_file(path, [entry.to_dict() for entry in entries])


async def load_or_acquire_index(
    page: PageClient,
    cache_path: Path,
    *,
    refresh: bool = False,
) -> List[IndexEntry]:
    """Return the backlog from the cache, scraping and caching it when needed."""

    if not refresh:
        cached = load_index_cache(cache_path)
        if cached is not None:
            log_line(f"Index is cached, reading from disk ({len(cached)} entries)")
            _harvest_event("index", step="cache_hit", path=str(cache_path), total=len(cached))
            return cached

    log_line("Index is not present, acquiring it from remote...")
    entries = await acquire_index(page)
    save_index_cache(cache_path, entries)
    log_line(f"Index is now stored in {cache_path}")
    _harvest_event("index", step="cache_written", path=str(cache_path), total=len(entries))
    return entries


__all__ = [
    "entry_from_element",
    "acquire_index",
    "load_index_cache",
    "save_index_cache",
    "load_or_acquire_index",
]
