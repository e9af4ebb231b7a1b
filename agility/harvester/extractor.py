"""Per-event extraction: participants, info and runs.

Phases run in that fixed order on the lane's own page and each one only runs
when the event has the matching URL. A phase assigns its field on the record
once it has finished, so a field is either absent or complete.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

from .chevron import expand_chevron
from .error_codes import ErrorCode
from .logging_utils import _harvest_event
from .models import EntryInfo, FullEntry, Participant, Run
from .navigation import Sleep, navigate_and_settle
from .page_client import PageClient, PageElement, get_text
from .scheduler import EntryProcessor, StatusFn
from .site_selectors import ENTRY_SELECTORS, EntrySelectors
from .tabular import read_tabular


def _message_group_name(heading: str) -> str:
    name = heading.strip()
    return name[:-1] if name.endswith(":") else name


def _no_status(text: str) -> None:
    return None


class EntryExtractor:
    def __init__(
        self,
        page: PageClient,
        *,
        status: Optional[StatusFn] = None,
        sleep: Sleep = asyncio.sleep,
        selectors: EntrySelectors = ENTRY_SELECTORS,
    ) -> None:
        self.page = page
        self._status: StatusFn = status or _no_status
        self._sleep = sleep
        self.selectors = selectors

    async def _goto(self, url: str) -> None:
        await navigate_and_settle(self.page, url, sleep=self._sleep)

    async def _expand(self, row: PageElement) -> None:
        await expand_chevron(row, sleep=self._sleep)

    async def extract(self, record: FullEntry) -> FullEntry:
        entry = record.entry
        self._status(f"{entry.title} - Indexing...")

        if entry.participants_url is not None:
            self._status(f"{entry.title} - Listing participants...")
            record.participants = await self.extract_participants(entry.participants_url)
            _harvest_event("phase", step="participants", entry=entry.id, rows=len(record.participants))

        if entry.info_url is not None:
            self._status(f"{entry.title} - Gathering information...")
            record.info = await self.extract_info(entry.info_url)
            _harvest_event(
                "phase",
                step="info",
                entry=entry.id,
                sections=len(record.info.data_table),
                message_groups=len(record.info.messages),
            )

        if entry.runs_url is not None:
            self._status(f"{entry.title} - Runs (indexing)")
            record.runs = await self.extract_runs(entry.runs_url, label=entry.title)
            _harvest_event("phase", step="runs", entry=entry.id, runs=len(record.runs))

        return record

    async def extract_participants(self, url: str) -> List[Participant]:
        await self._goto(url)
        participants: List[Participant] = []
        for row in await self.page.query_all(self.selectors.participant_rows):
            await self._expand(row)
            participants.append(await read_tabular(row))
        return participants

    async def extract_info(self, url: str) -> EntryInfo:
        await self._goto(url)
        info = EntryInfo()

        for grid in await self.page.query_all(self.selectors.info_grids):
            for section, fields in (await read_tabular(grid)).items():
                info.data_table[section] = fields

        group = ""
        for fragment in await self.page.query_all(self.selectors.info_messages):
            text = await get_text(fragment)
            tag = (await fragment.tag_name()).upper()
            if tag == self.selectors.message_heading_tag:
                group = _message_group_name(text)
                info.messages[group] = []
            else:
                info.messages.setdefault(group, []).append(text)

        return info

    async def collect_run_links(self) -> tuple[List[str], int]:
        """Return the first combined-results link of every run-index row.

        Later matching links in the same row are ignored. The second value is
        the number of index rows, matching or not.
        """

        links: List[str] = []
        rows = await self.page.query_all(self.selectors.run_index_rows)
        for row in rows:
            for anchor in await row.query_all(self.selectors.run_links):
                href = await anchor.href()
                if href and self.selectors.combined_results.search(href):
                    links.append(href)
                    break
        return links, len(rows)

    async def extract_runs(self, url: str, *, label: str = "") -> List[Run]:
        await self._goto(url)
        links, row_count = await self.collect_run_links()
        self._status(f"{label} - Runs (total {row_count})")

        runs: List[Run] = []
        for position, link in enumerate(links, start=1):
            await self._goto(link)
            self._status(f"{label} - Runs ({position}/{row_count})")
            runs.append(await self.extract_run(link, position=position, label=label))
        return runs

    async def extract_run(self, url: str, *, position: int = 0, label: str = "") -> Run:
        """Read the run page the lane is currently on."""

        run = Run()
        header = await self.page.query_one(self.selectors.run_header)
        if header is None:
            _harvest_event(
                "warning",
                error_code=ErrorCode.MISSING_HEADER,
                entry=label,
                run=position,
                url=url,
                message="run has no header element, recording an empty run",
            )
            return run

        run.title = await _optional_text(header, self.selectors.run_title)
        run.status = await _optional_text(header, self.selectors.run_status)
        run.type = await _optional_text(header, self.selectors.run_type)

        for row in await self.page.query_all(self.selectors.run_result_rows):
            await self._expand(row)
            run.results.append(await read_tabular(row))
        return run


async def _optional_text(root: PageElement, selector: str) -> str:
    node = await root.query_one(selector)
    if node is None:
        return ""
    return await get_text(node)


def make_entry_processor(*, sleep: Sleep = asyncio.sleep) -> EntryProcessor:
    """Adapt ``EntryExtractor`` to the scheduler's processor signature."""

    async def process(page: PageClient, record: FullEntry, status: StatusFn) -> None:
        await EntryExtractor(page, status=status, sleep=sleep).extract(record)

    return process


__all__ = ["EntryExtractor", "make_entry_processor"]
