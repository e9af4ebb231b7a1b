"""Parser for the site's label/value grids.

Participant cards, info data grids and run result rows all render the same
way: a flat run of styled ``div``s where a bold full-width cell opens a
section, a grey cell names a field and a bold black cell holds the value.
``parse_tabular`` turns that run into ``{section: {field: value}}``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from .errors import TabularParseError
from .page_client import PageElement, get_text

TabularRecord = Dict[str, Dict[str, str]]

TABULAR_DESCENDANTS = (
    ":scope .text-gray-500.text-sm, "
    ":scope .font-bold.text-black, "
    ":scope .font-bold.col-span-2"
)

_SECTION_MARKER = re.compile(r"col-span-2")
_FIELD_MARKER = re.compile(r"text-gray-500")


class FragmentRole(str, Enum):
    SECTION = "section"
    FIELD = "field"
    VALUE = "value"


@dataclass(frozen=True)
class Fragment:
    role: FragmentRole
    text: str


def classify_fragment(class_name: str) -> FragmentRole:
    """Map a fragment's CSS class string to its role."""

    if _SECTION_MARKER.search(class_name or ""):
        return FragmentRole.SECTION
    if _FIELD_MARKER.search(class_name or ""):
        return FragmentRole.FIELD
    return FragmentRole.VALUE


def parse_tabular(fragments: Iterable[Fragment]) -> TabularRecord:
    """Fold classified fragments into a section -> field -> value mapping.

    Single pass, no lookahead. A section start (re)opens its section as an
    empty mapping. A field label stays current across section starts until the
    next label. A value arriving before any section start or field label raises
    ``TabularParseError`` instead of being dropped or misfiled.
    """

    data: TabularRecord = {}
    section: Optional[str] = None
    field: Optional[str] = None

    for position, fragment in enumerate(fragments):
        if fragment.role is FragmentRole.SECTION:
            section = fragment.text
            data[section] = {}
        elif fragment.role is FragmentRole.FIELD:
            field = fragment.text
        else:
            if section is None:
                raise TabularParseError(
                    f"Value {fragment.text!r} at position {position} precedes any section"
                )
            if field is None:
                raise TabularParseError(
                    f"Value {fragment.text!r} at position {position} precedes any field label"
                )
            data[section][field] = fragment.text

    return data


async def read_fragments(elements: Sequence[PageElement]) -> List[Fragment]:
    """Classify and read the text of each element, preserving order."""

    fragments: List[Fragment] = []
    for element in elements:
        role = classify_fragment(await element.class_name())
        fragments.append(Fragment(role, await get_text(element)))
    return fragments


async def query_tabular_descendants(root: PageElement) -> List[PageElement]:
    return await root.query_all(TABULAR_DESCENDANTS)


async def read_tabular(root: PageElement) -> TabularRecord:
    """Collect ``root``'s labelled descendants and parse them."""

    return parse_tabular(await read_fragments(await query_tabular_descendants(root)))


__all__ = [
    "TabularRecord",
    "TABULAR_DESCENDANTS",
    "FragmentRole",
    "Fragment",
    "classify_fragment",
    "parse_tabular",
    "read_fragments",
    "query_tabular_descendants",
    "read_tabular",
]
