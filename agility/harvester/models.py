from __future__ import annotations

"""Records produced by a harvest.

JSON uses the site's camelCase keys so index caches and outputs written by
earlier runs stay readable.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .tabular import TabularRecord

Participant = TabularRecord


def _required_text(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class IndexEntry:
    """One event row of the past-events listing. Immutable once built."""

    id: str
    short_date: str
    issuer: Optional[str]
    title: str
    host_club: str
    location: str
    flag: str
    participants_url: Optional[str]
    runs_url: Optional[str]
    info_url: Optional[str]
    is_cancelled: bool
    unknown_urls: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "shortDate": self.short_date,
            "issuer": self.issuer,
            "title": self.title,
            "hostClub": self.host_club,
            "location": self.location,
            "flag": self.flag,
            "participantsUrl": self.participants_url,
            "runsUrl": self.runs_url,
            "infoUrl": self.info_url,
            "isCancelled": self.is_cancelled,
            "unknownUrls": list(self.unknown_urls),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndexEntry":
        """Rebuild an entry from its JSON form.

        Raises ``KeyError``/``TypeError`` when ``data`` is not an entry object
        or a required text field is missing or not a string.
        """

        return cls(
            id=str(data["id"]),
            short_date=_required_text(data, "shortDate"),
            issuer=data.get("issuer"),
            title=_required_text(data, "title"),
            host_club=_required_text(data, "hostClub"),
            location=_required_text(data, "location"),
            flag=_required_text(data, "flag"),
            participants_url=data.get("participantsUrl"),
            runs_url=data.get("runsUrl"),
            info_url=data.get("infoUrl"),
            is_cancelled=bool(data.get("isCancelled", False)),
            unknown_urls=tuple(data.get("unknownUrls") or ()),
        )


@dataclass
class EntryInfo:
    data_table: TabularRecord = field(default_factory=dict)
    messages: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"dataTable": self.data_table, "messages": self.messages}


@dataclass
class Run:
    title: str = ""
    type: str = ""
    status: str = ""
    results: List[TabularRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type,
            "status": self.status,
            "results": self.results,
        }


@dataclass
class FullEntry:
    """An ``IndexEntry`` plus whatever its phases produced.

    ``participants``, ``info`` and ``runs`` stay ``None`` unless the entry had
    the matching URL; the lane that claimed the entry is its only writer.
    """

    entry: IndexEntry
    participants: Optional[List[Participant]] = None
    info: Optional[EntryInfo] = None
    runs: Optional[List[Run]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = self.entry.to_dict()
        if self.participants is not None:
            payload["participants"] = self.participants
        if self.info is not None:
            payload["info"] = self.info.to_dict()
        if self.runs is not None:
            payload["runs"] = [run.to_dict() for run in self.runs]
        return payload


__all__ = [
    "Participant",
    "IndexEntry",
    "EntryInfo",
    "Run",
    "FullEntry",
]
