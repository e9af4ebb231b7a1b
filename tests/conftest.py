import json
from pathlib import Path
from typing import Dict

import pytest

from agility.harvester import config
from agility.harvester.models import IndexEntry

ROOT = "https://agility.example"
INDEX_URL = f"{ROOT}/zone/events/past_all"
LOGIN_URL = f"{ROOT}/user/login"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "LOG_DIR", data_dir / "logs")
    monkeypatch.setattr(config, "RUNS_DIR", data_dir / "runs")
    monkeypatch.setattr(config, "INDEX_FILE", data_dir / "index.json")
    monkeypatch.setattr(config, "OUTPUT_FILE", data_dir / "agility-data.json")
    monkeypatch.setattr(config, "REPLAY_DIR", "")
    monkeypatch.setattr(config, "ROOT_SITE", ROOT)
    monkeypatch.setattr(config, "USER_EMAIL", "")
    monkeypatch.setattr(config, "USER_PASSWORD", "")
    monkeypatch.setattr(config, "MAX_PARALLEL_JOBS", 4)
    monkeypatch.setattr(config, "CHEVRON_EXPANSION_DELAY", 0)
    monkeypatch.setattr(config, "CHEVRON_SETTLE_SECONDS", 0.0)
    return data_dir


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def no_sleep():
    return _no_sleep


@pytest.fixture
def entry_factory():
    def make(index: int, **overrides) -> IndexEntry:
        fields = dict(
            id=f"event-{index}",
            short_date="12 Mar",
            issuer="FCI",
            title=f"Trial {index}",
            host_club="Dog Club",
            location="Berlin",
            flag="DE",
            participants_url=None,
            runs_url=None,
            info_url=None,
            is_cancelled=False,
        )
        fields.update(overrides)
        return IndexEntry(**fields)

    return make


def event_card(
    event_id: str,
    *,
    title: str,
    date: str = "12 Mar",
    issuer: str | None = "FCI",
    club: str = "Dog Club",
    location: str = "Berlin",
    flag: str = "DE",
    links=(),
    cancelled: bool = False,
) -> str:
    issuer_html = f"<span>{issuer}</span>" if issuer is not None else ""
    marker = "<span>Cancelled</span>" if cancelled else ""
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return (
        f'<div id="{event_id}"><div>'
        f"<div><div><span>{date}</span>{issuer_html}</div>"
        f"<div><span>{title}</span><span>{club}</span>"
        f"<div><span>{location}</span><span>{flag}</span></div></div></div>"
        f"<div><div>{marker}</div><div>{anchors}</div></div>"
        "</div></div>"
    )


def tabular_cells(section: str, *pairs) -> str:
    cells = [f'<div class="font-bold col-span-2">{section}</div>']
    for label, value in pairs:
        cells.append(f'<div class="text-gray-500 text-sm">{label}</div>')
        cells.append(f'<div class="font-bold text-black">{value}</div>')
    return "".join(cells)


def expandable_row(body: str, *, toggle: bool = True) -> str:
    chevron = '<button phx-click="toggle">v</button>' if toggle else ""
    return f"<div>{chevron}<div>{body}</div></div>"


def page(body: str) -> str:
    return f"<!DOCTYPE html><html><head><title>t</title></head><body>{body}</body></html>"


INDEX_HTML = page(
    '<div id="events">'
    + event_card(
        "event-1",
        title="Spring Trial",
        links=(
            "/events/info/1",
            "/events/1/runs",
            "/events/1/participants_list",
            "/clubs/42",
        ),
    )
    + event_card("event-2", title="Summer Cup", club="Agility Friends", links=("/events/info/2",))
    + event_card("event-3", title="Autumn Open", issuer=None, cancelled=True)
    + "</div>"
)

PARTICIPANTS_HTML = page(
    '<div id="participants_list">'
    + expandable_row(
        tabular_cells("Handler", ("Name", "Jane")) + tabular_cells("Dog", ("Name", "Rex"))
    )
    + expandable_row(
        tabular_cells("Handler", ("Name", "  Tom \n")) + tabular_cells("Dog", ("Name", "Bolt"))
    )
    + "</div>"
)

INFO_1_HTML = page(
    "<main><div><div>"
    '<div class="grid grid-cols-2">'
    + tabular_cells("General", ("Judge", "A. Smith"), ("Classes", "A1, A2"))
    + "</div>"
    '<div class="grid grid-cols-2">'
    + tabular_cells("Venue", ("Surface", "Grass"))
    + "</div>"
    "</div></div></main>"
    '<div class="rules"><div class="rules">'
    "<p>Bring your own water</p>"
    "<h1>Rules:</h1><p>no spikes</p><p>dogs on leash</p>"
    "</div></div>"
)

INFO_2_HTML = page(
    "<main><div><div></div></div></main>"
    '<div class="rules"><div class="rules">'
    "<h1>Rules</h1><p>no spikes</p>"
    "<h1>Scores</h1><p>top 3 qualify</p>"
    "</div></div>"
)

RUNS_HTML = page(
    '<div id="runs_list">'
    '<div><a href="/events/1/runs/1/start_list">start</a>'
    '<a href="/events/1/runs/1/combined_results">results</a>'
    '<a href="/events/1/runs/1/combined_results?page=2">more</a></div>'
    '<div><a href="/events/1/runs/2/combined_results">results</a></div>'
    '<div><a href="/events/1/runs/3/start_list">start</a></div>'
    "</div>"
)

RUN_1_HTML = page(
    '<div id="header_component"><div><div>'
    "<div><span>Jumping A1</span></div>"
    "<div>Jumping</div>"
    "<div>Status: <span>Finished</span></div>"
    "</div></div></div>"
    '<div id="results_comb_list">'
    + expandable_row(tabular_cells("Result", ("Place", "1"), ("Time", "31.2")))
    + expandable_row(tabular_cells("Result", ("Place", "2"), ("Time", "33.0")))
    + "</div>"
)

RUN_2_HTML = page("<p>Results are not published yet</p>")

LOGIN_HTML = page(
    '<form><input id="user_email"><input id="user_password" type="password">'
    '<button id="signin">Sign in</button></form>'
    "<button>I agree</button><button>Settings</button><button>i AGREE to all</button>"
)


def recorded_site() -> Dict[str, str]:
    return {
        INDEX_URL: INDEX_HTML,
        LOGIN_URL: LOGIN_HTML,
        f"{ROOT}/events/1/participants_list": PARTICIPANTS_HTML,
        f"{ROOT}/events/info/1": INFO_1_HTML,
        f"{ROOT}/events/info/2": INFO_2_HTML,
        f"{ROOT}/events/1/runs": RUNS_HTML,
        f"{ROOT}/events/1/runs/1/combined_results": RUN_1_HTML,
        f"{ROOT}/events/1/runs/2/combined_results": RUN_2_HTML,
    }


@pytest.fixture
def site_pages() -> Dict[str, str]:
    return recorded_site()


@pytest.fixture
def replay_dir(tmp_path: Path, site_pages: Dict[str, str]) -> Path:
    directory = tmp_path / "replay"
    directory.mkdir()
    manifest = {}
    for position, (url, html) in enumerate(sorted(site_pages.items())):
        name = f"page_{position}.html"
        (directory / name).write_text(html, encoding="utf-8")
        manifest[url] = name
    (directory / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    return directory
