import asyncio

import pytest

from conftest import page, tabular_cells
from agility.harvester.error_codes import ErrorCode
from agility.harvester.errors import TabularParseError
from agility.harvester.replay import ReplayPage
from agility.harvester.tabular import (
    Fragment,
    FragmentRole,
    classify_fragment,
    parse_tabular,
    read_tabular,
)

S, F, V = FragmentRole.SECTION, FragmentRole.FIELD, FragmentRole.VALUE


def _fragments(*pairs):
    return [Fragment(role, text) for role, text in pairs]


def test_classify_fragment_by_class_markers():
    assert classify_fragment("font-bold col-span-2") is S
    assert classify_fragment("text-gray-500 text-sm") is F
    assert classify_fragment("font-bold text-black") is V
    assert classify_fragment("") is V
    assert classify_fragment("text-gray-500 col-span-2") is S


def test_parse_tabular_groups_fields_under_sections():
    data = parse_tabular(
        _fragments(
            (S, "Handler"),
            (F, "Name"),
            (V, "Jane"),
            (F, "Club"),
            (V, "Dog Club"),
        )
    )

    assert data == {"Handler": {"Name": "Jane", "Club": "Dog Club"}}


def test_field_label_carries_over_into_next_section():
    data = parse_tabular(_fragments((S, "A"), (F, "Name"), (V, "1"), (S, "B"), (V, "2")))

    assert data == {"A": {"Name": "1"}, "B": {"Name": "2"}}


def test_repeated_section_starts_empty():
    data = parse_tabular(
        _fragments((S, "A"), (F, "x"), (V, "1"), (S, "A"), (F, "y"), (V, "2"))
    )

    assert data == {"A": {"y": "2"}}


def test_value_before_any_section_raises():
    with pytest.raises(TabularParseError, match="precedes any section") as excinfo:
        parse_tabular(_fragments((F, "Name"), (V, "Jane")))

    assert excinfo.value.error_code == ErrorCode.TABULAR


def test_value_before_any_field_label_raises():
    with pytest.raises(TabularParseError, match="position 1 precedes any field label"):
        parse_tabular(_fragments((S, "Handler"), (V, "Jane")))


def test_parse_tabular_empty_input():
    assert parse_tabular([]) == {}


def test_read_tabular_reads_labelled_descendants_in_document_order():
    html = page(
        '<div id="row"><button phx-click="toggle">open</button><div>'
        + tabular_cells("Handler", ("Name", "\n  Jane  "), ("Club", "Dog Club"))
        + '<div class="font-bold">ignored</div>'
        + tabular_cells("Dog", ("Name", "Rex"))
        + "</div></div>"
    )
    replay = ReplayPage({"https://agility.example/row": html})

    async def scenario():
        await replay.goto("https://agility.example/row")
        row = await replay.query_one("#row")
        return await read_tabular(row)

    assert asyncio.run(scenario()) == {
        "Handler": {"Name": "Jane", "Club": "Dog Club"},
        "Dog": {"Name": "Rex"},
    }
