"""Tests for markdown rendering of document blocks."""

import json

import pytest

from mrreports.core.exceptions import RenderError
from mrreports.display import (
    BulletList,
    CollapsibleSection,
    GeoMap,
    Heading,
    HorizontalRule,
    Link,
    PageBreak,
    Paragraph,
    Table,
    point_feature,
    render_markdown,
)


def test_blocks_separated_by_blank_lines():
    blocks = [Heading(1, "Title"), Paragraph("Body"), HorizontalRule()]
    assert render_markdown(blocks) == "# Title\n\nBody\n\n---\n"


def test_empty_document():
    assert render_markdown([]) == ""


def test_labelled_paragraph():
    assert render_markdown([Paragraph("text", label="Insight")]) == "**Insight:** text\n"


def test_table_with_missing_values_and_links(table_rows):
    table = Table(
        header=("Name", "Role"),
        rows=((Link("Acme", "./Acme.md"), None), ("a|b", "x")),
    )
    text = render_markdown([table])
    assert table_rows(text) == [
        ["Name", "Role"],
        ["[Acme](./Acme.md)", "Unknown"],
        ["a\\|b", "x"],
    ]
    assert text.splitlines()[1].startswith("|-")


def test_table_keeps_numeric_text(table_rows):
    text = render_markdown([Table(header=("Time", "Score"), rows=(("0930", "0.900"),))])
    assert table_rows(text)[1] == ["0930", "0.900"]


def test_table_header_without_rows(table_rows):
    lines = render_markdown([Table(header=("A", "B"))]).splitlines()
    assert len(lines) == 2
    assert table_rows(lines[0]) == [["A", "B"]]
    assert set(lines[1]) == {"|", "-"}


def test_table_row_length_mismatch():
    with pytest.raises(ValueError):
        Table(header=("A", "B"), rows=(("only one",),))


def test_page_break_is_skipped():
    assert render_markdown([Paragraph("a"), PageBreak(), Paragraph("b")]) == "a\n\nb\n"


def test_bullet_list():
    assert render_markdown([BulletList(("one", "two"))]) == "- one\n- two\n"


def test_collapsible_section():
    section = CollapsibleSection("Details", (Paragraph("hidden"),))
    assert render_markdown([section]) == (
        "<details>\n<summary>Details</summary>\n\nhidden\n\n</details>\n"
    )


def test_geo_map():
    feature = point_feature("Acme", -122.0, 37.0, role="Owner")
    text = render_markdown([GeoMap(features=(feature,))])
    assert text.startswith("```geojson\n")
    assert text.endswith("```\n")

    collection = json.loads(text[len("```geojson\n"):-len("```\n")])
    assert collection["type"] == "FeatureCollection"
    assert collection["features"][0]["geometry"]["coordinates"] == [-122.0, 37.0]
    assert collection["features"][0]["properties"] == {"name": "Acme", "role": "Owner"}


@pytest.mark.parametrize("level", [0, 7])
def test_invalid_heading_level(level):
    with pytest.raises(RenderError):
        render_markdown([Heading(level, "bad")])
