"""Tests for Word rendering of document blocks."""

import docx
import pytest
from docx.opc.constants import RELATIONSHIP_TYPE

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
    document_text,
    point_feature,
    render_docx,
    save_docx,
)


def _hyperlinks(document):
    return sorted(
        rel.target_ref
        for rel in document.part.rels.values()
        if rel.reltype == RELATIONSHIP_TYPE.HYPERLINK
    )


def test_core_properties():
    document = render_docx([], {"title": "Acme Report", "author": "Mediumroast", "category": None})
    assert document.core_properties.title == "Acme Report"
    assert document.core_properties.author == "Mediumroast"


def test_unknown_property():
    with pytest.raises(RenderError):
        render_docx([], {"colour": "blue"})


def test_blocks_render():
    document = render_docx([
        Heading(1, "Introduction"),
        Paragraph("Plain **bold** and `code` text", label="Note"),
        HorizontalRule(),
        BulletList(("first", "second")),
        PageBreak(),
        CollapsibleSection("Details", (Paragraph("folded body"),)),
        Table(header=("Attribute", "Value"), rows=(("Name", "Acme"), ("Phone", None))),
    ])
    text = document_text(document)
    assert "Introduction" in text
    assert "Note: Plain bold and code text" in text
    assert "first" in text and "second" in text
    assert "folded body" in text
    assert "Attribute | Value" in text
    assert "Phone | Unknown" in text
    assert len(document.tables) == 1


def test_bold_runs():
    document = render_docx([Paragraph("a **b** c")])
    runs = document.paragraphs[-1].runs
    assert [(run.text, bool(run.bold)) for run in runs] == [("a ", False), ("b", True), (" c", False)]


def test_hyperlinks():
    document = render_docx([
        Paragraph("See [the site](https://example.com) for more"),
        Link("Permalink", "https://example.com/doc.pdf"),
        Table(header=("Name",), rows=((Link("Acme", "https://acme.example.com"),),)),
    ])
    assert _hyperlinks(document) == [
        "https://acme.example.com",
        "https://example.com",
        "https://example.com/doc.pdf",
    ]


def test_geo_map_becomes_table():
    document = render_docx([GeoMap(features=(point_feature("Acme", -122.0, 37.0),))])
    assert "Acme | 37.0 | -122.0" in document_text(document)


def test_save_and_reopen(tmp_path):
    document = render_docx([Heading(1, "Saved")], {"title": "Saved Report"})
    path = save_docx(document, tmp_path / "out" / "report.docx")
    assert path.exists()
    assert docx.Document(str(path)).core_properties.title == "Saved Report"


def test_save_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(RenderError):
        save_docx(render_docx([]), blocker / "report.docx")
