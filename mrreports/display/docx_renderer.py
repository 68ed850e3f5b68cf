"""
Word document rendering of document blocks (python-docx).

Used by the standalone company and interaction reports. Inline markdown in
paragraph, heading and list text is translated into runs: links become
external hyperlinks, **bold** becomes a bold run and `code` is shown plain.
"""

import re
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import docx
from docx.enum.text import WD_BREAK
from docx.opc.constants import RELATIONSHIP_TYPE
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from ..core.exceptions import RenderError
from ..utils.logger import get_logger
from .blocks import (
    Block,
    BulletList,
    CollapsibleSection,
    GeoMap,
    Heading,
    HorizontalRule,
    Link,
    PageBreak,
    Paragraph,
    Table,
)
from .markdown import display_value

logger = get_logger("mrreports.display.docx")

_INLINE = re.compile(r"\[([^\[\]]+)\]\(([^)]+)\)|\*\*([^*]+)\*\*|`([^`]+)`")
_LINK_COLOR = "0563C1"


def _add_hyperlink(paragraph, text: str, url: str):
    """Append an external hyperlink run to a paragraph."""
    part = paragraph.part
    r_id = part.relate_to(url, RELATIONSHIP_TYPE.HYPERLINK, is_external=True)

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    run = OxmlElement("w:r")
    props = OxmlElement("w:rPr")
    color = OxmlElement("w:color")
    color.set(qn("w:val"), _LINK_COLOR)
    underline = OxmlElement("w:u")
    underline.set(qn("w:val"), "single")
    props.append(color)
    props.append(underline)
    run.append(props)

    text_element = OxmlElement("w:t")
    text_element.text = text
    text_element.set(qn("xml:space"), "preserve")
    run.append(text_element)

    hyperlink.append(run)
    paragraph._p.append(hyperlink)
    return hyperlink


def _add_inline(paragraph, text: str) -> None:
    position = 0
    for match in _INLINE.finditer(text):
        if match.start() > position:
            paragraph.add_run(text[position:match.start()])
        link_text, link_target, bold_text, code_text = match.groups()
        if link_text is not None:
            _add_hyperlink(paragraph, link_text, link_target)
        elif bold_text is not None:
            paragraph.add_run(bold_text).bold = True
        else:
            paragraph.add_run(code_text)
        position = match.end()
    if position < len(text):
        paragraph.add_run(text[position:])


def _add_rule(document) -> None:
    """Empty paragraph with a bottom border."""
    paragraph = document.add_paragraph()
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "auto")
    borders.append(bottom)
    paragraph._p.get_or_add_pPr().append(borders)


def _fill_cell(cell, value: Any) -> None:
    paragraph = cell.paragraphs[0]
    if isinstance(value, Link):
        _add_hyperlink(paragraph, value.text, value.target)
    else:
        paragraph.add_run(display_value(value))


def _add_table(document, block: Table) -> None:
    table = document.add_table(rows=1, cols=len(block.header))
    table.style = "Table Grid"
    for cell, title in zip(table.rows[0].cells, block.header):
        cell.paragraphs[0].add_run(title).bold = True
    for row in block.rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, row):
            _fill_cell(cell, value)


def _add_geo_map(document, block: GeoMap) -> None:
    # Maps are markdown only; show the point coordinates instead
    rows = []
    for feature in block.features:
        longitude, latitude = feature["geometry"]["coordinates"]
        rows.append((feature["properties"].get("name"), latitude, longitude))
    _add_table(document, Table(header=("Name", "Latitude", "Longitude"), rows=tuple(rows)))


def _add_block(document, block: Block) -> None:
    if isinstance(block, Heading):
        heading = document.add_heading("", level=min(block.level, 9))
        _add_inline(heading, block.text)
    elif isinstance(block, Paragraph):
        paragraph = document.add_paragraph()
        if block.label:
            paragraph.add_run(f"{block.label}: ").bold = True
        _add_inline(paragraph, block.text)
    elif isinstance(block, Link):
        _add_hyperlink(document.add_paragraph(), block.text, block.target)
    elif isinstance(block, Table):
        _add_table(document, block)
    elif isinstance(block, HorizontalRule):
        _add_rule(document)
    elif isinstance(block, PageBreak):
        document.add_paragraph().add_run().add_break(WD_BREAK.PAGE)
    elif isinstance(block, BulletList):
        for item in block.items:
            _add_inline(document.add_paragraph(style="List Bullet"), item)
    elif isinstance(block, CollapsibleSection):
        # Word has no folding; title then body
        title = document.add_paragraph()
        title.add_run(block.title).bold = True
        for child in block.body:
            _add_block(document, child)
    elif isinstance(block, GeoMap):
        _add_geo_map(document, block)
    else:
        raise RenderError(f"Unsupported block type {type(block).__name__}")


def render_docx(blocks: Iterable[Block], properties: Optional[dict] = None):
    """
    Render blocks into a new Word document.

    Args:
        blocks: Document blocks in order.
        properties: Core properties to set (title, subject, author,
            keywords, comments, category).

    Returns:
        docx.document.Document
    """
    document = docx.Document()

    style = document.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)
    style.font.color.rgb = RGBColor(0x26, 0x26, 0x26)

    for key, value in (properties or {}).items():
        if value is None:
            continue
        if not hasattr(document.core_properties, key):
            raise RenderError(f"Unknown document property '{key}'")
        setattr(document.core_properties, key, value)

    for block in blocks:
        _add_block(document, block)

    return document


def save_docx(document, path: Union[str, Path]) -> Path:
    """Save a document, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        document.save(str(path))
    except OSError as e:
        raise RenderError(
            f"Failed to save report to {path}: {e}",
            {"path": str(path)},
        ) from e
    logger.info(f"Saved document {path}")
    return path


def document_text(document) -> str:
    """Plain text of all paragraphs and tables, for inspection."""
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text for cell in row.cells))
    return "\n".join(lines)
