"""
GitHub flavoured markdown rendering of document blocks.
"""

import json
from typing import Any, Iterable, Sequence

from tabulate import tabulate

from ..core.exceptions import RenderError
from ..validation.schemas import UNKNOWN
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


def link(text: str, target: str) -> str:
    """Inline markdown link."""
    return f"[{text}]({target})"


def bold(text: str) -> str:
    return f"**{text}**"


def code(text: Any) -> str:
    return f"`{text}`"


def display_value(value: Any) -> str:
    """Render a possibly missing value; None shows as Unknown."""
    if value is None:
        return UNKNOWN
    return str(value)


def _cell(value: Any) -> str:
    if isinstance(value, Link):
        text = link(value.text, value.target)
    else:
        text = display_value(value)
    return text.replace("|", "\\|").replace("\n", " ")


def _table(block: Table) -> str:
    # Cells are pre-rendered text; numparse would reformat values like "0930"
    return tabulate(
        [[_cell(value) for value in row] for row in block.rows],
        headers=[_cell(h) for h in block.header],
        tablefmt="github",
        disable_numparse=True,
    )


def _geojson(block: GeoMap) -> str:
    collection = {"type": "FeatureCollection", "features": list(block.features)}
    return "```geojson\n" + json.dumps(collection, indent=2) + "\n```"


def _render(block: Block) -> str:
    if isinstance(block, Heading):
        if not 1 <= block.level <= 6:
            raise RenderError(f"Invalid heading level {block.level}", {"text": block.text})
        return f"{'#' * block.level} {block.text}"
    if isinstance(block, Paragraph):
        if block.label:
            return f"{bold(block.label + ':')} {block.text}"
        return block.text
    if isinstance(block, Link):
        return link(block.text, block.target)
    if isinstance(block, Table):
        return _table(block)
    if isinstance(block, HorizontalRule):
        return "---"
    if isinstance(block, PageBreak):
        # No page concept on GitHub
        return ""
    if isinstance(block, BulletList):
        return "\n".join(f"- {item}" for item in block.items)
    if isinstance(block, CollapsibleSection):
        body = render_markdown(block.body).rstrip("\n")
        return f"<details>\n<summary>{block.title}</summary>\n\n{body}\n\n</details>"
    if isinstance(block, GeoMap):
        return _geojson(block)
    raise RenderError(f"Unsupported block type {type(block).__name__}")


def render_markdown(blocks: Iterable[Block]) -> str:
    """
    Render blocks to a markdown document.

    Blocks are separated by a blank line and the document ends with a
    newline.
    """
    parts: Sequence[str] = [text for text in (_render(b) for b in blocks) if text]
    if not parts:
        return ""
    return "\n\n".join(parts) + "\n"
