"""Document blocks and their markdown and Word renderers."""

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
    point_feature,
)
from .docx_renderer import document_text, render_docx, save_docx
from .markdown import render_markdown

__all__ = [
    "Block",
    "BulletList",
    "CollapsibleSection",
    "GeoMap",
    "Heading",
    "HorizontalRule",
    "Link",
    "PageBreak",
    "Paragraph",
    "Table",
    "document_text",
    "point_feature",
    "render_docx",
    "render_markdown",
    "save_docx",
]
