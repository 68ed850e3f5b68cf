"""
Document blocks: the renderer-independent output of the report assemblers.

Assemblers return an ordered list of blocks; display.markdown and
display.docx_renderer turn the same list into GitHub markdown or a Word
document.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    """
    Body text, optionally led by a bold label ("Label: text").

    Text may carry inline markdown: [links](target), **bold** and `code`.
    """
    text: str
    label: Optional[str] = None


@dataclass(frozen=True)
class Link:
    """A link, on its own line or inside a table cell."""
    text: str
    target: str


@dataclass(frozen=True)
class Table:
    """
    Header row plus data rows. The header renders even with no rows.

    Cells are plain values or Link instances; None renders as "Unknown".
    """
    header: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...] = ()

    def __post_init__(self):
        for index, row in enumerate(self.rows):
            if len(row) != len(self.header):
                raise ValueError(
                    f"Table row {index} has {len(row)} cells, header has {len(self.header)}"
                )


@dataclass(frozen=True)
class HorizontalRule:
    pass


@dataclass(frozen=True)
class PageBreak:
    pass


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class CollapsibleSection:
    """A titled section whose body is folded away in markdown."""
    title: str
    body: tuple["Block", ...] = ()


@dataclass(frozen=True)
class GeoMap:
    """Point features for a location map, one per geolocated company."""
    features: tuple[dict, ...] = field(default_factory=tuple)


Block = Union[
    Heading,
    Paragraph,
    Link,
    Table,
    HorizontalRule,
    PageBreak,
    BulletList,
    CollapsibleSection,
    GeoMap,
]


def point_feature(name: str, longitude: float, latitude: float, **properties) -> dict:
    """GeoJSON point feature."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [longitude, latitude]},
        "properties": {"name": name, **properties},
    }
