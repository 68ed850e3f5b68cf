"""
Studies directory README.
"""

from typing import Sequence

from ..display.blocks import Block, Heading, HorizontalRule, Link, Paragraph, Table
from ..display.markdown import code
from ..utils.config import ReportSettings
from ..validation.schemas import Study
from .common import back_link, no_studies_notice, relative_link

STUDIES_TABLE_HEADER = (
    "Study Name",
    "Related GitHub Project",
    "Total Associated Companies",
    "Caffeinated",
)


class StudiesReport:
    """Studies/README.md: introduction and a table of studies, or a notice when there are none."""

    def __init__(self, studies: Sequence[Study], settings: ReportSettings):
        self.studies = list(studies)
        self.settings = settings

    def table(self) -> Table:
        rows = tuple(
            (
                Link(study.name, relative_link(study.name)),
                study.project,
                study.total_companies,
                "Yes" if study.is_caffeinated else "No",
            )
            for study in self.studies
        )
        return Table(header=STUDIES_TABLE_HEADER, rows=rows)

    def build(self) -> list[Block]:
        blocks: list[Block] = [
            back_link("Back to main README", "../README.md"),
            HorizontalRule(),
            Heading(1, "Introduction"),
            Paragraph(
                f"There are currently {code(len(self.studies))} study or studies in the "
                "repository. The table below lists all available studies and some of their "
                "characteristics. Click on the study name to view the study's profile."
            ),
        ]
        if not self.studies:
            blocks.extend(no_studies_notice(self.settings))
            return blocks

        blocks.append(Heading(1, "Table of Studies"))
        blocks.append(self.table())
        return blocks
