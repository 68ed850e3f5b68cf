"""
Standalone Word reports for one company or one interaction.

Both reports are built as document blocks and rendered with
display.docx_renderer. When produced as a package the references link to
the interaction documents stored next to the report under interactions/.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import quote_plus

from ..analytics.ranking import rank, rank_comparisons
from ..display.blocks import Block, Heading, Link, PageBreak, Paragraph, Table
from ..display.markdown import display_value, link
from ..utils.config import ReportSettings
from ..utils.logger import get_logger
from ..validation.schemas import Company, Interaction, find_company, find_interaction
from .common import region_name

logger = get_logger("mrreports.reports.standalone")

PACKAGE_DOCUMENTS_DIR = "interactions"

_PACKAGE_NOTE = (
    " If this report document is produced as a package, instead of standalone, then the "
    "hyperlinks are active and will link to documents on the local folder after the "
    "package is opened."
)


def truncate(text: Optional[str], max_chars: int) -> str:
    """Shorten text to max_chars, ending with an ellipsis when cut."""
    text = display_value(text)
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."


def percent(score: float) -> str:
    return f"{round(score * 100)}%"


def topic_table(topics: dict[str, float]) -> Table:
    """Keywords ranked High/Medium/Low by quartile."""
    rows = tuple(
        (keyword, f"{ranked.score:.2f}", ranked.rank)
        for keyword, ranked in rank(topics).items()
    )
    return Table(header=("Keywords", "Score", "Rank"), rows=rows)


def firmographics_table(company: Company) -> Table:
    """Key facts about a company."""
    address = ", ".join(
        part for part in (
            company.street_address,
            company.city,
            company.state_province,
            company.zip_postal,
            company.country,
        ) if part
    )
    location = (
        Link(address, "https://www.google.com/maps/place/" + quote_plus(address))
        if address else None
    )
    stock_symbol = (
        Link(company.stock_symbol, "https://www.bing.com/search?q=" + quote_plus(company.stock_symbol))
        if company.stock_symbol else None
    )
    cik = (
        Link(company.cik, "https://www.sec.gov/edgar/search/#/ciks=" + company.cik)
        if company.cik else None
    )
    rows = (
        ("Name", company.name),
        ("Description", company.description),
        ("Website", Link(company.url, company.url) if company.url else None),
        ("Role", company.role),
        ("Industry", company.industry),
        ("Patents", Link(
            f"{company.name} Patent Search",
            "https://patents.google.com/?assignee=" + quote_plus(company.name),
        )),
        ("News", Link(
            f"{company.name} Company News",
            "https://news.google.com/search?q=" + quote_plus(company.name),
        )),
        ("Location", location),
        ("Region", region_name(company.region)),
        ("Phone", company.phone),
        ("Type", "Public" if company.is_public else "Private"),
        ("Stock Symbol", stock_symbol),
        ("CIK", cik),
        ("No. Interactions", company.total_interactions),
        ("No. Studies", company.total_studies),
    )
    return Table(header=("Attribute", "Value"), rows=rows)


def _document_link(interaction: Interaction, package: bool) -> Optional[Link]:
    if package and interaction.document_name:
        return Link("Document", f"./{PACKAGE_DOCUMENTS_DIR}/{interaction.document_name}")
    if interaction.url and interaction.url.startswith(("http://", "https://")):
        return Link("Permalink", interaction.url)
    return None


def interaction_descriptions(
    interactions: Sequence[Interaction], object_name: str, object_type: str
) -> list[Block]:
    rows = tuple((interaction.name, interaction.description) for interaction in interactions)
    return [
        Paragraph(
            f"This section contains descriptions for the {len(interactions)} interactions "
            f"associated to the {object_name} {object_type} object. Additional detail is in "
            "the References section of this document."
        ),
        Table(header=("Name", "Description"), rows=rows),
    ]


def interaction_references(
    interactions: Sequence[Interaction],
    object_name: str,
    settings: ReportSettings,
    package: bool = False,
) -> list[Block]:
    """One block group per interaction: abstract, link and metadata strip."""
    total_reading_time = sum(interaction.reading_time or 0 for interaction in interactions)
    blocks: list[Block] = [
        Paragraph(
            "The mediumroast.io system automatically generated this section. It includes key "
            f"metadata from each interaction associated to the object {object_name}."
            + _PACKAGE_NOTE
            + f" Note that the total estimated reading time for all interactions is "
            f"{total_reading_time} minutes."
        )
    ]

    for interaction in interactions:
        occurred = interaction.occurred_at
        strip = [
            f"Date: {occurred.strftime('%Y-%m-%d %H:%M') if occurred else display_value(None)}",
            f"Type: {display_value(interaction.interaction_type)}",
            f"Created on: {display_value(interaction.creation_date)}",
            f"Est. Reading Time: {display_value(interaction.reading_time)} min",
        ]
        document = _document_link(interaction, package)
        if document is not None:
            strip.insert(0, link(document.text, document.target))

        blocks.extend([
            Heading(2, interaction.name),
            Paragraph(truncate(interaction.abstract, settings.abstract_max_chars)),
            Paragraph("[ " + " | ".join(strip) + " ]"),
        ])
    return blocks


def _introduction(object_type: str, related: str) -> list[Block]:
    return [
        Heading(1, "Introduction"),
        Paragraph(
            "The mediumroast.io system automatically generated this document. It includes key "
            f"metadata for this {object_type} object and {related}." + _PACKAGE_NOTE
        ),
    ]


# =============================================================================
# Company report
# =============================================================================

@dataclass(frozen=True)
class Competitor:
    """A compared company with its most and least similar interactions."""
    company: Company
    most_similar: Interaction
    most_similar_score: float
    least_similar: Interaction
    least_similar_score: float


class CompanyStandalone:
    """Word report for one company."""

    object_type = "Company"

    def __init__(
        self,
        company: Company,
        interactions: Sequence[Interaction],
        companies: Sequence[Company],
        all_interactions: Sequence[Interaction],
        settings: ReportSettings,
        package: bool = False,
    ):
        """
        Args:
            company: Company to report on.
            interactions: Interactions linked to the company.
            companies: All companies, used to resolve competitors.
            all_interactions: All interactions, used to resolve the
                competitors' most and least similar interactions.
            settings: Report settings.
            package: Link references to packaged documents.
        """
        self.company = company
        self.interactions = list(interactions)
        self.settings = settings
        self.package = package
        self.title = f"{company.name} Company Report"
        self.description = (
            f"A Company report summarizing {company.name} and including relevant company data."
        )
        self.competitors = self._resolve_competitors(companies, all_interactions)

    def _resolve_competitors(
        self, companies: Sequence[Company], all_interactions: Sequence[Interaction]
    ) -> list[Competitor]:
        operation = f"company report for {self.company.name}"
        competitors = []
        for name, entry in self.company.similarity.items():
            competitors.append(Competitor(
                company=find_company(name, companies, operation),
                most_similar=find_interaction(entry.most_similar.name, all_interactions, operation),
                most_similar_score=entry.most_similar.score,
                least_similar=find_interaction(entry.least_similar.name, all_interactions, operation),
                least_similar_score=entry.least_similar.score,
            ))
        return competitors

    def documents(self) -> list[Interaction]:
        """Interactions whose documents belong in a package, without duplicates."""
        seen = {}
        for interaction in self.interactions:
            seen.setdefault(interaction.name, interaction)
        for competitor in self.competitors:
            seen.setdefault(competitor.most_similar.name, competitor.most_similar)
            seen.setdefault(competitor.least_similar.name, competitor.least_similar)
        return list(seen.values())

    def properties(self) -> dict:
        return {
            "title": self.title,
            "subject": self.description,
            "author": self.settings.creator,
            "comments": f"Prepared by {self.settings.author_company}",
            "category": f"{self.object_type} Report",
        }

    def comparison(self) -> list[Block]:
        ranking = rank_comparisons(self.company.comparison)
        table = Table(
            header=("Company", "Role", "Rank", "Percent Similar"),
            rows=tuple((row.name, row.role, row.label, row.percent) for row in ranking.rows),
        )
        if ranking.closest is None:
            return [
                Paragraph(f"{self.company.name} has not been compared to other companies yet."),
                table,
            ]

        closest = ranking.closest
        return [
            Paragraph(
                "The mediumroast.io has compared the content for all companies in the system to "
                f"{self.company.name}'s content and discovered that the closest company is "
                f"{closest.name} acting in the role of a {display_value(closest.role)}. "
                f"Additional detail for other companies {self.company.name} was compared to are "
                "in the table below."
            ),
            Heading(2, "Comparison Table"),
            table,
        ]

    def topics(self) -> list[Block]:
        return [
            Heading(1, "Topics"),
            Paragraph(
                "The following topics were automatically generated from all "
                f"{self.company.total_interactions} interactions associated to this company."
            ),
            Heading(2, "Topics Table"),
            topic_table(self.company.topics),
        ]

    def competitive_content(self) -> list[Block]:
        if not self.competitors:
            return []

        total_reading_time = sum(
            (c.most_similar.reading_time or 0) + (c.least_similar.reading_time or 0)
            for c in self.competitors
        )
        blocks: list[Block] = [
            PageBreak(),
            Heading(1, "Competitive Content"),
            Paragraph(
                "For the competitive companies compared, by the mediumroast.io, additional data "
                "is provided per competitor including firmographics, most/least similar "
                "interaction table, most/least similar interaction descriptions, and most/least "
                "similar interaction summaries. Note that the total estimated reading time for "
                f"all competitive most/least similar interactions is {total_reading_time} minutes."
            ),
        ]
        for competitor in self.competitors:
            pair = [competitor.most_similar, competitor.least_similar]
            blocks.extend([
                Heading(2, f"Firmographics for: {competitor.company.name}"),
                firmographics_table(competitor.company),
                Heading(2, "Table for most/least similar interactions"),
                Table(
                    header=("Name", "Percent Similar", "Category"),
                    rows=(
                        (competitor.most_similar.name, percent(competitor.most_similar_score), "Most Similar"),
                        (competitor.least_similar.name, percent(competitor.least_similar_score), "Least Similar"),
                    ),
                ),
                Heading(2, "Interaction descriptions"),
                *interaction_descriptions(pair, competitor.company.name, self.object_type),
                Heading(2, "Interaction summaries"),
                *interaction_references(pair, competitor.company.name, self.settings, self.package),
            ])
        return blocks

    def build(self) -> list[Block]:
        logger.debug(
            f"Building company report for {self.company.name}: "
            f"{len(self.interactions)} interactions, {len(self.competitors)} competitors"
        )
        return [
            *_introduction(
                self.object_type,
                "relevant summaries and metadata from the associated interactions",
            ),
            Heading(1, "Company Detail"),
            firmographics_table(self.company),
            Heading(1, "Comparison"),
            *self.comparison(),
            *self.topics(),
            Heading(1, "Interaction Summaries"),
            *interaction_descriptions(self.interactions, self.company.name, self.object_type),
            *self.competitive_content(),
            PageBreak(),
            Heading(1, "References"),
            *interaction_references(
                self.interactions, self.company.name, self.settings, self.package
            ),
        ]


# =============================================================================
# Interaction report
# =============================================================================

class InteractionStandalone:
    """Word report for one interaction and its company."""

    object_type = "Interaction"

    def __init__(
        self,
        interaction: Interaction,
        company: Optional[Company],
        settings: ReportSettings,
        package: bool = False,
    ):
        self.interaction = interaction
        self.company = company
        self.settings = settings
        self.package = package
        self.title = f"{interaction.name} Interaction Report"
        self.description = (
            f"An Interaction report summarizing {interaction.name} and including relevant "
            "company data."
        )

    def documents(self) -> list[Interaction]:
        return [self.interaction]

    def properties(self) -> dict:
        return {
            "title": self.title,
            "subject": self.description,
            "author": self.settings.creator,
            "comments": f"Prepared by {self.settings.author_company}",
            "category": f"{self.object_type} Report",
        }

    def metadata_table(self) -> Table:
        interaction = self.interaction
        name = interaction.name
        document = _document_link(interaction, self.package)
        if self.package and document is not None:
            name = Link(interaction.name, document.target)
        return Table(
            header=("Attribute", "Value"),
            rows=(
                ("Interaction Name", name),
                ("Description", interaction.description),
                ("Creation Date", interaction.creation_date),
                ("Region", region_name(interaction.region)),
                ("Type", interaction.interaction_type),
            ),
        )

    def build(self) -> list[Block]:
        blocks: list[Block] = [
            *_introduction(self.object_type, "relevant metadata from the associated company"),
            Heading(1, "Interaction Detail"),
            self.metadata_table(),
            Heading(1, "Topics"),
            topic_table(self.interaction.topics),
            Heading(1, "Abstract"),
            Paragraph(display_value(self.interaction.abstract)),
            Heading(1, "References"),
            *interaction_references(
                [self.interaction], self.interaction.name, self.settings, self.package
            ),
        ]
        if self.company is not None:
            blocks.extend([Heading(1, "Company Detail"), firmographics_table(self.company)])
        return blocks
