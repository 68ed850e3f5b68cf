"""
Companies directory README and the per-company markdown pages.
"""

from typing import Sequence

from ..analytics.ranking import closest_competitors
from ..display.blocks import (
    Block,
    BulletList,
    CollapsibleSection,
    GeoMap,
    Heading,
    HorizontalRule,
    Link,
    Paragraph,
    Table,
    point_feature,
)
from ..display.markdown import bold, code, display_value, link
from ..utils.config import ReportSettings
from ..utils.logger import get_logger
from ..validation.schemas import Company, Interaction, find_company, find_interaction, linked_interactions
from .common import (
    back_link,
    badge,
    encode_uri,
    footer,
    maps_warning,
    relative_link,
)

logger = get_logger("mrreports.reports.companies")

COMPANIES_TABLE_HEADER = (
    "Company Name",
    "Company Type",
    "Company Role",
    "Company Region",
    "Total Interactions",
)


def company_feature(company: Company) -> dict:
    """GeoJSON point for a company with a known location."""
    return point_feature(
        company.name,
        company.longitude,
        company.latitude,
        description=company.description,
        role=company.role,
        url=company.url,
    )


class CompaniesReport:
    """
    Companies/README.md: introduction, table of companies and a map of the
    companies whose location is known.
    """

    def __init__(self, companies: Sequence[Company], settings: ReportSettings):
        self.companies = list(companies)
        self.settings = settings

    def table(self) -> Table:
        rows = tuple(
            (
                Link(company.name, relative_link(company.name)),
                company.company_type,
                company.role,
                company.region,
                company.total_interactions,
            )
            for company in self.companies
        )
        return Table(header=COMPANIES_TABLE_HEADER, rows=rows)

    def map_blocks(self) -> list[Block]:
        located = [company for company in self.companies if company.has_location]
        if not located:
            return []
        return [
            Heading(1, "Company Locations"),
            maps_warning(),
            GeoMap(features=tuple(company_feature(company) for company in located)),
        ]

    def build(self) -> list[Block]:
        blocks: list[Block] = [
            back_link("Back to main README", "../README.md"),
            HorizontalRule(),
            Heading(1, "Introduction"),
            Paragraph(
                f"There are currently {code(len(self.companies))} companies in the repository. "
                "The table below lists all available companies and some of their firmographics. "
                "Click on the company name to view the company's profile. Below the table is a "
                "map of all companies in the repository. Click on a company's marker to view "
                "additional company information in context."
            ),
            Heading(1, "Table of Companies"),
            self.table(),
            HorizontalRule(),
        ]
        blocks.extend(self.map_blocks())
        return blocks


# =============================================================================
# Per-company page
# =============================================================================

def _badges(company: Company) -> Paragraph:
    return Paragraph(" ".join([
        badge("Role", company.role),
        badge("Type", company.company_type),
        badge("Region", company.region),
        badge("Creator", company.creator_name),
    ]))


def _industry_blocks(company: Company) -> list[Block]:
    details = (
        f"{bold('Major Group')} → {display_value(company.major_group_description)} "
        f"(Code: {display_value(company.major_group_code)})",
        f"{bold('Industry Group')} → {display_value(company.industry_group_description)} "
        f"(Code: {display_value(company.industry_group_code)})",
        f"{bold('Industry')} → {display_value(company.industry)} "
        f"(Code: {display_value(company.industry_code)})",
    )
    return [
        Paragraph(
            f"{display_value(company.industry)} (Code: {display_value(company.industry_code)})",
            label="Industry",
        ),
        CollapsibleSection("Industry Details, click to expand", (BulletList(details),)),
    ]


def _is_complete(interaction: Interaction) -> bool:
    return None not in (interaction.description, interaction.abstract, interaction.reading_time)


def _interaction_link(interaction: Interaction) -> str:
    if not interaction.url:
        return interaction.name
    return link(interaction.name, "/" + encode_uri(interaction.url))


def _metadata_badges(interaction: Interaction) -> Paragraph:
    reading_time = (
        f"{interaction.reading_time} minutes" if interaction.reading_time is not None else None
    )
    return Paragraph(" ".join([
        badge("Reading time", reading_time),
        badge("Interaction type", interaction.interaction_type),
        badge("Page count", interaction.page_count),
        badge("Document type", interaction.content_type),
    ]))


class CompanyReport:
    """Companies/<Name>.md for one company."""

    def __init__(
        self,
        company: Company,
        companies: Sequence[Company],
        interactions: Sequence[Interaction],
        settings: ReportSettings,
    ):
        self.company = company
        self.companies = list(companies)
        self.interactions = list(interactions)
        self.settings = settings

    def introduction(self) -> list[Block]:
        company = self.company
        title = link(company.name, company.url) if company.url else company.name
        blocks: list[Block] = [
            back_link("Back to Company Directory", "./README.md"),
            HorizontalRule(),
            Heading(1, title),
            _badges(company),
            Paragraph(display_value(company.description), label="Description"),
            *_industry_blocks(company),
        ]
        if company.tags:
            blocks.append(Heading(3, "Tags"))
            blocks.append(Paragraph(" ".join(code(tag) for tag in company.tags)))
        blocks.append(HorizontalRule())
        return blocks

    def _similar_interaction(self, name: str, most: bool) -> list[Block]:
        interaction = find_interaction(name, self.interactions, f"similar interactions for {self.company.name}")
        if not _is_complete(interaction):
            return []
        prefix = "Most Similar Interaction: " if most else "Least Similar Interaction: "
        return [
            Heading(3, prefix + _interaction_link(interaction)),
            _metadata_badges(interaction),
            Paragraph(interaction.description),
        ]

    def most_similar_company(self) -> list[Block]:
        competitors = closest_competitors(self.company.similarity)
        if competitors is None:
            return []

        similar = find_company(
            competitors.most_similar, self.companies, f"most similar company for {self.company.name}"
        )
        entry = self.company.similarity[competitors.most_similar]
        logger.debug(f"{self.company.name}: most similar company is {similar.name}")
        return [
            Heading(2, "Most Similar Company"),
            Heading(3, link(similar.name, relative_link(similar.name))),
            _badges(similar),
            Paragraph(display_value(similar.description), label="Description"),
            *_industry_blocks(similar),
            *self._similar_interaction(entry.most_similar.name, most=True),
            *self._similar_interaction(entry.least_similar.name, most=False),
            HorizontalRule(),
        ]

    def interactions_section(self) -> list[Block]:
        if not self.company.linked_interactions:
            return []

        resolved = linked_interactions(self.company, self.interactions, f"company report for {self.company.name}")
        sections: list[Block] = []
        total_reading_time = 0
        for interaction in resolved:
            if not _is_complete(interaction):
                continue
            total_reading_time += interaction.reading_time
            sections.extend([
                Heading(3, _interaction_link(interaction)),
                _metadata_badges(interaction),
                Paragraph(interaction.description),
                Heading(4, "Discovered tags"),
                Paragraph(" ".join(code(topic) for topic in interaction.topics)),
                CollapsibleSection("Interaction abstract", (Paragraph(interaction.abstract),)),
            ])

        return [
            Heading(2, "Interactions"),
            Paragraph(
                f"{code(self.company.name)} has {code(self.company.total_interactions)} "
                "interactions in the repository, and the reading time for all interactions "
                f"is {code(total_reading_time)} minutes."
            ),
            *sections,
            HorizontalRule(),
        ]

    def web_links(self) -> list[Block]:
        company = self.company
        items = []
        if company.wikipedia_url:
            items.append(link(f"Wikipedia for {company.name}", company.wikipedia_url))
        else:
            items.append(f"The Wikipedia URL is {display_value(None)}")

        named_links = [
            (company.google_news_url, f"{company.name} on Google News"),
            (company.google_maps_url, f"Map for {company.name}"),
            (company.google_patents_url, f"{company.name} Patents"),
        ]
        if company.is_public:
            named_links.extend([
                (company.google_finance_url, "Google Finance"),
                (company.recent10k_url, "Most Recent 10-K Filing"),
                (company.recent10q_url, "Most Recent 10-Q Filing"),
                (company.firmographics_url, "SEC EDGAR Firmographics"),
                (company.filings_url, f"All Filings for {company.name}"),
                (company.owner_transactions_url, "Shareholder Transactions"),
            ])
        items.extend(link(text, url) for url, text in named_links if url)

        return [Heading(2, "Key Web Links"), BulletList(tuple(items))]

    def location(self) -> list[Block]:
        if not self.company.has_location:
            return []
        return [
            Heading(2, "Location"),
            maps_warning(),
            GeoMap(features=(company_feature(self.company),)),
        ]

    def build(self) -> list[Block]:
        return [
            *self.introduction(),
            *self.most_similar_company(),
            *self.interactions_section(),
            *self.web_links(),
            *self.location(),
            HorizontalRule(),
            footer(self.company),
        ]
