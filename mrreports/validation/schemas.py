"""
Pydantic schemas for Mediumroast objects.

Defines the companies, interactions and studies read from the repository
JSON collections. The wire format uses the string "Unknown" (or an empty
string) for missing values; those are dropped on input so that missing data
is an explicit None in Python and only becomes "Unknown" again on display.
"""

import re
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Type, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..core.exceptions import MalformedInputError, NotFoundError

UNKNOWN = "Unknown"

# Snapshot keys above this are epoch milliseconds rather than seconds
_EPOCH_MS_THRESHOLD = 1e11


def _is_unknown(value: Any) -> bool:
    return isinstance(value, str) and value.strip() in ("", UNKNOWN)


def _parses(value: str, fmt: str) -> bool:
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        return False
    return True


def parse_snapshot_time(key: str) -> datetime:
    """
    Parse a snapshot key (epoch seconds or milliseconds) into a UTC datetime.

    Raises:
        ValueError: If the key is not a number or is out of range.
    """
    try:
        value = float(key)
    except (TypeError, ValueError):
        raise ValueError(f"Snapshot key is not an epoch timestamp: {key!r}")
    if value > _EPOCH_MS_THRESHOLD:
        value = value / 1000.0
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise ValueError(f"Snapshot key is out of range: {key!r}")


class WireModel(BaseModel):
    """Base for all objects read from the repository JSON files."""
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_unknown_values(cls, data: Any) -> Any:
        """Treat "Unknown" and empty strings as absent."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not _is_unknown(v)}
        return data


# =============================================================================
# Companies
# =============================================================================

class ScoredInteraction(WireModel):
    """An interaction and its similarity score."""
    name: str
    score: float


class SimilarityEntry(WireModel):
    """Most and least similar interactions of a compared company."""
    most_similar: ScoredInteraction
    least_similar: ScoredInteraction


class ComparisonEntry(WireModel):
    """Similarity of another company to the company in question."""
    name: str
    similarity: float
    role: Optional[str] = None


class Company(WireModel):
    """Schema for company data."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    company_type: Optional[str] = None
    role: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    url: Optional[str] = None
    logo_url: Optional[str] = None

    industry: Optional[str] = None
    industry_code: Optional[str] = None
    industry_group_description: Optional[str] = None
    industry_group_code: Optional[str] = None
    major_group_description: Optional[str] = None
    major_group_code: Optional[str] = None

    street_address: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    zip_postal: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    stock_symbol: Optional[str] = None
    exchange: Optional[str] = None
    cik: Optional[str] = None

    wikipedia_url: Optional[str] = None
    google_news_url: Optional[str] = None
    google_maps_url: Optional[str] = None
    google_patents_url: Optional[str] = None
    google_finance_url: Optional[str] = None
    recent10k_url: Optional[str] = None
    recent10q_url: Optional[str] = None
    firmographics_url: Optional[str] = None
    filings_url: Optional[str] = None
    owner_transactions_url: Optional[str] = None

    linked_interactions: dict[str, Any]
    linked_studies: dict[str, Any] = Field(default_factory=dict)
    tags: dict[str, Any] = Field(default_factory=dict)
    topics: dict[str, float] = Field(default_factory=dict)
    similarity: dict[str, SimilarityEntry] = Field(default_factory=dict)
    comparison: dict[str, ComparisonEntry] = Field(default_factory=dict)

    creator_name: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None

    @property
    def total_interactions(self) -> int:
        """Number of linked interactions."""
        return len(self.linked_interactions)

    @property
    def total_studies(self) -> int:
        """Number of linked studies."""
        return len(self.linked_studies)

    @property
    def has_location(self) -> bool:
        """Both coordinates are known."""
        return self.latitude is not None and self.longitude is not None

    @property
    def is_public(self) -> bool:
        """A company with a known stock symbol or CIK is public."""
        return self.stock_symbol is not None or self.cik is not None


# =============================================================================
# Interactions
# =============================================================================

class Interaction(WireModel):
    """Schema for interaction data."""
    name: str = Field(..., min_length=1)
    guid: Optional[str] = Field(
        None, validation_alias=AliasChoices("guid", "file_hash", "id")
    )
    interaction_type: Optional[str] = None
    date: Optional[str] = None  # YYYYMMDD
    time: Optional[str] = None  # HHMM
    abstract: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    region: Optional[str] = None
    reading_time: Optional[int] = None
    page_count: Optional[int] = None
    content_type: Optional[str] = None
    topics: dict[str, float] = Field(
        default_factory=dict, validation_alias=AliasChoices("topics", "tags")
    )
    linked_companies: dict[str, Any] = Field(default_factory=dict)

    creator_name: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        """Validate YYYYMMDD date."""
        if v is None:
            return None
        v = v.strip()
        if not re.match(r"^\d{8}$", v) or not _parses(v, "%Y%m%d"):
            raise ValueError(f"Invalid interaction date: {v}. Expected: YYYYMMDD")
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        """Validate HHMM time."""
        if v is None:
            return None
        v = v.strip()
        if not re.match(r"^\d{4}$", v) or not _parses(v, "%H%M"):
            raise ValueError(f"Invalid interaction time: {v}. Expected: HHMM")
        return v

    @property
    def occurred_at(self) -> Optional[datetime]:
        """Date and time of the interaction, when the date is known."""
        if self.date is None:
            return None
        return datetime.strptime(self.date + (self.time or "0000"), "%Y%m%d%H%M")

    @property
    def document_name(self) -> Optional[str]:
        """Object name of the source document (last path segment of the URL)."""
        if not self.url:
            return None
        return self.url.split("://")[-1].split("/")[-1]


# =============================================================================
# Studies
# =============================================================================

class InsightRecord(WireModel):
    """A machine generated insight scored against target companies."""
    source_interaction: str
    insight: Optional[str] = None
    type: Optional[str] = None
    count: int
    excerpts: Optional[str] = None
    targets: dict[str, float]


class StudyCompanies(WireModel):
    """Companies included in one study snapshot."""
    included_companies: list[str] = Field(default_factory=list)


class Study(WireModel):
    """Schema for study data."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    project: Optional[str] = None
    status: Literal[0, 1] = 0
    companies: dict[str, StudyCompanies] = Field(default_factory=dict)
    source_topics: dict[str, dict[str, list[InsightRecord]]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sourceTopics", "source_topics"),
    )

    creator_name: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None

    @field_validator("source_topics", mode="before")
    @classmethod
    def normalize_source_topics(cls, v: Any) -> Any:
        """Accept per-company insight records as a list or a keyed mapping."""
        if not isinstance(v, dict):
            return v
        normalized = {}
        for key, per_company in v.items():
            if isinstance(per_company, dict):
                per_company = {
                    company: list(records.values()) if isinstance(records, dict) else records
                    for company, records in per_company.items()
                }
            normalized[key] = per_company
        return normalized

    @field_validator("companies", "source_topics")
    @classmethod
    def validate_snapshot_keys(cls, v: dict) -> dict:
        """Snapshot keys must be epoch timestamps."""
        for key in v:
            parse_snapshot_time(key)
        return v

    @property
    def is_caffeinated(self) -> bool:
        """The study has been analyzed."""
        return self.status == 1

    def latest_companies(self) -> Optional[tuple[datetime, StudyCompanies]]:
        """Most recent companies snapshot, or None when there are none."""
        return _latest_snapshot(self.companies)

    def latest_source_topics(self) -> Optional[tuple[datetime, dict[str, list[InsightRecord]]]]:
        """Most recent per-company insight snapshot, or None when there are none."""
        return _latest_snapshot(self.source_topics)

    @property
    def total_companies(self) -> int:
        """Number of companies in the most recent snapshot."""
        latest = self.latest_companies()
        return len(latest[1].included_companies) if latest else 0


def _latest_snapshot(snapshots: dict):
    if not snapshots:
        return None
    key = max(snapshots, key=parse_snapshot_time)
    return parse_snapshot_time(key), snapshots[key]


# =============================================================================
# Parsing and lookup
# =============================================================================

ModelT = TypeVar("ModelT", bound=WireModel)


def _parse(model: Type[ModelT], raw: Optional[list], object_type: str) -> list[ModelT]:
    objects = []
    for index, item in enumerate(raw or []):
        try:
            objects.append(model.model_validate(item))
        except ValidationError as e:
            name = item.get("name") if isinstance(item, dict) else None
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise MalformedInputError(
                f"Invalid {object_type} '{name or index}': {location}: {first['msg']}",
                {"object_type": object_type, "name": name, "index": index,
                 "error_count": e.error_count()},
            ) from e
    return objects


def parse_companies(raw: Optional[list]) -> list[Company]:
    """Validate a raw Companies collection."""
    return _parse(Company, raw, "Company")


def parse_interactions(raw: Optional[list]) -> list[Interaction]:
    """Validate a raw Interactions collection."""
    return _parse(Interaction, raw, "Interaction")


def parse_studies(raw: Optional[list]) -> list[Study]:
    """Validate a raw Studies collection."""
    return _parse(Study, raw, "Study")


def find_company(name: str, companies: list[Company], operation: Optional[str] = None) -> Company:
    """Find a company by name."""
    for company in companies:
        if company.name == name:
            return company
    raise NotFoundError("Company", name, operation)


def find_interaction(
    name: str, interactions: list[Interaction], operation: Optional[str] = None
) -> Interaction:
    """Find an interaction by name."""
    for interaction in interactions:
        if interaction.name == name:
            return interaction
    raise NotFoundError("Interaction", name, operation)


def find_study(name: str, studies: list[Study], operation: Optional[str] = None) -> Study:
    """Find a study by name."""
    for study in studies:
        if study.name == name:
            return study
    raise NotFoundError("Study", name, operation)


def linked_interactions(
    company: Company, interactions: list[Interaction], operation: Optional[str] = None
) -> list[Interaction]:
    """Resolve a company's linked interactions, in link order."""
    by_name = {interaction.name: interaction for interaction in interactions}
    resolved = []
    for name in company.linked_interactions:
        if name not in by_name:
            raise NotFoundError(
                "Interaction", name, operation or f"resolve interactions for {company.name}"
            )
        resolved.append(by_name[name])
    return resolved
