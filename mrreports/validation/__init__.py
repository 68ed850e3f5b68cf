"""Schemas for the Mediumroast company, interaction and study collections."""

from .schemas import (
    UNKNOWN,
    Company,
    ComparisonEntry,
    InsightRecord,
    Interaction,
    SimilarityEntry,
    Study,
    StudyCompanies,
    find_company,
    find_interaction,
    find_study,
    linked_interactions,
    parse_companies,
    parse_interactions,
    parse_studies,
    parse_snapshot_time,
)

__all__ = [
    "UNKNOWN",
    "Company",
    "ComparisonEntry",
    "InsightRecord",
    "Interaction",
    "SimilarityEntry",
    "Study",
    "StudyCompanies",
    "find_company",
    "find_interaction",
    "find_study",
    "linked_interactions",
    "parse_companies",
    "parse_interactions",
    "parse_studies",
    "parse_snapshot_time",
]
