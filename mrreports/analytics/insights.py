"""
Top-insight aggregation for caffeinated studies.

For every company in a study snapshot, selects the source interactions that
produced the most insight records and summarizes the insights of those
interactions with their average similarity to the target companies.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..utils.logger import get_logger
from ..validation.schemas import InsightRecord, Study

logger = get_logger("mrreports.analytics.insights")


@dataclass(frozen=True)
class InsightSummary:
    """One insight with its average similarity score."""
    insight: Optional[str]
    type: Optional[str]
    count: int
    avg_similarity_score: float
    excerpts: Optional[str]


# company -> interaction -> summaries
TopInsights = dict[str, dict[str, list[InsightSummary]]]


def average_similarity(targets: Mapping[str, float]) -> float:
    """Mean of the target scores, 0.0 when there are no targets."""
    if not targets:
        return 0.0
    return sum(targets.values()) / len(targets)


def _summarize(record: InsightRecord) -> InsightSummary:
    return InsightSummary(
        insight=record.insight,
        type=record.type,
        count=record.count,
        avg_similarity_score=average_similarity(record.targets),
        excerpts=record.excerpts,
    )


def top_insights(
    per_company_insights: Mapping[str, Sequence[InsightRecord]],
    top_count: int = 5,
) -> TopInsights:
    """
    Select and summarize the top insights per company.

    Frequency is the number of records that reference a source interaction.
    The top_count most frequent interactions are selected, ties going to the
    interaction seen first. Summaries are grouped by interaction (in selection
    order) and each group is sorted by count, highest first.

    Args:
        per_company_insights: Mapping of company to its insight records.
        top_count: Maximum number of interactions kept per company.

    Returns:
        Mapping of company to {interaction: [InsightSummary, ...]}.
    """
    results: TopInsights = {}

    for company, records in per_company_insights.items():
        frequency = Counter(record.source_interaction for record in records)
        selected = [name for name, _ in frequency.most_common(top_count)]

        groups: dict[str, list[InsightSummary]] = {name: [] for name in selected}
        for record in records:
            if record.source_interaction in groups:
                groups[record.source_interaction].append(_summarize(record))

        for summaries in groups.values():
            summaries.sort(key=lambda summary: summary.count, reverse=True)

        results[company] = groups

    return results


@dataclass(frozen=True)
class StudyInsights:
    """Top insights of the most recent study snapshot."""
    taken_at: datetime
    total_companies: int
    insights: TopInsights


def study_top_insights(study: Study, top_count: int = 5) -> Optional[StudyInsights]:
    """
    Compute the top insights of a study's most recent snapshot.

    Returns:
        StudyInsights, or None when the study has no source topics or no
        company snapshots.
    """
    latest_topics = study.latest_source_topics()
    latest_companies = study.latest_companies()
    if latest_topics is None or latest_companies is None:
        logger.info(f"No insights available for study '{study.name}'")
        return None

    taken_at, per_company = latest_topics
    _, companies = latest_companies
    return StudyInsights(
        taken_at=taken_at,
        total_companies=len(companies.included_companies),
        insights=top_insights(per_company, top_count),
    )
