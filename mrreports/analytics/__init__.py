"""Score ranking and insight aggregation."""

from .insights import InsightSummary, StudyInsights, study_top_insights, top_insights
from .ranking import (
    ComparisonRanking,
    ComparisonRow,
    Competitors,
    Quartiles,
    RankedScore,
    closest_competitors,
    quartiles,
    rank,
    rank_comparisons,
)

__all__ = [
    "ComparisonRanking",
    "ComparisonRow",
    "Competitors",
    "InsightSummary",
    "Quartiles",
    "RankedScore",
    "StudyInsights",
    "closest_competitors",
    "quartiles",
    "rank",
    "rank_comparisons",
    "study_top_insights",
    "top_insights",
]
