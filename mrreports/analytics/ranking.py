"""
Box-plot quartile ranking for topic and similarity scores.

Scores above the upper quartile rank High, scores below the lower quartile
rank Low and everything in between ranks Medium. Quartiles use linear
interpolation between the sorted values (pandas' default), so the same
input always yields the same ranks.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..core.base_types import Rank
from ..validation.schemas import ComparisonEntry, SimilarityEntry

# Display labels used by the comparison tables
COMPARISON_LABELS: dict[str, str] = {
    "High": "Closest",
    "Medium": "Nearby",
    "Low": "Furthest",
}


@dataclass(frozen=True)
class Quartiles:
    """Box-plot five number summary."""
    minimum: float
    lower: float
    median: float
    upper: float
    maximum: float


@dataclass(frozen=True)
class RankedScore:
    """A score and its quartile rank."""
    score: float
    rank: Rank


def quartiles(values: Iterable[float]) -> Quartiles:
    """
    Compute the box-plot five number summary.

    Args:
        values: Numeric values (at least one).

    Returns:
        Quartiles; with a single value every quartile equals that value.

    Raises:
        ValueError: If values is empty.
    """
    series = pd.Series(list(values), dtype="float64")
    if series.empty:
        raise ValueError("quartiles() requires at least one value")

    q = series.quantile([0.25, 0.5, 0.75], interpolation="linear")
    return Quartiles(
        minimum=float(series.min()),
        lower=float(q.loc[0.25]),
        median=float(q.loc[0.5]),
        upper=float(q.loc[0.75]),
        maximum=float(series.max()),
    )


def classify(score: float, bounds: Quartiles) -> Rank:
    """Rank one score against precomputed quartiles."""
    if score > bounds.upper:
        return "High"
    if score < bounds.lower:
        return "Low"
    return "Medium"


def rank(scores: Mapping[str, float]) -> dict[str, RankedScore]:
    """
    Rank named scores into High/Medium/Low buckets.

    Args:
        scores: Mapping of name to numeric score.

    Returns:
        Mapping of name to RankedScore, in input order. Empty input
        returns an empty mapping.
    """
    if not scores:
        return {}

    bounds = quartiles(scores.values())
    return {
        name: RankedScore(score=score, rank=classify(score, bounds))
        for name, score in scores.items()
    }


# =============================================================================
# Company comparisons
# =============================================================================

@dataclass(frozen=True)
class ComparisonRow:
    """One compared company with its rank."""
    company_id: str
    name: str
    role: Optional[str]
    similarity: float
    rank: Rank

    @property
    def label(self) -> str:
        """Closest/Nearby/Furthest label for display."""
        return COMPARISON_LABELS[self.rank]

    @property
    def percent(self) -> str:
        """Similarity as a whole percentage."""
        return f"{round(self.similarity * 100)}%"


@dataclass
class ComparisonRanking:
    """Ranked comparisons and the closest company."""
    rows: list[ComparisonRow] = field(default_factory=list)
    closest: Optional[ComparisonRow] = None


def rank_comparisons(comparisons: Mapping[str, ComparisonEntry]) -> ComparisonRanking:
    """
    Rank the companies a company was compared to.

    Ranks the raw similarity values of the input and picks the company with
    the highest similarity (first seen wins ties) as the closest.
    """
    if not comparisons:
        return ComparisonRanking()

    ranked = rank({company_id: entry.similarity for company_id, entry in comparisons.items()})
    rows = [
        ComparisonRow(
            company_id=company_id,
            name=entry.name,
            role=entry.role,
            similarity=entry.similarity,
            rank=ranked[company_id].rank,
        )
        for company_id, entry in comparisons.items()
    ]
    closest = max(rows, key=lambda row: row.similarity)
    return ComparisonRanking(rows=rows, closest=closest)


@dataclass(frozen=True)
class Competitors:
    """Most and least similar companies by interaction similarity."""
    most_similar: str
    least_similar: str
    distances: dict[str, float]


def closest_competitors(similarity: Mapping[str, SimilarityEntry]) -> Optional[Competitors]:
    """
    Find the most and least similar companies.

    Each company is placed at (most_similar.score, least_similar.score);
    comparing a company to itself gives (1, 1), so the smallest Euclidean
    distance to (1, 1) is the most similar company and the largest distance
    the least similar.

    Returns:
        Competitors, or None when there is nothing to compare.
    """
    if not similarity:
        return None

    distances = {
        name: math.hypot(entry.most_similar.score - 1, entry.least_similar.score - 1)
        for name, entry in similarity.items()
    }
    return Competitors(
        most_similar=min(distances, key=distances.get),
        least_similar=max(distances, key=distances.get),
        distances=distances,
    )
