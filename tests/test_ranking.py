"""Tests for quartile ranking and competitor selection."""

import pytest

from mrreports.analytics.ranking import (
    classify,
    closest_competitors,
    quartiles,
    rank,
    rank_comparisons,
)
from mrreports.validation.schemas import ComparisonEntry, SimilarityEntry


class TestQuartiles:
    """Tests for the box-plot summary."""

    def test_linear_interpolation(self):
        q = quartiles([1, 2, 3, 4])
        assert q.minimum == 1
        assert q.lower == pytest.approx(1.75)
        assert q.median == pytest.approx(2.5)
        assert q.upper == pytest.approx(3.25)
        assert q.maximum == 4

    def test_single_value(self):
        q = quartiles([5.0])
        assert q.lower == q.median == q.upper == 5.0

    def test_empty(self):
        with pytest.raises(ValueError):
            quartiles([])

    def test_bounds_are_exclusive(self):
        q = quartiles([1, 2, 3, 4])
        assert classify(q.upper, q) == "Medium"
        assert classify(q.lower, q) == "Medium"


class TestRank:
    """Tests for rank()."""

    def test_ranks(self):
        ranked = rank({"a": 1, "b": 2, "c": 3, "d": 4})
        assert {name: r.rank for name, r in ranked.items()} == {
            "a": "Low", "b": "Medium", "c": "Medium", "d": "High",
        }

    def test_preserves_input_order(self):
        ranked = rank({"z": 3.0, "a": 1.0, "m": 2.0})
        assert list(ranked) == ["z", "a", "m"]

    def test_single_score_is_medium(self):
        assert rank({"only": 0.7})["only"].rank == "Medium"

    def test_equal_scores_are_medium(self):
        ranked = rank({"a": 2.0, "b": 2.0, "c": 2.0})
        assert {r.rank for r in ranked.values()} == {"Medium"}

    def test_empty(self):
        assert rank({}) == {}

    def test_topic_scores(self, companies):
        ranked = rank(companies[0].topics)
        assert ranked["cloud"].rank == "High"
        assert ranked["ai"].rank == "Medium"
        assert ranked["storage"].rank == "Medium"
        assert ranked["edge"].rank == "Low"


class TestComparisons:
    """Tests for rank_comparisons()."""

    def test_closest_and_labels(self, companies):
        ranking = rank_comparisons(companies[0].comparison)
        assert ranking.closest.name == "Beta Co"
        assert [(row.name, row.label, row.percent) for row in ranking.rows] == [
            ("Beta Co", "Closest", "82%"),
            ("Gamma LLC", "Furthest", "35%"),
        ]

    def test_first_maximum_wins(self):
        comparisons = {
            "x": ComparisonEntry(name="X", similarity=0.5),
            "y": ComparisonEntry(name="Y", similarity=0.5),
        }
        assert rank_comparisons(comparisons).closest.name == "X"

    def test_empty(self):
        ranking = rank_comparisons({})
        assert ranking.rows == []
        assert ranking.closest is None


class TestClosestCompetitors:
    """Tests for closest_competitors()."""

    def test_most_and_least_similar(self, companies):
        competitors = closest_competitors(companies[0].similarity)
        assert competitors.most_similar == "Beta Co"
        assert competitors.least_similar == "Gamma LLC"
        assert competitors.distances["Beta Co"] == pytest.approx((0.1 ** 2 + 0.8 ** 2) ** 0.5)

    def test_identical_company_has_zero_distance(self):
        similarity = {
            "Self": SimilarityEntry.model_validate({
                "most_similar": {"name": "a", "score": 1.0},
                "least_similar": {"name": "b", "score": 1.0},
            }),
        }
        competitors = closest_competitors(similarity)
        assert competitors.distances["Self"] == 0.0

    def test_empty(self):
        assert closest_competitors({}) is None
