"""Tests for top-insight aggregation."""

import pytest

from mrreports.analytics.insights import average_similarity, study_top_insights, top_insights
from mrreports.validation.schemas import InsightRecord, parse_studies


def _record(interaction, count=1, targets=None, insight=None):
    return InsightRecord(
        source_interaction=interaction,
        count=count,
        insight=insight,
        targets=targets or {},
    )


def test_average_similarity():
    assert average_similarity({"a": 0.8, "b": 0.6}) == pytest.approx(0.7)
    assert average_similarity({}) == 0.0


def test_groups_sorted_by_count(studies):
    _, per_company = studies[0].latest_source_topics()
    result = top_insights(per_company, top_count=5)

    acme = result["Acme Inc."]
    assert list(acme) == ["Acme Q1 Call", "Acme Roadmap"]
    assert [s.insight for s in acme["Acme Q1 Call"]] == ["Margin squeeze", "Pricing pressure"]
    assert acme["Acme Q1 Call"][1].avg_similarity_score == pytest.approx(0.7)
    assert result["Beta Co"] == {}


def test_top_count_limits_interactions(studies):
    _, per_company = studies[0].latest_source_topics()
    result = top_insights(per_company, top_count=1)
    assert list(result["Acme Inc."]) == ["Acme Q1 Call"]


def test_ties_go_to_first_seen():
    records = [_record("B"), _record("A"), _record("C")]
    result = top_insights({"Co": records}, top_count=2)
    assert list(result["Co"]) == ["B", "A"]


def test_frequency_counts_records():
    records = [_record("A", targets={"x": 1, "y": 1, "z": 1}), _record("B"), _record("B")]
    result = top_insights({"Co": records}, top_count=1)
    assert list(result["Co"]) == ["B"]


def test_study_top_insights(studies):
    insights = study_top_insights(studies[0], top_count=5)
    assert insights.total_companies == 2
    assert insights.taken_at.year == 2024
    assert set(insights.insights) == {"Acme Inc.", "Beta Co"}


def test_study_without_snapshots():
    study = parse_studies([{"name": "Empty", "status": 1}])[0]
    assert study_top_insights(study) is None
