"""Pytest configuration and fixtures."""

import json
import os
import re
import sys
from pathlib import Path

import pytest

# Make the CLI module importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up environment for testing
os.environ["MR_ENV"] = "test"

from mrreports.utils.config import ReportSettings, reset_config  # noqa: E402
from mrreports.validation.schemas import (  # noqa: E402
    parse_companies,
    parse_interactions,
    parse_studies,
)


@pytest.fixture(scope="session", autouse=True)
def setup_logging():
    """Set up logging for tests."""
    from mrreports.utils.logger import setup_logging
    setup_logging(log_level="WARNING")


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test starts from freshly loaded configuration."""
    # Set when the suite itself runs inside GitHub Actions
    for name in ("GITHUB_REPOSITORY", "MR_GITHUB_BRANCH", "MR_LOG_LEVEL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="session")
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def report_settings():
    return ReportSettings()


@pytest.fixture
def raw_companies():
    """Sample Companies.json content."""
    return [
        {
            "name": "Acme Inc.",
            "description": "Acme makes things",
            "company_type": "Public",
            "role": "Owner",
            "region": "AMER",
            "url": "https://acme.example.com",
            "industry": "Manufacturing",
            "industry_code": "3571",
            "street_address": "1 Main St",
            "city": "Springfield",
            "country": "USA",
            "latitude": 37.0,
            "longitude": -122.0,
            "stock_symbol": "ACME",
            "cik": "0000001",
            "wikipedia_url": "https://en.wikipedia.org/wiki/Acme",
            "linked_interactions": {"Acme Q1 Call": "hash1", "Acme Roadmap": "hash2"},
            "topics": {"cloud": 0.9, "ai": 0.5, "edge": 0.1, "storage": 0.3},
            "similarity": {
                "Beta Co": {
                    "most_similar": {"name": "Beta Launch", "score": 0.9},
                    "least_similar": {"name": "Beta Memo", "score": 0.2},
                },
                "Gamma LLC": {
                    "most_similar": {"name": "Beta Memo", "score": 0.4},
                    "least_similar": {"name": "Beta Launch", "score": 0.1},
                },
            },
            "comparison": {
                "b1": {"name": "Beta Co", "similarity": 0.82, "role": "Competitor"},
                "g1": {"name": "Gamma LLC", "similarity": 0.35, "role": "Partner"},
            },
            "creator_name": "admin",
            "creation_date": "2024-01-01",
            "modification_date": "2024-02-01",
        },
        {
            "name": "Beta Co",
            "description": "Beta description",
            "company_type": "Private",
            "role": "Competitor",
            "region": "EMEA",
            "industry": "Software",
            "linked_interactions": {"Beta Launch": "hash3", "Beta Memo": "hash4"},
        },
        {
            "name": "Gamma LLC",
            "role": "Partner",
            "region": "Unknown",
            "linked_interactions": {},
        },
    ]


@pytest.fixture
def raw_interactions():
    """Sample Interactions.json content."""
    return [
        {
            "name": "Acme Q1 Call",
            "interaction_type": "Call",
            "date": "20240115",
            "time": "0930",
            "abstract": "Quarterly call abstract",
            "description": "Acme Q1 description",
            "url": "s3://acme/AcmeQ1Call.pdf",
            "reading_time": 5,
            "page_count": 3,
            "content_type": "application/pdf",
            "topics": {"revenue": 2.0, "margin": 1.0},
            "linked_companies": {"Acme Inc.": "x"},
            "creation_date": "2024-01-16",
        },
        {
            "name": "Acme Roadmap",
            "interaction_type": "Document",
            "abstract": "Roadmap abstract",
            "description": "Roadmap description",
            "url": "s3://acme/AcmeRoadmap.pdf",
            "reading_time": 7,
            "linked_companies": {"Acme Inc.": "x"},
        },
        {
            "name": "Beta Launch",
            "interaction_type": "Press Release",
            "abstract": "Launch abstract",
            "description": "Launch description",
            "url": "https://example.com/beta-launch.pdf",
            "reading_time": 4,
            "linked_companies": {"Beta Co": "x"},
        },
        {
            "name": "Beta Memo",
            "interaction_type": "Memo",
            "abstract": "Memo abstract",
            "description": "Memo description",
            "url": "s3://beta/BetaMemo.pdf",
            "reading_time": 2,
            "linked_companies": {"Beta Co": "x"},
        },
    ]


@pytest.fixture
def raw_studies():
    """Sample Studies.json content: one caffeinated study and one not yet analyzed."""
    return [
        {
            "name": "Competitive Landscape",
            "description": "Who competes with Acme",
            "project": "Landscape",
            "status": 1,
            "companies": {
                "1700000000": {"included_companies": ["Acme Inc."]},
                "1706153906": {"included_companies": ["Acme Inc.", "Beta Co"]},
            },
            "sourceTopics": {
                "1706153906": {
                    "Acme Inc.": [
                        {
                            "source_interaction": "Acme Q1 Call",
                            "insight": "Pricing pressure",
                            "type": "Risk",
                            "count": 3,
                            "excerpts": "prices are falling",
                            "targets": {"Beta Co": 0.8, "Gamma LLC": 0.6},
                        },
                        {
                            "source_interaction": "Acme Roadmap",
                            "insight": "New product line",
                            "type": "Opportunity",
                            "count": 5,
                            "targets": {"Beta Co": 0.5},
                        },
                        {
                            "source_interaction": "Acme Q1 Call",
                            "insight": "Margin squeeze",
                            "type": "Risk",
                            "count": 7,
                            "targets": {},
                        },
                    ],
                    "Beta Co": [],
                }
            },
            "creator_name": "admin",
            "creation_date": "2024-01-20",
            "modification_date": "2024-01-25",
        },
        {
            "name": "Unbrewed",
            "description": "Not analyzed yet",
            "status": 0,
        },
    ]


@pytest.fixture
def companies(raw_companies):
    return parse_companies(raw_companies)


@pytest.fixture
def interactions(raw_interactions):
    return parse_interactions(raw_interactions)


@pytest.fixture
def studies(raw_studies):
    return parse_studies(raw_studies)


@pytest.fixture
def repo_dir(tmp_path, raw_companies, raw_interactions, raw_studies):
    """A local repository checkout holding the three JSON collections."""
    root = tmp_path / "repo"
    for directory, objects in (
        ("Companies", raw_companies),
        ("Interactions", raw_interactions),
        ("Studies", raw_studies),
    ):
        (root / directory).mkdir(parents=True)
        (root / directory / f"{directory}.json").write_text(json.dumps(objects), encoding="utf-8")
    return root


def _table_rows(text):
    """Cells of every markdown table row in text, header rows included."""
    rows = []
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("|") or not line.strip("|-: "):
            continue
        cells = re.split(r"(?<!\\)\|", line[1:-1])
        rows.append([cell.strip() for cell in cells])
    return rows


@pytest.fixture
def table_rows():
    """Parse markdown table rows, ignoring column padding."""
    return _table_rows
