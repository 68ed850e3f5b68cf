"""
Repository root README: object counts, report directories, workflow usage
and branches.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from ..display.blocks import Block, BulletList, Heading, HorizontalRule, Link, Paragraph, Table
from ..display.markdown import code, link
from ..utils.config import ReportSettings

RECENT_RUNS = 10


def _parse_github_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class WorkflowRun:
    """A finished GitHub Actions workflow run."""
    name: str
    run_name: Optional[str]
    path: str
    conclusion: Optional[str]
    created_at: datetime
    updated_at: datetime
    html_url: Optional[str]
    run_time_minutes: int


@dataclass
class WorkflowSummary:
    """Runs of the current month, most recent first, and their total minutes."""
    runs: list[WorkflowRun] = field(default_factory=list)
    run_time_minutes: int = 0


def summarize_workflow_runs(
    raw_runs: Sequence[dict], now: Optional[datetime] = None
) -> WorkflowSummary:
    """
    Summarize workflow runs for the current month.

    Each run is billed in whole minutes, rounded up, with a one minute
    minimum. Runs last updated in another month are skipped.
    """
    now = now or datetime.now(timezone.utc)
    summary = WorkflowSummary()

    for raw in raw_runs:
        created = _parse_github_time(raw["created_at"])
        updated = _parse_github_time(raw["updated_at"])
        if (updated.year, updated.month) != (now.year, now.month):
            continue

        minutes = max(1, math.ceil((updated - created).total_seconds() / 60))
        path = raw.get("path", "")
        summary.runs.append(WorkflowRun(
            name=path.replace(".github/workflows/", "").replace(".yml", ""),
            run_name=raw.get("name"),
            path=path,
            conclusion=raw.get("conclusion"),
            created_at=created,
            updated_at=updated,
            html_url=raw.get("html_url"),
            run_time_minutes=minutes,
        ))
        summary.run_time_minutes += minutes

    summary.runs.sort(key=lambda run: run.updated_at, reverse=True)
    return summary


@dataclass(frozen=True)
class BranchInfo:
    """A repository branch and its latest commit."""
    name: str
    commit: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "BranchInfo":
        commit = raw.get("commit") or {}
        details = commit.get("commit") or {}
        author = details.get("author") or {}
        return cls(
            name=raw["name"],
            commit=commit.get("sha"),
            author=author.get("name"),
            date=author.get("date"),
        )


class MainReport:
    """README.md at the repository root."""

    def __init__(
        self,
        counts: dict[str, int],
        workflows: WorkflowSummary,
        branches: Sequence[BranchInfo],
        settings: ReportSettings,
    ):
        self.counts = counts
        self.workflows = workflows
        self.branches = list(branches)
        self.settings = settings

    def introduction(self) -> list[Block]:
        companies = self.counts.get("companies", 0)
        interactions = self.counts.get("interactions", 0)
        studies = self.counts.get("studies", 0)
        return [
            Heading(1, self.settings.creator),
            Paragraph(
                f"This repository contains {code(companies)} companies, {code(interactions)} "
                f"interactions and {code(studies)} studies. The reports below are regenerated "
                "every time the repository's objects change."
            ),
            BulletList((
                link("Companies", f"./{self.settings.companies_dir}/{self.settings.index_name}"),
                link("Studies", f"./{self.settings.studies_dir}/{self.settings.index_name}"),
            )),
            HorizontalRule(),
        ]

    def workflow_section(self) -> list[Block]:
        rows = tuple(
            (
                Link(run.name, run.html_url) if run.html_url else run.name,
                run.run_name,
                run.conclusion,
                run.run_time_minutes,
                run.updated_at.strftime("%Y-%m-%d %H:%M"),
            )
            for run in self.workflows.runs[:RECENT_RUNS]
        )
        return [
            Heading(2, "Workflows"),
            Paragraph(
                f"Workflows have used {code(self.workflows.run_time_minutes)} minutes this month. "
                "The most recent runs are listed below."
            ),
            Table(
                header=("Workflow", "Run Name", "Conclusion", "Run Time (minutes)", "Updated"),
                rows=rows,
            ),
        ]

    def branch_section(self) -> list[Block]:
        rows = tuple(
            (branch.name, branch.commit, branch.author, branch.date)
            for branch in self.branches
        )
        return [
            Heading(2, "Branches"),
            Table(header=("Branch", "Last Commit", "Author", "Date"), rows=rows),
        ]

    def build(self) -> list[Block]:
        return [*self.introduction(), *self.workflow_section(), *self.branch_section()]
