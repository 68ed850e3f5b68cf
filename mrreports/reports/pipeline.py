"""
Markdown report pipeline: load the collections, assemble and render every
report, then reconcile them against a report store.
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.exceptions import MalformedInputError
from ..core.repository import ObjectSource, ReportFile, ReportStore
from ..display.markdown import render_markdown
from ..storage.sync import ReportSynchronizer, SyncResult
from ..utils.config import ReportSettings, SyncConfig
from ..utils.logger import get_logger, log_operation
from ..validation.schemas import (
    Company,
    Interaction,
    Study,
    parse_companies,
    parse_interactions,
    parse_studies,
)
from .common import report_filename
from .companies import CompaniesReport, CompanyReport
from .main import BranchInfo, MainReport, WorkflowSummary, summarize_workflow_runs
from .studies import StudiesReport
from .study import StudyReport

logger = get_logger("mrreports.reports.pipeline")

COMPANIES_PATH = "Companies/Companies.json"
INTERACTIONS_PATH = "Interactions/Interactions.json"
STUDIES_PATH = "Studies/Studies.json"


@dataclass
class ReportInputs:
    """Everything the markdown reports are built from, read once per run."""
    companies: list[Company] = field(default_factory=list)
    interactions: list[Interaction] = field(default_factory=list)
    studies: list[Study] = field(default_factory=list)
    branches: list[BranchInfo] = field(default_factory=list)
    workflows: WorkflowSummary = field(default_factory=WorkflowSummary)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "companies": len(self.companies),
            "interactions": len(self.interactions),
            "studies": len(self.studies),
        }


def load_inputs(source: ObjectSource, activity=None) -> ReportInputs:
    """
    Read and validate the three collections.

    Args:
        source: Where the JSON collections live.
        activity: Optional GitHubStore for branches and workflow runs.
    """
    inputs = ReportInputs(
        companies=parse_companies(source.read_objects(COMPANIES_PATH)),
        interactions=parse_interactions(source.read_objects(INTERACTIONS_PATH)),
        studies=parse_studies(source.read_objects(STUDIES_PATH)),
    )
    if activity is not None:
        inputs.branches = [
            BranchInfo.from_api(activity.get_branch(branch["name"]))
            for branch in activity.list_branches()
        ]
        inputs.workflows = summarize_workflow_runs(activity.list_workflow_runs())

    logger.info(
        f"Loaded {len(inputs.companies)} companies, {len(inputs.interactions)} interactions, "
        f"{len(inputs.studies)} studies"
    )
    return inputs


def _check_unique_paths(names: Sequence[str], object_type: str) -> None:
    seen: dict[str, str] = {}
    for name in names:
        filename = report_filename(name)
        if filename in seen:
            raise MalformedInputError(
                f"{object_type} '{name}' and '{seen[filename]}' both map to {filename}",
                {"object_type": object_type},
            )
        seen[filename] = name


def expected_report_names(
    companies: Sequence[Company], studies: Sequence[Study], settings: ReportSettings
) -> dict[str, set[str]]:
    """Report file names implied by the current entities, per directory."""
    return {
        settings.companies_dir: {report_filename(company.name) for company in companies},
        settings.studies_dir: {report_filename(study.name) for study in studies},
    }


def build_markdown_reports(inputs: ReportInputs, settings: ReportSettings) -> list[ReportFile]:
    """
    Assemble and render every markdown report.

    Returns an empty list when there are no companies: a repository without
    companies has nothing to report on.
    """
    if not inputs.companies:
        logger.warning("No companies in the repository, no reports generated")
        return []

    _check_unique_paths([c.name for c in inputs.companies], "Company")
    _check_unique_paths([s.name for s in inputs.studies], "Study")

    def index(directory: str) -> str:
        return f"{directory}/{settings.index_name}"

    reports = [
        ReportFile(
            name="Companies",
            path=index(settings.companies_dir),
            content=render_markdown(CompaniesReport(inputs.companies, settings).build()),
        ),
        ReportFile(
            name="Main",
            path=settings.index_name,
            content=render_markdown(
                MainReport(inputs.counts, inputs.workflows, inputs.branches, settings).build()
            ),
        ),
        ReportFile(
            name="Studies",
            path=index(settings.studies_dir),
            content=render_markdown(StudiesReport(inputs.studies, settings).build()),
        ),
    ]
    for company in inputs.companies:
        blocks = CompanyReport(company, inputs.companies, inputs.interactions, settings).build()
        reports.append(ReportFile(
            name=company.name,
            path=f"{settings.companies_dir}/{report_filename(company.name)}",
            content=render_markdown(blocks),
        ))
    for study in inputs.studies:
        reports.append(ReportFile(
            name=study.name,
            path=f"{settings.studies_dir}/{report_filename(study.name)}",
            content=render_markdown(StudyReport(study, settings).build()),
        ))

    logger.info(f"Built {len(reports)} markdown reports")
    return reports


def publish_reports(
    inputs: ReportInputs,
    store: ReportStore,
    settings: ReportSettings,
    sync_config: Optional[SyncConfig] = None,
) -> Optional[SyncResult]:
    """
    Build the markdown reports and reconcile them against a store.

    Returns:
        SyncResult, or None when there was nothing to publish.
    """
    start = time.monotonic()
    reports = build_markdown_reports(inputs, settings)
    if not reports:
        return None

    expected = expected_report_names(inputs.companies, inputs.studies, settings)
    result = ReportSynchronizer(store, settings, sync_config).reconcile(reports, expected)
    log_operation(
        logger,
        "publish_reports",
        result.ok,
        duration_ms=round((time.monotonic() - start) * 1000, 1),
        reports=len(reports),
    )
    return result
