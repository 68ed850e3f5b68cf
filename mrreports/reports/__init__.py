"""Report assemblers and the markdown/standalone report pipelines."""

from .common import relative_link, report_filename, sanitize_name
from .companies import CompaniesReport, CompanyReport
from .main import MainReport, summarize_workflow_runs
from .pipeline import (
    ReportInputs,
    build_markdown_reports,
    expected_report_names,
    load_inputs,
    publish_reports,
)
from .standalone import CompanyStandalone, InteractionStandalone
from .studies import StudiesReport
from .study import StudyReport

__all__ = [
    "CompaniesReport",
    "CompanyReport",
    "CompanyStandalone",
    "InteractionStandalone",
    "MainReport",
    "ReportInputs",
    "StudiesReport",
    "StudyReport",
    "build_markdown_reports",
    "expected_report_names",
    "load_inputs",
    "publish_reports",
    "relative_link",
    "report_filename",
    "sanitize_name",
    "summarize_workflow_runs",
]
