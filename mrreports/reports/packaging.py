"""
Produce standalone Word reports, either as a single .docx or as a ZIP
package holding the report and the interaction documents it references.
"""

import shutil
from pathlib import Path
from typing import Optional, Union

from ..display.docx_renderer import render_docx, save_docx
from ..storage.archive import create_zip_archive
from ..storage.s3_downloads import InteractionDownloader
from ..utils.config import ReportSettings
from ..utils.logger import get_logger
from ..validation.schemas import find_company, find_interaction, linked_interactions
from .pipeline import ReportInputs
from .standalone import PACKAGE_DOCUMENTS_DIR, CompanyStandalone, InteractionStandalone

logger = get_logger("mrreports.reports.packaging")

StandaloneReport = Union[CompanyStandalone, InteractionStandalone]


def base_name(name: str) -> str:
    """File and directory stem for a standalone report."""
    return name.replace(" ", "_")


def company_standalone(
    name: str, inputs: ReportInputs, settings: ReportSettings, package: bool = False
) -> CompanyStandalone:
    """Resolve a company and its interactions into a standalone report."""
    operation = "company report"
    company = find_company(name, inputs.companies, operation)
    return CompanyStandalone(
        company,
        linked_interactions(company, inputs.interactions, operation),
        inputs.companies,
        inputs.interactions,
        settings,
        package=package,
    )


def interaction_standalone(
    name: str, inputs: ReportInputs, settings: ReportSettings, package: bool = False
) -> InteractionStandalone:
    """Resolve an interaction and its first linked company into a standalone report."""
    operation = "interaction report"
    interaction = find_interaction(name, inputs.interactions, operation)
    company = None
    if interaction.linked_companies:
        company_name = next(iter(interaction.linked_companies))
        company = find_company(company_name, inputs.companies, operation)
    return InteractionStandalone(interaction, company, settings, package=package)


def render_standalone(report: StandaloneReport, path: Union[str, Path]) -> Path:
    """Render a standalone report to a .docx file."""
    document = render_docx(report.build(), report.properties())
    return save_docx(document, path)


def build_package(
    report: StandaloneReport,
    name: str,
    downloader: InteractionDownloader,
    work_dir: Union[str, Path],
    output_dir: Union[str, Path],
) -> Path:
    """
    Build <output_dir>/<name>.zip with the report and its interaction documents.

    The working directory is removed whether or not packaging succeeds.
    """
    stem = base_name(name)
    package_dir = Path(work_dir) / stem
    try:
        downloader.download(report.documents(), package_dir / PACKAGE_DOCUMENTS_DIR)
        render_standalone(report, package_dir / f"{stem}_report.docx")
        return create_zip_archive(package_dir, Path(output_dir) / f"{stem}.zip")
    finally:
        shutil.rmtree(package_dir, ignore_errors=True)
        logger.debug(f"Removed working directory {package_dir}")


def default_report_path(name: str, output_dir: Union[str, Path], output: Optional[str] = None) -> Path:
    """Explicit output path, or <output_dir>/<name>.docx."""
    if output:
        return Path(output)
    return Path(output_dir) / f"{base_name(name)}.docx"
