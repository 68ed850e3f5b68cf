"""
Reconcile generated reports against a report store.

Stale entity reports (markdown files whose entity no longer exists) are
deleted, then every generated report is created or updated. Writes run
concurrently and each carries the blob SHA last seen for its path, so a
concurrent change surfaces as a conflict instead of being overwritten.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ..core.base_types import VersionToken
from ..core.exceptions import MediumroastError, PartialBatchFailure, RemoteConflictError
from ..core.repository import RemoteFile, ReportFile, ReportStore
from ..utils.config import ReportSettings, SyncConfig
from ..utils.logger import get_logger, log_operation


@dataclass
class SyncResult:
    """Outcome of one reconciliation run."""
    deleted: list[str] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # path -> error
    conflicts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        """Raise PartialBatchFailure when any write or delete failed."""
        if self.failed:
            raise PartialBatchFailure(self)


class ReportSynchronizer:
    """
    Makes a store's report directories match the generated reports.

    Usage:
        synchronizer = ReportSynchronizer(store, settings.reports, settings.sync)
        result = synchronizer.reconcile(reports, expected_report_names(...))
        result.raise_for_failures()
    """

    def __init__(
        self,
        store: ReportStore,
        settings: ReportSettings,
        sync_config: Optional[SyncConfig] = None,
    ):
        self.store = store
        self.settings = settings
        self.sync_config = sync_config or SyncConfig()
        self.logger = get_logger(
            "mrreports.storage.sync",
            {"store": getattr(store, "location", type(store).__name__)},
        )

    def _is_entity_report(self, remote: RemoteFile) -> bool:
        # Directory READMEs and the JSON collections are never pruned
        return remote.name.endswith(".md") and remote.name != self.settings.index_name

    def prune(
        self, expected: Mapping[str, set[str]], result: SyncResult
    ) -> dict[str, VersionToken]:
        """
        Delete stale reports.

        Args:
            expected: Directory -> report file names implied by the entities.
            result: Collects deletions and failures.

        Returns:
            Path -> SHA of every remaining file seen in the listed directories.
        """
        known: dict[str, VersionToken] = {}
        for directory, names in expected.items():
            for remote in self.store.list_files(directory):
                if not self._is_entity_report(remote) or remote.name in names:
                    known[remote.path] = remote.sha
                    continue

                message = self.sync_config.delete_message.format(name=remote.name)
                try:
                    self.store.delete_file(remote.path, remote.sha, message)
                except RemoteConflictError as e:
                    result.conflicts.append(remote.path)
                    result.failed[remote.path] = str(e)
                except MediumroastError as e:
                    self.logger.error(f"Failed to delete {remote.path}: {e}")
                    result.failed[remote.path] = str(e)
                else:
                    self.logger.info(f"Deleted stale report {remote.path}")
                    result.deleted.append(remote.name)
        return known

    def _write(self, report: ReportFile, known: Mapping[str, VersionToken]) -> VersionToken:
        if report.path in known:
            sha = known[report.path]
        else:
            existing = self.store.get_file(report.path)
            sha = existing.sha if existing else None
        message = self.sync_config.update_message.format(name=report.name)
        return self.store.put_file(report.path, report.content, message, sha)

    def write_all(
        self,
        reports: Sequence[ReportFile],
        known: Mapping[str, VersionToken],
        result: SyncResult,
    ) -> None:
        """Create or update every report; one failure never stops the others."""
        written = set()
        with ThreadPoolExecutor(max_workers=self.sync_config.max_workers) as executor:
            futures = {executor.submit(self._write, report, known): report for report in reports}
            for future in as_completed(futures):
                report = futures[future]
                try:
                    future.result()
                except RemoteConflictError as e:
                    self.logger.warning(f"Conflict writing {report.path}: {e}")
                    result.conflicts.append(report.path)
                    result.failed[report.path] = str(e)
                except MediumroastError as e:
                    self.logger.error(f"Failed to write {report.path}: {e}")
                    result.failed[report.path] = str(e)
                else:
                    written.add(report.path)

        result.written.extend(report.path for report in reports if report.path in written)

    def reconcile(
        self, reports: Sequence[ReportFile], expected: Mapping[str, set[str]]
    ) -> SyncResult:
        """
        Delete stale reports and upsert the generated ones.

        Args:
            reports: Generated report files.
            expected: Directory -> report file names implied by the entities.

        Returns:
            SyncResult naming what was deleted, written and what failed.
        """
        start = time.monotonic()
        result = SyncResult()

        known = self.prune(expected, result)
        self.write_all(reports, known, result)

        log_operation(
            self.logger,
            "reconcile_reports",
            result.ok,
            duration_ms=round((time.monotonic() - start) * 1000, 1),
            deleted=len(result.deleted),
            written=len(result.written),
            failed=len(result.failed),
            conflicts=len(result.conflicts),
        )
        return result
