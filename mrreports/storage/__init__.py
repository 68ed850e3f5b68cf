"""Report stores, reconciliation, document downloads and packaging."""

from .archive import create_zip_archive, extract_zip_archive
from .github_store import GitHubStore
from .local_store import LocalDirectoryStore, git_blob_sha
from .s3_downloads import InteractionDownloader, bucket_name
from .sync import ReportSynchronizer, SyncResult

__all__ = [
    "GitHubStore",
    "InteractionDownloader",
    "LocalDirectoryStore",
    "ReportSynchronizer",
    "SyncResult",
    "bucket_name",
    "create_zip_archive",
    "extract_zip_archive",
    "git_blob_sha",
]
