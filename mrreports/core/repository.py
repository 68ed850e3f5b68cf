"""
Storage protocols (interfaces) for report persistence.

These protocols define the contract that concrete stores must follow.
The synchronizer depends on the protocol, so GitHub and the local
filesystem are interchangeable.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from .base_types import ReportContent, VersionToken


@dataclass(frozen=True)
class ReportFile:
    """A rendered document ready for persistence."""
    name: str
    path: str
    content: ReportContent


@dataclass(frozen=True)
class RemoteFile:
    """A file that already exists in a store."""
    name: str
    path: str
    sha: VersionToken
    size: int = 0


@runtime_checkable
class ReportStore(Protocol):
    """Store that holds generated report files."""

    def list_files(self, directory: str) -> list[RemoteFile]:
        """List the files directly inside a directory."""
        ...

    def get_file(self, path: str) -> Optional[RemoteFile]:
        """Get file metadata, or None when the file does not exist."""
        ...

    def put_file(
        self,
        path: str,
        content: ReportContent,
        message: str,
        sha: Optional[VersionToken] = None,
    ) -> VersionToken:
        """Create (sha=None) or update (sha=current version) a file."""
        ...

    def delete_file(self, path: str, sha: VersionToken, message: str) -> None:
        """Delete a file at a known version."""
        ...


@runtime_checkable
class ObjectSource(Protocol):
    """Source of the raw JSON object collections."""

    def read_objects(self, path: str) -> list[dict]:
        """Read a JSON collection, returning [] when absent or empty."""
        ...
