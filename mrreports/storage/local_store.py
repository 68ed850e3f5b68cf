"""
Report store on the local filesystem.

Mirrors the GitHub contents API semantics: every file is versioned by its
git blob SHA and writes are conditional on the SHA the caller last saw.
"""

import hashlib
import json
from pathlib import Path
from typing import Optional, Union

from ..core.base_types import ReportContent, VersionToken
from ..core.exceptions import MalformedInputError, RemoteConflictError, RemoteError
from ..core.repository import RemoteFile
from ..utils.logger import get_logger

logger = get_logger("mrreports.storage.local")


def git_blob_sha(data: bytes) -> str:
    """SHA1 of a git blob object, as GitHub reports it."""
    header = f"blob {len(data)}\0".encode("ascii")
    return hashlib.sha1(header + data).hexdigest()


class LocalDirectoryStore:
    """Report store and object source rooted at a directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.location = str(self.root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local store initialized: {self.root}")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents and target != self.root.resolve():
            raise RemoteError(f"Path escapes the store root: {path}", {"root": str(self.root)})
        return target

    def _remote_file(self, target: Path) -> RemoteFile:
        data = target.read_bytes()
        return RemoteFile(
            name=target.name,
            path=target.relative_to(self.root.resolve()).as_posix(),
            sha=git_blob_sha(data),
            size=len(data),
        )

    def read_objects(self, path: str) -> list[dict]:
        """Read a JSON collection; [] when missing or empty."""
        target = self._resolve(path)
        if not target.is_file() or target.stat().st_size == 0:
            return []
        try:
            objects = json.loads(target.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"{path} is not valid JSON: {e}", {"path": path}) from e
        if not isinstance(objects, list):
            raise MalformedInputError(f"{path} must hold a JSON list", {"path": path})
        return objects

    def list_files(self, directory: str) -> list[RemoteFile]:
        target = self._resolve(directory)
        if not target.is_dir():
            return []
        return [self._remote_file(p) for p in sorted(target.iterdir()) if p.is_file()]

    def get_file(self, path: str) -> Optional[RemoteFile]:
        target = self._resolve(path)
        if not target.is_file():
            return None
        return self._remote_file(target)

    def put_file(
        self,
        path: str,
        content: ReportContent,
        message: str,
        sha: Optional[VersionToken] = None,
    ) -> VersionToken:
        current = self.get_file(path)
        if (current.sha if current else None) != sha:
            raise RemoteConflictError(path, sha)

        data = content.encode("utf-8") if isinstance(content, str) else content
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise RemoteError(f"Failed to write {path}: {e}", {"root": str(self.root)}) from e
        logger.debug(f"{message}: {path}")
        return git_blob_sha(data)

    def delete_file(self, path: str, sha: VersionToken, message: str) -> None:
        current = self.get_file(path)
        if current is None or current.sha != sha:
            raise RemoteConflictError(path, sha)
        try:
            self._resolve(path).unlink()
        except OSError as e:
            raise RemoteError(f"Failed to delete {path}: {e}", {"root": str(self.root)}) from e
        logger.debug(f"{message}: {path}")
