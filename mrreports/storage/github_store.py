"""
GitHub repository access through the REST API.

Reads the Mediumroast JSON collections, lists/writes/deletes report files
with blob SHAs as version tokens, and lists branches and workflow runs.
Reads retry transient failures through urllib3; writes never retry because
a repeated conditional write is a new conflict, not a transient error.
"""

import base64
import json
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.base_types import ReportContent, VersionToken
from ..core.exceptions import (
    MalformedInputError,
    MissingConfigError,
    RemoteConflictError,
    RemoteError,
)
from ..core.repository import RemoteFile
from ..utils.config import GitHubConfig
from ..utils.logger import get_logger

logger = get_logger("mrreports.storage.github")

API_VERSION = "2022-11-28"
PAGE_SIZE = 100


class GitHubStore:
    """
    Report store and object source backed by a GitHub repository.

    Usage:
        with GitHubStore(config.settings.github, config.github_token) as store:
            companies = store.read_objects("Companies/Companies.json")
    """

    def __init__(
        self,
        config: GitHubConfig,
        token: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the GitHub store.

        Args:
            config: Repository coordinates and HTTP settings.
            token: GitHub token with contents (and actions) access.
            session: Optional preconfigured session.
        """
        if not config.owner or not config.repo:
            raise MissingConfigError(
                "GitHub owner/repo not configured",
                {"operation": "open GitHub repository"},
            )

        self.config = config
        self.base_url = f"{config.api_url.rstrip('/')}/repos/{config.owner}/{config.repo}"
        self.location = f"{config.owner}/{config.repo}@{config.branch}"

        self.session = session or requests.Session()
        retry_strategy = Retry(
            total=config.max_retries,
            backoff_factor=config.retry_backoff,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        })

        logger.info(f"GitHub store initialized: {self.location}")

    # -------------------------------------------------------------------------
    # HTTP plumbing
    # -------------------------------------------------------------------------

    def _request(self, method: str, path: str, operation: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"GitHub request failed: {method} {url} - {e}")
            raise RemoteError(
                f"GitHub request failed during {operation}: {e}",
                {"url": url},
            ) from e

    @staticmethod
    def _message(response: requests.Response) -> str:
        try:
            return response.json().get("message", "")
        except ValueError:
            return response.text

    def _check(self, response: requests.Response, operation: str) -> requests.Response:
        if not response.ok:
            message = self._message(response)
            logger.error(f"GitHub {operation} failed: {response.status_code} {message}")
            raise RemoteError(
                f"GitHub {operation} failed: {response.status_code} {message}",
                {"status": response.status_code},
            )
        return response

    def _is_conflict(self, response: requests.Response) -> bool:
        if response.status_code == 409:
            return True
        return response.status_code == 422 and "sha" in self._message(response).lower()

    # -------------------------------------------------------------------------
    # Object source
    # -------------------------------------------------------------------------

    def read_objects(self, path: str) -> list[dict]:
        """
        Read a JSON collection such as Companies/Companies.json.

        Returns:
            The decoded list; [] when the file is missing or empty.
        """
        operation = f"read {path}"
        response = self._request(
            "GET", f"contents/{path}", operation, params={"ref": self.config.branch}
        )
        if response.status_code == 404:
            logger.warning(f"{path} not found, treating as empty")
            return []
        data = self._check(response, operation).json()

        if data.get("size", 0) == 0:
            return []

        if data.get("encoding") == "base64":
            raw = base64.b64decode(data["content"])
        else:
            # Files over 1MB come without inline content
            raw = self._check(
                self.session.get(data["download_url"], timeout=self.config.timeout), operation
            ).content

        try:
            objects = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedInputError(
                f"{path} is not valid JSON: {e}", {"operation": operation}
            ) from e

        if not isinstance(objects, list):
            raise MalformedInputError(
                f"{path} must hold a JSON list", {"operation": operation}
            )
        logger.debug(f"Read {len(objects)} objects from {path}")
        return objects

    # -------------------------------------------------------------------------
    # Report store
    # -------------------------------------------------------------------------

    def list_files(self, directory: str) -> list[RemoteFile]:
        """List the files directly inside a directory ([] when it does not exist)."""
        operation = f"list {directory}"
        response = self._request(
            "GET", f"contents/{directory}", operation, params={"ref": self.config.branch}
        )
        if response.status_code == 404:
            return []
        entries = self._check(response, operation).json()
        return [
            RemoteFile(name=e["name"], path=e["path"], sha=e["sha"], size=e.get("size", 0))
            for e in entries
            if e.get("type") == "file"
        ]

    def get_file(self, path: str) -> Optional[RemoteFile]:
        operation = f"get {path}"
        response = self._request(
            "GET", f"contents/{path}", operation, params={"ref": self.config.branch}
        )
        if response.status_code == 404:
            return None
        data = self._check(response, operation).json()
        if isinstance(data, list):
            raise RemoteError(f"{path} is a directory", {"operation": operation})
        return RemoteFile(name=data["name"], path=data["path"], sha=data["sha"], size=data.get("size", 0))

    def put_file(
        self,
        path: str,
        content: ReportContent,
        message: str,
        sha: Optional[VersionToken] = None,
    ) -> VersionToken:
        """
        Create (sha=None) or update a file.

        Raises:
            RemoteConflictError: The file changed since sha was read, or
                exists although sha is None.
        """
        payload = content.encode("utf-8") if isinstance(content, str) else content
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(payload).decode("ascii"),
            "branch": self.config.branch,
            "committer": {
                "name": self.config.committer_name,
                "email": self.config.committer_email,
            },
        }
        if sha:
            body["sha"] = sha

        operation = f"write {path}"
        response = self._request("PUT", f"contents/{path}", operation, json=body)
        if self._is_conflict(response):
            raise RemoteConflictError(path, sha)
        data = self._check(response, operation).json()
        logger.debug(f"Wrote {path} ({'update' if sha else 'create'})")
        return data["content"]["sha"]

    def delete_file(self, path: str, sha: VersionToken, message: str) -> None:
        operation = f"delete {path}"
        response = self._request(
            "DELETE",
            f"contents/{path}",
            operation,
            json={"message": message, "sha": sha, "branch": self.config.branch},
        )
        if self._is_conflict(response):
            raise RemoteConflictError(path, sha)
        self._check(response, operation)
        logger.debug(f"Deleted {path}")

    # -------------------------------------------------------------------------
    # Branches and workflows
    # -------------------------------------------------------------------------

    def list_branches(self) -> list[dict]:
        operation = "list branches"
        response = self._request("GET", "branches", operation, params={"per_page": PAGE_SIZE})
        return self._check(response, operation).json()

    def get_branch(self, name: str) -> dict:
        operation = f"get branch {name}"
        response = self._request("GET", f"branches/{name}", operation)
        return self._check(response, operation).json()

    def delete_branch(self, name: str) -> None:
        operation = f"delete branch {name}"
        response = self._request("DELETE", f"git/refs/heads/{name}", operation)
        self._check(response, operation)
        logger.info(f"Deleted branch {name}")

    def list_workflow_runs(self) -> list[dict]:
        operation = "list workflow runs"
        response = self._request(
            "GET", "actions/runs", operation, params={"per_page": PAGE_SIZE}
        )
        return self._check(response, operation).json().get("workflow_runs", [])

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self) -> "GitHubStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
