"""Tests for the GitHub contents API store (HTTP session mocked)."""

import base64
import json
from unittest.mock import MagicMock

import pytest
import requests

from mrreports.core.exceptions import (
    MalformedInputError,
    MissingConfigError,
    RemoteConflictError,
    RemoteError,
)
from mrreports.storage.github_store import GitHubStore
from mrreports.utils.config import GitHubConfig

BASE = "https://api.github.com/repos/mediumroast/test-repository"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text="", content=b""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = content

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def _contents(objects):
    raw = json.dumps(objects).encode("utf-8")
    return {
        "name": "Companies.json",
        "path": "Companies/Companies.json",
        "sha": "abc",
        "size": len(raw),
        "encoding": "base64",
        "content": base64.b64encode(raw).decode("ascii"),
    }


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def store(session):
    config = GitHubConfig(owner="mediumroast", repo="test-repository", timeout=10)
    return GitHubStore(config, "ghp_test", session=session)


def test_requires_repository(session):
    with pytest.raises(MissingConfigError):
        GitHubStore(GitHubConfig(), "ghp_test", session=session)


def test_headers(store, session):
    headers = session.headers.update.call_args[0][0]
    assert headers["Authorization"] == "Bearer ghp_test"
    assert headers["Accept"] == "application/vnd.github+json"


def test_read_objects(store, session):
    session.request.return_value = FakeResponse(200, _contents([{"name": "Acme"}]))

    assert store.read_objects("Companies/Companies.json") == [{"name": "Acme"}]
    session.request.assert_called_once_with(
        "GET",
        f"{BASE}/contents/Companies/Companies.json",
        timeout=10,
        params={"ref": "main"},
    )


def test_read_objects_missing_or_empty(store, session):
    session.request.return_value = FakeResponse(404, {"message": "Not Found"})
    assert store.read_objects("Studies/Studies.json") == []

    session.request.return_value = FakeResponse(200, {"size": 0})
    assert store.read_objects("Studies/Studies.json") == []


def test_read_objects_large_file(store, session):
    session.request.return_value = FakeResponse(
        200, {"size": 2_000_000, "encoding": "none", "download_url": "https://raw.example/C.json"}
    )
    session.get.return_value = FakeResponse(200, content=b'[{"name": "Big"}]')
    assert store.read_objects("Companies/Companies.json") == [{"name": "Big"}]


def test_read_objects_not_a_list(store, session):
    session.request.return_value = FakeResponse(200, _contents({"name": "Acme"}))
    with pytest.raises(MalformedInputError):
        store.read_objects("Companies/Companies.json")


def test_request_failure(store, session):
    session.request.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(RemoteError):
        store.read_objects("Companies/Companies.json")


def test_server_error(store, session):
    session.request.return_value = FakeResponse(500, {"message": "boom"})
    with pytest.raises(RemoteError) as exc_info:
        store.list_files("Companies")
    assert exc_info.value.context["status"] == 500


def test_list_files(store, session):
    session.request.return_value = FakeResponse(200, [
        {"type": "file", "name": "Acme.md", "path": "Companies/Acme.md", "sha": "s1", "size": 3},
        {"type": "dir", "name": "images", "path": "Companies/images", "sha": "s2"},
    ])
    files = store.list_files("Companies")
    assert [(f.path, f.sha) for f in files] == [("Companies/Acme.md", "s1")]


def test_get_file_missing(store, session):
    session.request.return_value = FakeResponse(404, {"message": "Not Found"})
    assert store.get_file("README.md") is None


def test_put_file(store, session):
    session.request.return_value = FakeResponse(200, {"content": {"sha": "new-sha"}})

    assert store.put_file("README.md", "# Hello\n", "Update README", sha="old-sha") == "new-sha"

    method, url = session.request.call_args[0]
    body = session.request.call_args[1]["json"]
    assert (method, url) == ("PUT", f"{BASE}/contents/README.md")
    assert base64.b64decode(body["content"]) == b"# Hello\n"
    assert body["sha"] == "old-sha"
    assert body["branch"] == "main"
    assert body["message"] == "Update README"


def test_put_file_create_has_no_sha(store, session):
    session.request.return_value = FakeResponse(201, {"content": {"sha": "new-sha"}})
    store.put_file("README.md", "x", "Create README")
    assert "sha" not in session.request.call_args[1]["json"]


@pytest.mark.parametrize("status,message", [
    (409, "README.md does not match abc"),
    (422, "Invalid request. \"sha\" wasn't supplied."),
])
def test_put_file_conflict(store, session, status, message):
    session.request.return_value = FakeResponse(status, {"message": message})
    with pytest.raises(RemoteConflictError):
        store.put_file("README.md", "x", "Update README", sha="abc")


def test_delete_file_conflict(store, session):
    session.request.return_value = FakeResponse(409, {"message": "conflict"})
    with pytest.raises(RemoteConflictError):
        store.delete_file("Companies/Old.md", "abc", "Delete Old")


def test_delete_branch(store, session):
    session.request.return_value = FakeResponse(204)
    store.delete_branch("1706153906529")
    assert session.request.call_args[0] == ("DELETE", f"{BASE}/git/refs/heads/1706153906529")


def test_list_workflow_runs(store, session):
    session.request.return_value = FakeResponse(200, {"total_count": 1, "workflow_runs": [{"id": 1}]})
    assert store.list_workflow_runs() == [{"id": 1}]


def test_context_manager_closes_session(session):
    config = GitHubConfig(owner="mediumroast", repo="test-repository")
    with GitHubStore(config, "ghp_test", session=session):
        pass
    session.close.assert_called_once()
