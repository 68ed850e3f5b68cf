"""Tests for interaction document downloads (S3 client mocked)."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from mrreports.core.exceptions import MissingConfigError, NotFoundError, RemoteError
from mrreports.storage.s3_downloads import InteractionDownloader, bucket_name
from mrreports.utils.config import S3Config
from mrreports.utils.retry import RetryStrategy


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def downloader(client):
    retry = RetryStrategy(
        max_retries=2,
        exceptions=(EndpointConnectionError, RemoteError),
        sleep=lambda seconds: None,
    )
    return InteractionDownloader(S3Config(), "mediumroast", client=client, retry=retry)


def test_bucket_name():
    assert bucket_name("Mediumroast-Org_1") == "mediumroastorg1"


def test_bucket_required(client):
    with pytest.raises(MissingConfigError):
        InteractionDownloader(S3Config(), client=client)


def test_bucket_from_config(client):
    downloader = InteractionDownloader(S3Config(source_bucket="docs"), client=client)
    assert downloader.bucket == "docs"


def test_download(downloader, client, interactions, tmp_path):
    paths = downloader.download(interactions[:2], tmp_path / "interactions")

    assert paths == [
        tmp_path / "interactions" / "AcmeQ1Call.pdf",
        tmp_path / "interactions" / "AcmeRoadmap.pdf",
    ]
    client.download_file.assert_any_call(
        "mediumroast", "AcmeQ1Call.pdf", str(tmp_path / "interactions" / "AcmeQ1Call.pdf")
    )
    assert (tmp_path / "interactions").is_dir()


def test_interaction_without_url_is_skipped(downloader, client, interactions, tmp_path):
    no_url = interactions[0].model_copy(update={"url": None})
    assert downloader.download([no_url], tmp_path) == []
    client.download_file.assert_not_called()


def test_missing_object(downloader, client, interactions, tmp_path):
    client.download_file.side_effect = _client_error("404")
    with pytest.raises(NotFoundError):
        downloader.download(interactions[:1], tmp_path)
    # Missing objects are not retried
    assert client.download_file.call_count == 1


def test_server_error_is_retried(downloader, client, interactions, tmp_path):
    client.download_file.side_effect = _client_error("InternalError")
    with pytest.raises(RemoteError):
        downloader.download(interactions[:1], tmp_path)
    assert client.download_file.call_count == 3


def test_transient_failure_recovers(downloader, client, interactions, tmp_path):
    client.download_file.side_effect = [
        EndpointConnectionError(endpoint_url="https://s3.example"),
        None,
    ]
    paths = downloader.download(interactions[:1], tmp_path)
    assert paths == [tmp_path / "AcmeQ1Call.pdf"]
    assert client.download_file.call_count == 2


def test_botocore_error_is_wrapped(client, interactions, tmp_path):
    retry = RetryStrategy(max_retries=0, exceptions=(RemoteError,), sleep=lambda seconds: None)
    downloader = InteractionDownloader(S3Config(), "mediumroast", client=client, retry=retry)
    client.download_file.side_effect = EndpointConnectionError(endpoint_url="https://s3.example")
    with pytest.raises(RemoteError):
        downloader.download(interactions[:1], tmp_path)
