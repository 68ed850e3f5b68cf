"""
Download interaction source documents from an S3 compatible object store.

The object key of an interaction's document is the last path segment of
its URL. Used when packaging standalone reports.
"""

import re
from pathlib import Path
from typing import Iterable, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import MissingConfigError, NotFoundError, RemoteError
from ..utils.config import S3Config
from ..utils.logger import get_logger
from ..utils.retry import RetryStrategy
from ..validation.schemas import Interaction

logger = get_logger("mrreports.storage.s3_downloads")


def bucket_name(owner: str) -> str:
    """Default source bucket for an organization: lowercase letters and digits only."""
    return re.sub(r"[^a-z0-9]", "", owner, flags=re.IGNORECASE).lower()


class InteractionDownloader:
    """
    Fetches interaction documents into a local directory.

    Usage:
        downloader = InteractionDownloader(settings.s3, bucket, config.s3_credentials)
        paths = downloader.download(interactions, work_dir / "interactions")
    """

    def __init__(
        self,
        config: S3Config,
        bucket: Optional[str] = None,
        credentials: tuple[Optional[str], Optional[str]] = (None, None),
        client=None,
        retry: Optional[RetryStrategy] = None,
    ) -> None:
        """
        Initialize the downloader.

        Args:
            config: Endpoint and region settings.
            bucket: Source bucket. Defaults to config.source_bucket.
            credentials: Access key and secret key; None uses boto3's chain.
            client: Preconfigured S3 client.
            retry: Retry strategy for transient failures.
        """
        self.bucket = bucket or config.source_bucket
        if not self.bucket:
            raise MissingConfigError(
                "S3 source bucket not configured",
                {"operation": "download interaction documents"},
            )

        access_key, secret_key = credentials
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            region_name=config.region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )
        self.retry = retry or RetryStrategy(
            max_retries=config.max_retries,
            exceptions=(BotoCoreError, RemoteError),
        )

        logger.info(f"S3 downloader initialized: bucket={self.bucket}")

    def _fetch(self, key: str, target: Path) -> None:
        try:
            self.s3_client.download_file(self.bucket, key, str(target))
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("404", "NoSuchKey"):
                raise NotFoundError("Interaction document", key, f"download from {self.bucket}") from e
            raise RemoteError(
                f"S3 download of {key} failed: {code}",
                {"bucket": self.bucket, "code": code},
            ) from e

    def download(
        self, interactions: Iterable[Interaction], target_dir: Union[str, Path]
    ) -> list[Path]:
        """
        Download each interaction's document into target_dir.

        Interactions without a URL are skipped.

        Returns:
            Paths of the downloaded files.
        """
        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        paths = []
        for interaction in interactions:
            key = interaction.document_name
            if not key:
                logger.warning(f"Interaction '{interaction.name}' has no document URL, skipping")
                continue

            target = target_dir / key
            try:
                self.retry.execute(self._fetch, key, target)
            except BotoCoreError as e:
                raise RemoteError(
                    f"S3 download of {key} for interaction '{interaction.name}' failed: {e}",
                    {"bucket": self.bucket},
                ) from e
            logger.debug(f"Downloaded {key} to {target}")
            paths.append(target)

        logger.info(f"Downloaded {len(paths)} documents to {target_dir}")
        return paths
