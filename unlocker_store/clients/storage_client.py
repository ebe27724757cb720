"""
Object storage client for scraped payloads.

Writes one JSON document per run to AWS S3, with an in-memory variant
for dry runs and tests.

The object location is built from the bucket, region and key instead of
being read from the PutObject response, which carries no location field.
"""

import base64
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

import boto3
import structlog

from ..exceptions import StorageError
from ..models.pipeline import Configuration, UploadResult

logger = structlog.get_logger(__name__)

KEY_PREFIX = "scraped-data"
SOURCE_TAG = "bright-data-unlocker"
URL_HASH_LENGTH = 10

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_object_key(source_url: str, moment: Optional[datetime] = None) -> str:
    """
    Build the object key for a payload.

    Path structure: scraped-data/{timestamp}-{url_hash}.json, where the
    timestamp has ':' and '.' replaced with '-' and url_hash is the first
    ten alphanumeric characters of the base64-encoded source URL.
    """
    moment = moment or datetime.now(timezone.utc)
    timestamp = re.sub(r"[:.]", "-", format_timestamp(moment))
    encoded = base64.b64encode(source_url.encode("utf-8")).decode("ascii")
    url_hash = _NON_ALNUM.sub("", encoded)[:URL_HASH_LENGTH]
    return f"{KEY_PREFIX}/{timestamp}-{url_hash}.json"


def build_location_url(bucket: str, region: str, key: str) -> str:
    """Virtual-hosted-style URL of an object."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def build_metadata(source_url: str, moment: Optional[datetime] = None) -> Dict[str, str]:
    """User metadata stored with every object."""
    moment = moment or datetime.now(timezone.utc)
    return {
        "original-url": source_url,
        "scraped-at": format_timestamp(moment),
        "source": SOURCE_TAG,
    }


def serialize_payload(payload: Any) -> bytes:
    """Pretty-printed JSON body for a payload."""
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


class StorageClient(Protocol):
    """
    Protocol for payload storage.

    The pipeline agent only depends on this, so tests can pass any object
    with a matching upload coroutine.
    """

    async def upload(
        self,
        payload: Any,
        source_url: str,
        config: Configuration,
    ) -> UploadResult:
        """Store a payload and return where it went."""
        ...


class S3StorageClient:
    """
    AWS S3 storage client.

    boto3 is synchronous, so the put blocks the event loop for its
    duration. Only one operation is ever in flight.
    """

    def __init__(self, config: Configuration, s3_client: Any = None) -> None:
        """
        Initialize the S3 client.

        Args:
            config: Run configuration with bucket, region and credentials
            s3_client: Pre-built boto3 S3 client; built from config if None
        """
        self._s3_client = s3_client or self._create_client(config)

        logger.info(
            "Initialized S3 storage client",
            bucket=config.bucket,
            region=config.region,
            credentials="explicit" if config.has_explicit_credentials else "ambient",
        )

    @staticmethod
    def _create_client(config: Configuration) -> Any:
        kwargs: Dict[str, Any] = {"region_name": config.region}
        # Without both keys, boto3 falls back to its own credential chain
        if config.has_explicit_credentials:
            kwargs["aws_access_key_id"] = config.access_key_id
            kwargs["aws_secret_access_key"] = config.secret_access_key

        return boto3.client("s3", **kwargs)

    async def upload(
        self,
        payload: Any,
        source_url: str,
        config: Configuration,
    ) -> UploadResult:
        """
        Upload a payload to S3.

        Args:
            payload: JSON-serializable value
            source_url: Page the payload was scraped from
            config: Run configuration naming the bucket and region

        Returns:
            UploadResult: Location URL and object key

        Raises:
            StorageError: If serialization or the put fails
        """
        key = build_object_key(source_url)

        logger.info(
            "Uploading data to S3",
            destination=f"s3://{config.bucket}/{key}",
        )

        try:
            body = serialize_payload(payload)
            self._s3_client.put_object(
                Bucket=config.bucket,
                Key=key,
                Body=body,
                ContentType="application/json",
                Metadata=build_metadata(source_url),
            )
        except Exception as e:
            logger.error(
                "Error uploading to S3",
                bucket=config.bucket,
                key=key,
                error=str(e),
            )
            raise StorageError(f"Upload failed: {e}", details={"key": key}) from e

        location_url = build_location_url(config.bucket, config.region, key)
        logger.info("Successfully uploaded to S3", location=location_url)

        return UploadResult(location_url=location_url, object_key=key)


# ---------------------------------------------------------------------------
# In-memory storage for dry runs
# ---------------------------------------------------------------------------


class InMemoryStorageClient:
    """
    In-memory storage with the same upload contract as S3StorageClient.

    Bodies are kept in a dict keyed by object key. Locations are the URLs
    the object would have in S3.
    """

    def __init__(self) -> None:
        # {object_key: {"body": bytes, "metadata": dict}}
        self.objects: Dict[str, Dict[str, Any]] = {}
        logger.info("Initialized in-memory storage client")

    async def upload(
        self,
        payload: Any,
        source_url: str,
        config: Configuration,
    ) -> UploadResult:
        """Store payload in memory."""
        key = build_object_key(source_url)

        try:
            body = serialize_payload(payload)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Upload failed: {e}", details={"key": key}) from e

        self.objects[key] = {
            "body": body,
            "metadata": build_metadata(source_url),
        }

        logger.debug("Stored payload in memory", key=key, size_bytes=len(body))

        return UploadResult(
            location_url=build_location_url(config.bucket, config.region, key),
            object_key=key,
        )


def create_storage_client(
    config: Configuration,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Run configuration
        mock_mode: If True, return the in-memory client

    Returns:
        StorageClient implementation (S3 or in-memory)
    """
    if mock_mode:
        return InMemoryStorageClient()

    return S3StorageClient(config)
