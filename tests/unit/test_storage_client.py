"""
Unit tests for the object storage clients.
"""

import json
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError
from unlocker_store.clients.storage_client import (
    InMemoryStorageClient,
    S3StorageClient,
    build_location_url,
    build_metadata,
    build_object_key,
    create_storage_client,
    format_timestamp,
    serialize_payload,
)
from unlocker_store.exceptions import StorageError

KEY_PATTERN = re.compile(
    r"^scraped-data/\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z-[A-Za-z0-9]{10}\.json$"
)


class TestObjectKey:
    """Test object key derivation."""

    def test_known_url(self):
        """Test the key for the Bright Data test page at a fixed time."""
        moment = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)

        key = build_object_key("https://geo.brdtest.com/welcome.txt", moment)

        assert key == "scraped-data/2024-05-01T12-30-45-123Z-aHR0cHM6Ly.json"

    def test_pattern(self):
        """Test keys built from the current time match the documented shape."""
        key = build_object_key("https://geo.brdtest.com/welcome.txt")
        assert KEY_PATTERN.match(key)

    def test_non_utc_moment(self):
        """Test timestamps are converted to UTC."""
        moment = datetime(
            2024, 5, 1, 14, 30, 45, tzinfo=timezone(timedelta(hours=2))
        )

        key = build_object_key("https://example.com", moment)

        assert key.startswith("scraped-data/2024-05-01T12-30-45-000Z-")

    def test_hash_is_alphanumeric(self):
        """Test base64 padding and symbols are stripped from the hash."""
        url = "https://example.com/?q=~~~>>>???"

        key = build_object_key(url, datetime(2024, 1, 1, tzinfo=timezone.utc))
        url_hash = key.rsplit("-", 1)[1][: -len(".json")]

        assert re.fullmatch(r"[A-Za-z0-9]{10}", url_hash)

    def test_same_url_same_hash(self):
        """Test the hash depends only on the URL."""
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        first = build_object_key("https://example.com/a", moment)
        second = build_object_key("https://example.com/a", moment)
        assert first == second

    def test_format_timestamp(self):
        """Test ISO-8601 formatting with milliseconds."""
        moment = datetime(2024, 5, 1, 12, 30, 45, 7000, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2024-05-01T12:30:45.007Z"


class TestHelpers:
    """Test location and serialization helpers."""

    def test_location_url(self):
        """Test the virtual-hosted-style URL template."""
        assert (
            build_location_url("bucket", "eu-west-1", "scraped-data/a.json")
            == "https://bucket.s3.eu-west-1.amazonaws.com/scraped-data/a.json"
        )

    def test_build_metadata(self):
        """Test the three metadata fields."""
        moment = datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)

        assert build_metadata("https://example.com", moment) == {
            "original-url": "https://example.com",
            "scraped-at": "2024-05-01T12:30:45.123Z",
            "source": "bright-data-unlocker",
        }

    def test_serialize_payload(self):
        """Test payloads are pretty-printed UTF-8 JSON."""
        body = serialize_payload({"text": "hello"})
        assert body == b'{\n  "text": "hello"\n}'

    def test_serialize_unicode(self):
        """Test non-ASCII text is kept as UTF-8."""
        body = serialize_payload({"text": "héllo"})
        assert json.loads(body.decode("utf-8")) == {"text": "héllo"}


class TestS3StorageClient:
    """Test S3StorageClient."""

    @pytest.fixture
    def s3(self):
        """Mocked boto3 S3 client."""
        client = MagicMock()
        client.put_object.return_value = {"ETag": '"abc123"'}
        return client

    @pytest.fixture
    def storage(self, config, s3):
        """S3 storage client using the mocked boto3 client."""
        return S3StorageClient(config, s3_client=s3)

    async def test_upload(self, storage, s3, config):
        """Test a successful upload."""
        result = await storage.upload({"text": "hello"}, config.target_url, config)

        assert KEY_PATTERN.match(result.object_key)
        assert result.location_url == (
            f"https://test-bucket.s3.us-east-1.amazonaws.com/{result.object_key}"
        )
        s3.put_object.assert_called_once()

    async def test_upload_request(self, storage, s3, config):
        """Test the put carries bucket, key, content type and metadata."""
        result = await storage.upload({"text": "hello"}, config.target_url, config)

        kwargs = s3.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "test-bucket"
        assert kwargs["Key"] == result.object_key
        assert kwargs["ContentType"] == "application/json"
        assert kwargs["Metadata"]["original-url"] == config.target_url
        assert kwargs["Metadata"]["source"] == "bright-data-unlocker"
        assert re.match(
            r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$",
            kwargs["Metadata"]["scraped-at"],
        )

    async def test_body_round_trip(self, storage, s3, config):
        """Test the uploaded body parses back to the payload."""
        payload = {"ip": "1.2.3.4", "nested": {"list": [1, 2.5, None, True]}}

        await storage.upload(payload, config.target_url, config)

        body = s3.put_object.call_args.kwargs["Body"]
        assert json.loads(body) == payload

    async def test_location_ignores_response(self, storage, s3, config):
        """Test the location is built locally even if the store returns one."""
        s3.put_object.return_value = {"Location": "https://elsewhere.example/x"}

        result = await storage.upload({"a": 1}, config.target_url, config)

        assert result.location_url.startswith("https://test-bucket.s3.us-east-1.")

    async def test_upload_error(self, storage, s3, config):
        """Test store errors raise StorageError."""
        s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "Bucket does not exist"}},
            "PutObject",
        )

        with pytest.raises(StorageError, match="Upload failed") as exc_info:
            await storage.upload({"a": 1}, config.target_url, config)

        assert isinstance(exc_info.value.__cause__, ClientError)
        assert KEY_PATTERN.match(exc_info.value.details["key"])
        assert s3.put_object.call_count == 1

    async def test_unserializable_payload(self, storage, s3, config):
        """Test payloads that are not JSON raise StorageError without a put."""
        with pytest.raises(StorageError):
            await storage.upload({"when": object()}, config.target_url, config)

        s3.put_object.assert_not_called()

    @patch("unlocker_store.clients.storage_client.boto3.client")
    def test_ambient_credentials(self, mock_client, config):
        """Test no keys are passed when credentials are not configured."""
        S3StorageClient(config)

        mock_client.assert_called_once_with("s3", region_name="us-east-1")

    @patch("unlocker_store.clients.storage_client.boto3.client")
    def test_explicit_credentials(self, mock_client, config):
        """Test configured keys are passed to boto3."""
        config = config.model_copy(
            update={"access_key_id": "AKIAEXAMPLE", "secret_access_key": "secret"}
        )

        S3StorageClient(config)

        mock_client.assert_called_once_with(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="AKIAEXAMPLE",
            aws_secret_access_key="secret",
        )


class TestInMemoryStorageClient:
    """Test InMemoryStorageClient."""

    async def test_upload(self, config):
        """Test payloads are kept in memory."""
        storage = InMemoryStorageClient()

        result = await storage.upload({"text": "hello"}, config.target_url, config)

        assert KEY_PATTERN.match(result.object_key)
        stored = storage.objects[result.object_key]
        assert json.loads(stored["body"]) == {"text": "hello"}
        assert stored["metadata"]["original-url"] == config.target_url
        assert result.location_url == build_location_url(
            "test-bucket", "us-east-1", result.object_key
        )

    async def test_metadata_matches_s3(self, config):
        """Test stored metadata has the same fields as an S3 upload."""
        storage = InMemoryStorageClient()
        s3 = MagicMock()
        await S3StorageClient(config, s3_client=s3).upload(
            {"a": 1}, config.target_url, config
        )

        result = await storage.upload({"a": 1}, config.target_url, config)

        metadata = storage.objects[result.object_key]["metadata"]
        assert metadata.keys() == s3.put_object.call_args.kwargs["Metadata"].keys()
        assert metadata["source"] == "bright-data-unlocker"
        assert re.match(
            r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", metadata["scraped-at"]
        )

    async def test_text_payload(self, config):
        """Test page text from the raw format is stored as a JSON string."""
        storage = InMemoryStorageClient()

        result = await storage.upload("Welcome to Bright Data!\n", config.target_url, config)

        body = storage.objects[result.object_key]["body"]
        assert json.loads(body) == "Welcome to Bright Data!\n"

    async def test_unserializable_payload(self, config):
        """Test payloads that are not JSON raise StorageError."""
        storage = InMemoryStorageClient()

        with pytest.raises(StorageError):
            await storage.upload({"when": object()}, config.target_url, config)

        assert storage.objects == {}


class TestCreateStorageClient:
    """Test the storage client factory."""

    def test_mock_mode(self, config):
        """Test mock mode returns the in-memory client."""
        assert isinstance(create_storage_client(config, mock_mode=True), InMemoryStorageClient)

    @patch("unlocker_store.clients.storage_client.boto3.client")
    def test_s3(self, mock_client, config):
        """Test S3 is used by default."""
        assert isinstance(create_storage_client(config), S3StorageClient)
        mock_client.assert_called_once()
