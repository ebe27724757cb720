"""
Pytest configuration for Unlocker Store tests.
"""

from unittest.mock import AsyncMock

import pytest
from unlocker_store.models.pipeline import Configuration, DataFormat, UploadResult

ENV_VARS = [
    "BRIGHT_DATA_API_TOKEN",
    "BRIGHT_DATA_ZONE",
    "BRIGHT_DATA_TARGET_URL",
    "BRIGHT_DATA_FORMAT",
    "BRIGHT_DATA_API_URL",
    "BRIGHT_DATA_TIMEOUT",
    "AWS_S3_BUCKET",
    "AWS_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "STORAGE_MOCK_MODE",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the real environment and any local .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Environment with a real-looking token and bucket."""
    monkeypatch.setenv("BRIGHT_DATA_API_TOKEN", "test-token")
    monkeypatch.setenv("BRIGHT_DATA_ZONE", "test_zone")
    monkeypatch.setenv("AWS_S3_BUCKET", "test-bucket")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")


@pytest.fixture
def config():
    """Configuration for a run against the Bright Data test page."""
    return Configuration(
        api_token="test-token",
        zone="web_unlocker1",
        target_url="https://geo.brdtest.com/welcome.txt",
        format=DataFormat.JSON,
        bucket="test-bucket",
        region="us-east-1",
        request_timeout=5,
    )


@pytest.fixture
def placeholder_config(config):
    """Configuration still holding the placeholder API token."""
    return config.model_copy(update={"api_token": "YOUR_API_KEY"})


@pytest.fixture
def sample_upload():
    """Upload descriptor returned by a storage double."""
    key = "scraped-data/2024-05-01T12-30-45-123Z-aHR0cHM6Ly.json"
    return UploadResult(
        location_url=f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}",
        object_key=key,
    )


@pytest.fixture
def mock_storage_client(sample_upload):
    """Storage double whose upload succeeds."""
    client = AsyncMock()
    client.upload.return_value = sample_upload
    return client
