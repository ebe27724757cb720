"""
Pydantic models for the unlock-and-store pipeline.

This module defines the resolved run configuration, the upload descriptor
and the result value returned by the pipeline agent.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_API_TOKEN = "YOUR_API_KEY"
PLACEHOLDER_BUCKET = "your-s3-bucket-name"
DEFAULT_API_URL = "https://api.brightdata.com/request"


class DataFormat(str, Enum):
    """Enumeration of response formats accepted by the unlocking API."""

    JSON = "json"
    RAW = "raw"


class PipelineStage(str, Enum):
    """Enumeration of pipeline stages."""

    FETCHING = "fetching"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


class Configuration(BaseModel):
    """Resolved settings for a single pipeline run."""

    model_config = ConfigDict(frozen=True)

    api_token: str = Field(..., repr=False, description="Unlocking API token")
    zone: str = Field(..., description="Unlocker zone identifier")
    target_url: str = Field(..., description="Page to request through the unlocker")
    format: DataFormat = Field(
        default=DataFormat.JSON, description="Response format requested"
    )
    bucket: str = Field(..., description="Destination S3 bucket")
    region: str = Field(..., description="AWS region of the bucket")
    access_key_id: Optional[str] = Field(
        default=None, repr=False, description="AWS access key id"
    )
    secret_access_key: Optional[str] = Field(
        default=None, repr=False, description="AWS secret access key"
    )
    api_url: str = Field(
        default=DEFAULT_API_URL, description="Unlocking API request endpoint"
    )
    request_timeout: float = Field(
        default=60.0, gt=0, description="Timeout for the API call in seconds"
    )

    @property
    def has_explicit_credentials(self) -> bool:
        """True when both halves of the AWS key pair are set."""
        return bool(self.access_key_id and self.secret_access_key)


class UploadResult(BaseModel):
    """Where a payload ended up in the object store."""

    model_config = ConfigDict(frozen=True)

    location_url: str = Field(..., description="Virtual-hosted-style object URL")
    object_key: str = Field(..., description="Key of the stored object")


class PipelineResult(BaseModel):
    """Outcome of a pipeline execution."""

    status: str = Field(..., description="Execution status: completed or failed")
    stage: PipelineStage = Field(..., description="Last stage reached")
    target_url: str = Field(..., description="Page that was requested")
    bucket: str = Field(..., description="Destination bucket")
    upload: Optional[UploadResult] = Field(
        default=None, description="Upload descriptor on success"
    )
    payload_size: int = Field(
        default=0, description="Characters in the compact JSON payload"
    )
    error_type: Optional[str] = Field(
        default=None, description="Exception class name if failed"
    )
    error_message: Optional[str] = Field(
        default=None, description="Error message if failed"
    )
    started_at: datetime = Field(..., description="Start time")
    completed_at: Optional[datetime] = Field(
        default=None, description="Completion time"
    )
    duration_seconds: float = Field(default=0.0, description="Execution duration")

    @property
    def succeeded(self) -> bool:
        return self.status == "completed" and self.stage == PipelineStage.DONE

