"""
Unlocker Store Agent - fetch-then-store workflow orchestrator.

This agent runs the pipeline in strict order:
1. Fetch the target page through the Web Unlocker API
2. Upload the JSON response to the object store
3. Report where it was stored

A failure in either step ends the run. Nothing is retried or rolled back.
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from ..clients.storage_client import StorageClient, create_storage_client
from ..clients.unlocker_client import UnlockerClient
from ..models.pipeline import (
    Configuration,
    PipelineResult,
    PipelineStage,
    UploadResult,
)

logger = structlog.get_logger(__name__)


def payload_size(payload: Any) -> int:
    """
    Length in characters of the compact JSON encoding.

    Counts Unicode code points, so a character outside the Basic
    Multilingual Plane (an emoji, say) counts once, not as a UTF-16
    surrogate pair. The figure is for the run summary only.
    """
    return len(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))


class UnlockerStoreAgent:
    """
    Unlocker Store Agent.

    Clients are built once, from the configuration, unless they are
    passed in. The agent is the only place where pipeline errors are
    handled.
    """

    def __init__(
        self,
        config: Configuration,
        fetch_client: Optional[UnlockerClient] = None,
        storage_client: Optional[StorageClient] = None,
        mock_storage: bool = False,
    ):
        """
        Initialize the agent.

        Args:
            config: Resolved run configuration
            fetch_client: Client used for the unlocker request
            storage_client: Client used for the upload
            mock_storage: Build the in-memory storage client when
                storage_client is not given
        """
        self.config = config
        self.fetch_client = fetch_client or UnlockerClient(
            timeout=config.request_timeout
        )
        self.storage_client = storage_client or create_storage_client(
            config, mock_mode=mock_storage
        )
        self.stage: Optional[PipelineStage] = None

    async def execute(self) -> PipelineResult:
        """
        Execute the fetch and upload steps.

        Returns:
            PipelineResult: Completed or failed result; never raises for
            errors in the fetch or upload steps
        """
        started_at = datetime.now(timezone.utc)
        log = logger.bind(target_url=self.config.target_url, bucket=self.config.bucket)
        log.info("Starting pipeline execution")

        try:
            self.stage = PipelineStage.FETCHING
            payload = await self.fetch_client.fetch(self.config)

            self.stage = PipelineStage.UPLOADING
            upload = await self.storage_client.upload(
                payload, self.config.target_url, self.config
            )

            self.stage = PipelineStage.DONE

        except Exception as e:
            failed_stage = self.stage
            self.stage = PipelineStage.FAILED
            log.error(
                "Pipeline execution failed",
                stage=failed_stage.value if failed_stage else None,
                error_type=type(e).__name__,
                error=str(e),
            )
            return self._create_result(
                "failed",
                failed_stage or PipelineStage.FETCHING,
                started_at,
                error=e,
            )

        result = self._create_result(
            "completed",
            PipelineStage.DONE,
            started_at,
            upload=upload,
            size=payload_size(payload),
        )
        log.info(
            "Pipeline execution completed",
            object_key=upload.object_key,
            payload_size=result.payload_size,
            duration_seconds=result.duration_seconds,
        )
        return result

    def _create_result(
        self,
        status: str,
        stage: PipelineStage,
        started_at: datetime,
        upload: Optional[UploadResult] = None,
        size: int = 0,
        error: Optional[Exception] = None,
    ) -> PipelineResult:
        completed_at = datetime.now(timezone.utc)
        return PipelineResult(
            status=status,
            stage=stage,
            target_url=self.config.target_url,
            bucket=self.config.bucket,
            upload=upload,
            payload_size=size,
            error_type=type(error).__name__ if error else None,
            error_message=str(error) if error else None,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
        )
