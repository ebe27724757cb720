"""
Models module for Unlocker Store.

Contains Pydantic models for configuration and pipeline results.
"""

from .pipeline import (
    DEFAULT_API_URL,
    PLACEHOLDER_API_TOKEN,
    PLACEHOLDER_BUCKET,
    Configuration,
    DataFormat,
    PipelineResult,
    PipelineStage,
    UploadResult,
)

__all__ = [
    "Configuration",
    "DataFormat",
    "PipelineResult",
    "PipelineStage",
    "UploadResult",
    "DEFAULT_API_URL",
    "PLACEHOLDER_API_TOKEN",
    "PLACEHOLDER_BUCKET",
]
