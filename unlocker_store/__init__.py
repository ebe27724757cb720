"""
Unlocker Store Package.

Fetches a web page through the Bright Data Web Unlocker API and stores
the JSON response in an AWS S3 bucket.
"""

__version__ = "1.0.0"
__description__ = "Bright Data Web Unlocker to S3 pipeline"

from .agent.pipeline_agent import UnlockerStoreAgent
from .clients.storage_client import (
    InMemoryStorageClient,
    S3StorageClient,
    create_storage_client,
)
from .clients.unlocker_client import UnlockerClient
from .config.config_loader import resolve_configuration
from .exceptions import (
    ConfigurationError,
    RemoteRequestError,
    StorageError,
    TransportError,
    UnlockerStoreError,
)
from .models.pipeline import (
    Configuration,
    DataFormat,
    PipelineResult,
    PipelineStage,
    UploadResult,
)

__all__ = [
    "UnlockerStoreAgent",
    "UnlockerClient",
    "S3StorageClient",
    "InMemoryStorageClient",
    "create_storage_client",
    "resolve_configuration",
    "Configuration",
    "DataFormat",
    "PipelineResult",
    "PipelineStage",
    "UploadResult",
    "UnlockerStoreError",
    "ConfigurationError",
    "TransportError",
    "RemoteRequestError",
    "StorageError",
]
