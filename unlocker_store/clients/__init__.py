"""
Clients module for Unlocker Store.

Contains the Web Unlocker fetch client and the object storage clients.
"""

from .storage_client import (
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
    build_location_url,
    build_object_key,
    create_storage_client,
)
from .unlocker_client import UnlockerClient, fetch

__all__ = [
    "UnlockerClient",
    "fetch",
    "StorageClient",
    "S3StorageClient",
    "InMemoryStorageClient",
    "create_storage_client",
    "build_object_key",
    "build_location_url",
]
