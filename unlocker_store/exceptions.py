"""
Exception hierarchy for Unlocker Store.

Each error is raised where the failure happens and handled only by the
pipeline agent, which turns it into a failed run.
"""

from typing import Any, Dict, Optional


class UnlockerStoreError(Exception):
    """Base exception for all Unlocker Store errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(UnlockerStoreError):
    """Exception raised when a required setting is missing or invalid."""

    pass


class TransportError(UnlockerStoreError):
    """Exception raised when the unlocking API cannot be reached."""

    pass


class RemoteRequestError(UnlockerStoreError):
    """Exception raised when the unlocking API answers with an error."""

    def __init__(
        self,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class StorageError(UnlockerStoreError):
    """Exception raised when the object store call fails."""

    pass
