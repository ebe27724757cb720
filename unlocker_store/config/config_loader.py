"""
Configuration resolver for Unlocker Store.

This module turns environment settings, plus optional command line
overrides, into the immutable Configuration used by a pipeline run.
Nothing here touches the network.
"""

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from ..models.pipeline import PLACEHOLDER_API_TOKEN, PLACEHOLDER_BUCKET, Configuration
from .settings import Settings, get_settings

logger = structlog.get_logger(__name__)


def resolve_configuration(
    settings: Optional[Settings] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Configuration:
    """
    Build the run configuration from settings.

    Args:
        settings: Loaded settings (the cached environment settings if None)
        overrides: Field values that replace the resolved ones; None values
            are ignored

    Returns:
        Configuration: Frozen configuration for one run

    Raises:
        ConfigurationError: If a resolved value fails validation
    """
    settings = settings or get_settings()

    values: Dict[str, Any] = {
        "api_token": settings.unlocker.api_token,
        "zone": settings.unlocker.zone,
        "target_url": settings.unlocker.target_url,
        "format": settings.unlocker.format,
        "api_url": settings.unlocker.api_url,
        "request_timeout": settings.unlocker.timeout,
        "bucket": settings.storage.s3_bucket,
        "region": settings.storage.region,
        "access_key_id": settings.storage.access_key_id,
        "secret_access_key": settings.storage.secret_access_key,
    }

    if overrides:
        applied = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(applied) - set(values)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration fields: {', '.join(sorted(unknown))}"
            )
        values.update(applied)

    try:
        config = Configuration(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e

    logger.debug(
        "Resolved configuration",
        target_url=config.target_url,
        zone=config.zone,
        bucket=config.bucket,
        region=config.region,
    )
    return config


def ensure_api_token(config: Configuration) -> None:
    """
    Check that a real API token has been configured.

    Raises:
        ConfigurationError: If the token is still the placeholder value
    """
    if config.api_token == PLACEHOLDER_API_TOKEN or not config.api_token:
        logger.warning("API token not configured, set BRIGHT_DATA_API_TOKEN")
        raise ConfigurationError("API token not configured")


def find_configuration_issues(config: Configuration) -> List[str]:
    """
    List problems that would make a run fail or misbehave.

    Returns:
        List[str]: Human-readable issues, empty when the configuration is usable
    """
    issues = []

    if config.api_token == PLACEHOLDER_API_TOKEN or not config.api_token:
        issues.append("BRIGHT_DATA_API_TOKEN is not set")

    if config.bucket == PLACEHOLDER_BUCKET or not config.bucket:
        issues.append("AWS_S3_BUCKET is not set")

    if bool(config.access_key_id) != bool(config.secret_access_key):
        issues.append(
            "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together"
        )

    return issues


def _mask(secret: Optional[str]) -> str:
    if not secret:
        return "not set"
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


def describe_configuration(config: Configuration) -> Dict[str, Any]:
    """
    Get a printable view of a configuration with secrets masked.

    Args:
        config: Configuration to describe

    Returns:
        Dict[str, Any]: Configuration information
    """
    return {
        "target_url": config.target_url,
        "zone": config.zone,
        "format": config.format.value,
        "api_url": config.api_url,
        "request_timeout": config.request_timeout,
        "api_token": _mask(config.api_token),
        "bucket": config.bucket,
        "region": config.region,
        "credentials": (
            "explicit" if config.has_explicit_credentials else "ambient"
        ),
        "access_key_id": _mask(config.access_key_id),
    }
