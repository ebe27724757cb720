"""
Web Unlocker client for Unlocker Store.

This module sends a single request through the Bright Data Web Unlocker
API and returns the decoded body: parsed JSON for the json format, text
for the raw format. There is no retry: one attempt, and any failure is
raised to the caller.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import structlog
from aiohttp import ClientSession, ClientTimeout
from aiohttp.client_exceptions import ClientError

from ..config.config_loader import ensure_api_token
from ..exceptions import RemoteRequestError, TransportError
from ..models.pipeline import Configuration, DataFormat

logger = structlog.get_logger(__name__)


class UnlockerClient:
    """
    Client for the Web Unlocker request endpoint.
    """

    def __init__(self, timeout: float = 60.0):
        """
        Initialize the unlocker client.

        Args:
            timeout: Total timeout for a request in seconds
        """
        self.timeout = timeout
        self.session: Optional[ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = ClientSession(timeout=ClientTimeout(total=self.timeout))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch(self, config: Configuration) -> Any:
        """
        Fetch the configured target URL through the unlocker.

        Args:
            config: Run configuration

        Returns:
            Any: Decoded JSON response body, or the page text for raw format

        Raises:
            ConfigurationError: If the API token is the placeholder
            RemoteRequestError: If the API answers with a non-2xx status
                or a body that cannot be decoded
            TransportError: If the API cannot be reached
        """
        ensure_api_token(config)

        if self.session is None:
            async with self:
                return await self._post(config)
        return await self._post(config)

    async def _post(self, config: Configuration) -> Any:
        headers = self._build_headers(config)
        body = self._build_request_body(config)

        logger.info(
            "Fetching through unlocker",
            target_url=config.target_url,
            zone=config.zone,
            format=config.format.value,
        )

        try:
            async with self.session.post(
                config.api_url,
                headers=headers,
                json=body,
                timeout=ClientTimeout(total=config.request_timeout),
            ) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    logger.error(
                        "Unlocker request failed",
                        status=response.status,
                        response=error_text[:200],
                    )
                    raise RemoteRequestError(
                        f"HTTP error! Status: {response.status}",
                        status_code=response.status,
                        details={"body": error_text[:500]},
                    )

                data = self._decode_body(
                    await response.read(), response.status, config.format
                )

                logger.info(
                    "Request successful",
                    status=response.status,
                    data_size=len(str(data)),
                )
                return data

        except (ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.error(
                "Error fetching data", target_url=config.target_url, error=reason
            )
            raise TransportError(f"Request to {config.api_url} failed: {reason}") from e

    def _decode_body(self, content: bytes, status: int, data_format: DataFormat) -> Any:
        """
        Decode a successful response body.

        JSON bodies are parsed, raw bodies are returned as text. An empty
        JSON body is an error, not a null payload.
        """
        try:
            text = content.decode("utf-8")
            if data_format == DataFormat.RAW:
                return text
            return json.loads(text)
        except ValueError as e:
            logger.error(
                "Unlocker response could not be decoded",
                status=status,
                format=data_format.value,
                error=str(e),
            )
            label = "JSON" if data_format == DataFormat.JSON else "text"
            raise RemoteRequestError(
                f"Invalid {label} in response: {e}", status_code=status
            ) from e

    def _build_headers(self, config: Configuration) -> Dict[str, str]:
        """Build bearer authorization headers."""
        return {
            "Authorization": f"Bearer {config.api_token}",
            "Content-Type": "application/json",
        }

    def _build_request_body(self, config: Configuration) -> Dict[str, str]:
        """Build the unlocker request body."""
        return {
            "zone": config.zone,
            "url": config.target_url,
            "format": config.format.value,
        }


async def fetch(config: Configuration) -> Any:
    """Fetch the configured target with a one-off client."""
    return await UnlockerClient(timeout=config.request_timeout).fetch(config)
