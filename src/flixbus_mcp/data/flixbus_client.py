import logging

import httpx
from pydantic import ValidationError

from flixbus_mcp.data.config import FlixbusConfig
from flixbus_mcp.models.errors import MalformedResponse, TransportError
from flixbus_mcp.models.flixbus import NetworkResponse

logger = logging.getLogger(__name__)


class FlixbusClient:
    """Async HTTP client for the meinfernbus mobile API.

    Usage:
        async with FlixbusClient(config) as client:
            body = await client.fetch(url)
    """

    def __init__(self, config: FlixbusConfig):
        """Initialize the client.

        Args:
            config: Configuration with API key, base URL and timeout.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FlixbusClient":
        """Enter async context - create HTTP client."""
        headers = {}
        if self._config.api_key:
            headers["X-API-Authentication"] = self._config.api_key
        self._client = httpx.AsyncClient(
            headers=headers, timeout=self._config.request_timeout_seconds
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> bytes:
        """GET a URL and return the raw body.

        Raises:
            RuntimeError: If client not initialized.
            TransportError: If the request fails or returns a non-2xx status.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        logger.debug(f"GET {url}")
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        return response.content

    async def fetch_network(self) -> NetworkResponse:
        """Fetch and parse the station list.

        Raises:
            TransportError: If the request fails.
            MalformedResponse: If the body is not a station list document.
        """
        url = self._config.network_url
        body = await self.fetch(url)
        try:
            return NetworkResponse.model_validate_json(body)
        except ValidationError as e:
            raise MalformedResponse(f"Cannot parse station list from {url}: {e}") from e
