import logging

import httpx

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.models.gmb import GMBStopListResponse
from hktransit_mcp.models.transit import TransitStop

logger = logging.getLogger(__name__)


class GMBClient:
    """Async HTTP client for the green minibus stop list.

    Usage:
        async with GMBClient(config) as client:
            stops = await client.fetch_all_stops()
    """

    def __init__(self, config: PlannerConfig):
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GMBClient":
        """Enter async context - create HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=self._config.http_timeout_seconds,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_all_stops(self) -> list[TransitStop]:
        """Fetch and parse every GMB stop inside Hong Kong.

        Raises:
            RuntimeError: If client not initialized.
            httpx.HTTPError: If the HTTP request fails.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        response = await self._client.get(self._config.gmb_stop_url)
        response.raise_for_status()

        payload = GMBStopListResponse.model_validate(response.json())
        stops = [record.to_transit_stop() for record in payload.data if record.in_hong_kong]
        dropped = len(payload.data) - len(stops)
        if dropped:
            logger.debug(f"Dropped {dropped} GMB stops outside Hong Kong")
        return stops
