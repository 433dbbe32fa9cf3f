import httpx

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.models.kmb import KMBStopListResponse
from hktransit_mcp.models.transit import TransitStop


class KMBClient:
    """Async HTTP client for the KMB bus stop list.

    Usage:
        async with KMBClient(config) as client:
            stops = await client.fetch_all_stops()
    """

    def __init__(self, config: PlannerConfig):
        """Initialize the client.

        Args:
            config: Configuration with the stop list URL and timeout.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "KMBClient":
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
        """Fetch and parse every KMB stop.

        Returns:
            Surface stops annotated with company KMB.

        Raises:
            RuntimeError: If client not initialized.
            httpx.HTTPError: If the HTTP request fails.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        response = await self._client.get(self._config.kmb_stop_url)
        response.raise_for_status()

        payload = KMBStopListResponse.model_validate(response.json())
        return [record.to_transit_stop() for record in payload.data]

