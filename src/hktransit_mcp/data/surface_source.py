"""Surface-stop collaborator: every configured bus and minibus operator."""

import asyncio
import logging

from hktransit_mcp.data.config import PlannerConfig, get_planner_config
from hktransit_mcp.data.gmb_client import GMBClient
from hktransit_mcp.data.kmb_client import KMBClient
from hktransit_mcp.models.transit import TransitStop

logger = logging.getLogger(__name__)

SURFACE_CLIENTS: dict[str, type[KMBClient] | type[GMBClient]] = {
    "KMB": KMBClient,
    "GMB": GMBClient,
}


async def _fetch_company(company: str, config: PlannerConfig) -> list[TransitStop]:
    async with SURFACE_CLIENTS[company](config) as client:
        stops = await client.fetch_all_stops()
    logger.info(f"Fetched {len(stops)} {company} stops")
    return stops


async def fetch_all_surface_stops(config: PlannerConfig | None = None) -> list[TransitStop]:
    """Fetch the complete surface-stop snapshot.

    Operators are fetched concurrently and merged in configured order. Any
    failure fails the whole fetch; no partial stop list is returned.

    Raises:
        ValueError: If a configured operator has no client.
        httpx.HTTPError: If any operator's request fails.
    """
    config = config or get_planner_config()
    unknown = [company for company in config.surface_companies if company not in SURFACE_CLIENTS]
    if unknown:
        raise ValueError(f"No stop list client for surface operators: {', '.join(unknown)}")

    batches = await asyncio.gather(
        *(_fetch_company(company, config) for company in config.surface_companies)
    )

    stops: list[TransitStop] = []
    seen: set[tuple[str, str]] = set()
    for stop in (stop for batch in batches for stop in batch):
        key = (stop.company, stop.id)
        if key in seen:
            continue
        seen.add(key)
        stops.append(stop)
    return stops
