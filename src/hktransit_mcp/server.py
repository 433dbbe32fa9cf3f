import argparse
import asyncio
import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from hktransit_mcp.app import mcp

# Register tools
from hktransit_mcp.tools import journey_tools, stop_tools  # noqa: F401


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


@mcp.tool()
def health() -> HealthResponse:
    """Check if the HK Transit MCP server is running and healthy.

    Returns the server status, version, and current timestamp.
    """
    from hktransit_mcp import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


async def run_plan(
    origin_lat: float, origin_lon: float, destination_lat: float, destination_lon: float
) -> None:
    """Plan a journey and print the itineraries."""
    from hktransit_mcp.services.planner_service import plan_journey_between

    response = await plan_journey_between(origin_lat, origin_lon, destination_lat, destination_lon)
    if not response.success:
        print(f"Error: {response.error}")
        return

    print(f"\n{response.count} journeys found:")
    for index, journey in enumerate(response.journeys, start=1):
        modes = " > ".join(mode.value for mode in journey.modes)
        print(
            f"\n{index}. {journey.total_duration_minutes} min, "
            f"{journey.total_distance_meters / 1000:.1f} km ({modes})"
        )
        for leg in journey.legs:
            route = f" {leg.route_identifier}" if leg.route_identifier else ""
            approx = " (approx.)" if leg.route_is_advisory else ""
            print(
                f"   {leg.type.value}{route}{approx}: {leg.from_stop.name} -> "
                f"{leg.to_stop.name}, {leg.duration_minutes} min"
            )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="hktransit-mcp",
        description="HK Transit MCP Server",
    )
    subparsers = parser.add_subparsers(dest="command")

    # plan command
    plan_parser = subparsers.add_parser(
        "plan",
        help="Plan a journey between two coordinates and print it",
    )
    plan_parser.add_argument("origin_lat", type=float, help="Origin latitude")
    plan_parser.add_argument("origin_lon", type=float, help="Origin longitude")
    plan_parser.add_argument("destination_lat", type=float, help="Destination latitude")
    plan_parser.add_argument("destination_lon", type=float, help="Destination longitude")
    plan_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.command == "plan":
        # Configure logging
        log_level = logging.DEBUG if args.verbose else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        asyncio.run(
            run_plan(args.origin_lat, args.origin_lon, args.destination_lat, args.destination_lon)
        )
    else:
        # Default: run MCP server
        mcp.run()


if __name__ == "__main__":
    main()
