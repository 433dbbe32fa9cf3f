"""Construction of single journey legs with estimated distance and duration."""

import math
import random

from hktransit_mcp.models.transit import JourneyLeg, TransitStop, TransportMode
from hktransit_mcp.services.geo import distance

# Average speeds in meters per minute
WALK_SPEED = 80
RAIL_SPEED = 800  # includes dwell time at intermediate stations
SURFACE_SPEED = 250

# Distance buckets for the advisory route approximation
SHORT_ROUTE_MAX_METERS = 3_000
MEDIUM_ROUTE_MAX_METERS = 8_000

# Known KMB route numbers, grouped by typical trip length
SURFACE_ROUTE_CATALOG: dict[str, tuple[str, ...]] = {
    "short": ("1", "1A", "5", "5C", "6"),
    "medium": ("7", "9", "11K"),
    "long": ("11X", "40X"),
}


def estimate_minutes(meters: float, speed: float) -> int:
    """Whole minutes needed to cover ``meters`` at ``speed``, rounded up."""
    return math.ceil(meters / speed)


def route_bucket(meters: float) -> str:
    if meters < SHORT_ROUTE_MAX_METERS:
        return "short"
    if meters < MEDIUM_ROUTE_MAX_METERS:
        return "medium"
    return "long"


class LegSynthesizer:
    """Builds WALK, RAIL and SURFACE legs between two stops.

    The random generator only affects approximate_surface_route(); pass a
    seeded ``random.Random`` for reproducible labels.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def walk_leg(self, from_stop: TransitStop, to_stop: TransitStop) -> JourneyLeg:
        meters = distance(from_stop.coordinate, to_stop.coordinate)
        return JourneyLeg(
            type=TransportMode.WALK,
            from_stop=from_stop,
            to_stop=to_stop,
            distance_meters=meters,
            duration_minutes=estimate_minutes(meters, WALK_SPEED),
        )

    def rail_leg(self, from_stop: TransitStop, to_stop: TransitStop, line_code: str) -> JourneyLeg:
        meters = distance(from_stop.coordinate, to_stop.coordinate)
        return JourneyLeg(
            type=TransportMode.RAIL,
            from_stop=from_stop,
            to_stop=to_stop,
            distance_meters=meters,
            duration_minutes=estimate_minutes(meters, RAIL_SPEED),
            route_identifier=line_code,
            company_identifier=from_stop.company or None,
        )

    def surface_leg(
        self,
        from_stop: TransitStop,
        to_stop: TransitStop,
        route_identifier: str | None,
        company_identifier: str | None,
        advisory: bool = False,
    ) -> JourneyLeg:
        meters = distance(from_stop.coordinate, to_stop.coordinate)
        return JourneyLeg(
            type=TransportMode.SURFACE,
            from_stop=from_stop,
            to_stop=to_stop,
            distance_meters=meters,
            duration_minutes=estimate_minutes(meters, SURFACE_SPEED),
            route_identifier=route_identifier,
            company_identifier=company_identifier,
            route_is_advisory=advisory,
        )

    def approximate_surface_route(self, from_stop: TransitStop, to_stop: TransitStop) -> str:
        """Pick a plausible route number for a leg of this length.

        This is a stand-in for a real schedule lookup. The label is advisory
        and must not be presented as the actual route serving both stops.
        """
        bucket = route_bucket(distance(from_stop.coordinate, to_stop.coordinate))
        return self._rng.choice(SURFACE_ROUTE_CATALOG[bucket])

    def advisory_surface_leg(self, from_stop: TransitStop, to_stop: TransitStop) -> JourneyLeg:
        """Surface leg labelled with an approximated route number."""
        return self.surface_leg(
            from_stop,
            to_stop,
            route_identifier=self.approximate_surface_route(from_stop, to_stop),
            company_identifier=from_stop.company or None,
            advisory=True,
        )
