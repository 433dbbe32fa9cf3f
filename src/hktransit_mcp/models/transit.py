"""Pydantic models for stops, legs and journeys."""

import math
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, computed_field, model_validator


class TransportMode(str, Enum):
    """Mode of a stop or of a journey leg."""

    WALK = "WALK"
    RAIL = "RAIL"
    SURFACE = "SURFACE"


class Coordinate(BaseModel):
    """WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """True if both values are finite and within geographic range."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90 <= self.latitude <= 90
            and -180 <= self.longitude <= 180
        )


class TransitStop(BaseModel):
    """A place a journey leg can start or end at."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique within its network")
    display_name_by_locale: dict[str, str] = Field(
        default_factory=dict, description="Locale code (en, zh-Hant, zh-Hans) -> name"
    )
    coordinate: Coordinate
    mode: TransportMode
    company: str = ""

    @property
    def name(self) -> str:
        """Best display name, English first."""
        if "en" in self.display_name_by_locale:
            return self.display_name_by_locale["en"]
        return next(iter(self.display_name_by_locale.values()), self.id)


class RailStation(TransitStop):
    """Rail station served by one or more lines."""

    mode: TransportMode = TransportMode.RAIL
    line_codes: tuple[str, ...] = Field(
        default=(), description="Lines serving the station, in declared order"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_interchange(self) -> bool:
        return len(self.line_codes) >= 2


class JourneyLeg(BaseModel):
    """One atomic segment of a journey. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    type: TransportMode
    from_stop: SerializeAsAny[TransitStop]
    to_stop: SerializeAsAny[TransitStop]
    distance_meters: float
    duration_minutes: int = Field(description="Ceiling of distance / mode speed")
    route_identifier: str | None = None
    company_identifier: str | None = None
    route_is_advisory: bool = Field(
        default=False,
        description="Route label is an approximation, not a schedule lookup",
    )


class Journey(BaseModel):
    """An ordered, contiguous chain of legs from origin to destination."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    legs: tuple[JourneyLeg, ...]
    total_distance_meters: float
    total_duration_minutes: int
    indoor_protected: bool = Field(description="True if the majority of legs are RAIL")

    @classmethod
    def from_legs(cls, legs: list[JourneyLeg] | tuple[JourneyLeg, ...]) -> "Journey":
        """Build a journey, deriving totals and indoor protection from the legs.

        Raises:
            ValueError: If legs is empty or the legs do not form a chain.
        """
        legs = tuple(legs)
        rail_legs = sum(1 for leg in legs if leg.type is TransportMode.RAIL)
        return cls(
            legs=legs,
            total_distance_meters=sum(leg.distance_meters for leg in legs),
            total_duration_minutes=sum(leg.duration_minutes for leg in legs),
            indoor_protected=rail_legs * 2 > len(legs),
        )

    @model_validator(mode="after")
    def _check_chain(self) -> "Journey":
        if not self.legs:
            raise ValueError("A journey must have at least one leg")
        for current, following in zip(self.legs, self.legs[1:]):
            if (
                current.to_stop.id != following.from_stop.id
                or current.to_stop.coordinate != following.from_stop.coordinate
            ):
                raise ValueError(
                    f"Legs are not contiguous: {current.to_stop.id} -> {following.from_stop.id}"
                )
        if self.total_duration_minutes != sum(leg.duration_minutes for leg in self.legs):
            raise ValueError("total_duration_minutes does not match the legs")
        if self.total_distance_meters != sum(leg.distance_meters for leg in self.legs):
            raise ValueError("total_distance_meters does not match the legs")
        return self

    @property
    def modes(self) -> list[TransportMode]:
        return [leg.type for leg in self.legs]


class InterchangePoint(BaseModel):
    """A rail station and surface stop close enough to walk between."""

    model_config = ConfigDict(frozen=True)

    rail_station: RailStation
    surface_stop: TransitStop
    walk_distance_meters: float
