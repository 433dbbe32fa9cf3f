"""Pydantic models for the green minibus (GMB) open data API."""

from pydantic import BaseModel

from hktransit_mcp.models.transit import Coordinate, TransitStop, TransportMode

GMB_COMPANY = "GMB"

# Records outside this box are geocoding errors in the published data
HK_LATITUDE_RANGE = (22.1, 22.6)
HK_LONGITUDE_RANGE = (113.8, 114.4)


class GMBPosition(BaseModel):
    latitude: float
    longitude: float


class GMBCoordinates(BaseModel):
    wgs84: GMBPosition


class GMBStop(BaseModel):
    """One record from the GMB stop list."""

    stop_id: int | str
    name_en: str | None = None
    name_tc: str | None = None
    name_sc: str | None = None
    coordinates: GMBCoordinates

    @property
    def in_hong_kong(self) -> bool:
        position = self.coordinates.wgs84
        return (
            HK_LATITUDE_RANGE[0] <= position.latitude <= HK_LATITUDE_RANGE[1]
            and HK_LONGITUDE_RANGE[0] <= position.longitude <= HK_LONGITUDE_RANGE[1]
        )

    def to_transit_stop(self) -> TransitStop:
        stop_id = str(self.stop_id)
        names = {"en": self.name_en or self.name_tc or stop_id}
        if self.name_tc:
            names["zh-Hant"] = self.name_tc
        if self.name_sc:
            names["zh-Hans"] = self.name_sc
        position = self.coordinates.wgs84
        return TransitStop(
            id=stop_id,
            display_name_by_locale=names,
            coordinate=Coordinate(latitude=position.latitude, longitude=position.longitude),
            mode=TransportMode.SURFACE,
            company=GMB_COMPANY,
        )


class GMBStopListResponse(BaseModel):
    """Envelope returned by the /stop endpoint."""

    type: str | None = None
    version: str | None = None
    generated_timestamp: str | None = None
    data: list[GMBStop]
