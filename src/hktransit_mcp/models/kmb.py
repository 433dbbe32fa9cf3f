"""Pydantic models for the KMB open data API."""

from pydantic import BaseModel

from hktransit_mcp.models.transit import Coordinate, TransitStop, TransportMode

KMB_COMPANY = "KMB"


class KMBStop(BaseModel):
    """One record from the KMB stop list.

    Coordinates arrive as strings and are coerced to floats.
    """

    stop: str
    name_en: str
    name_tc: str | None = None
    name_sc: str | None = None
    lat: float
    long: float
    data_timestamp: str | None = None

    def to_transit_stop(self) -> TransitStop:
        names = {"en": self.name_en}
        if self.name_tc:
            names["zh-Hant"] = self.name_tc
        if self.name_sc:
            names["zh-Hans"] = self.name_sc
        return TransitStop(
            id=self.stop,
            display_name_by_locale=names,
            coordinate=Coordinate(latitude=self.lat, longitude=self.long),
            mode=TransportMode.SURFACE,
            company=KMB_COMPANY,
        )


class KMBStopListResponse(BaseModel):
    """Envelope returned by the /stop endpoint."""

    type: str | None = None
    version: str | None = None
    generated_timestamp: str | None = None
    data: list[KMBStop]
