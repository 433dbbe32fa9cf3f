from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlannerConfig(BaseSettings):
    """Configuration for data sources, caches and journey planning.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Surface-transit data (KMB and GMB open data APIs)
    surface_companies: list[str] = Field(
        default_factory=lambda: ["KMB", "GMB"], alias="HKT_SURFACE_COMPANIES"
    )
    kmb_stop_url: str = "https://data.etabus.gov.hk/v1/transport/kmb/stop"
    gmb_stop_url: str = "https://data.etagmb.gov.hk/stop"
    http_timeout_seconds: float = Field(default=30.0, alias="HKT_HTTP_TIMEOUT")

    # Caches
    journey_cache_ttl_seconds: float = Field(default=15 * 60, alias="HKT_JOURNEY_CACHE_TTL")
    transit_data_ttl_seconds: float = Field(default=24 * 60 * 60, alias="HKT_TRANSIT_DATA_TTL")
    cache_key_precision: int | None = Field(default=None, alias="HKT_CACHE_KEY_PRECISION")

    # Planning thresholds (meters unless noted)
    short_trip_threshold_meters: float = 600.0
    rail_search_radius_meters: float = 800.0
    surface_search_radius_meters: float = 600.0
    nearest_candidates: int = 3
    surface_min_leg_meters: float = 500.0
    surface_max_leg_meters: float = 15_000.0

    # Interchange discovery
    interchange_walk_radius_meters: float = 300.0
    min_interchanges: int = 5
    max_interchanges: int = 10
    mixed_interchanges_tried: int = 3
    interchange_allowlist_path: Path | None = Field(
        default=None, alias="HKT_INTERCHANGE_ALLOWLIST"
    )

    # Ranking
    dedup_window_minutes: int = 5
    max_results: int = 5

    # Seed for the advisory surface-route approximation (None = unseeded)
    route_seed: int | None = Field(default=None, alias="HKT_ROUTE_SEED")

    @field_validator("surface_companies")
    @classmethod
    def _upper_companies(cls, companies: list[str]) -> list[str]:
        return [company.strip().upper() for company in companies]


@lru_cache
def get_planner_config() -> PlannerConfig:
    """Get planner configuration (cached singleton).

    Returns:
        PlannerConfig with values from .env file or environment variables.
    """
    return PlannerConfig()
