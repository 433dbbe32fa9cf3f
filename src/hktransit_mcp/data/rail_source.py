"""Packaged MTR station table, line topology and interchange allow-list."""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from hktransit_mcp.models.transit import Coordinate, RailStation

logger = logging.getLogger(__name__)

ASSET_PACKAGE = "hktransit_mcp.data"


def _read_asset(name: str) -> Any:
    asset = resources.files(ASSET_PACKAGE).joinpath("assets").joinpath(name)
    return json.loads(asset.read_text(encoding="utf-8"))


def load_mtr_stations() -> list[RailStation]:
    """Load every MTR station from the packaged table."""
    raw = _read_asset("mtr_stations.json")
    company = raw["company"]
    return [
        RailStation(
            id=row["id"],
            display_name_by_locale={
                "en": row["name_en"],
                "zh-Hant": row["name_tc"],
                "zh-Hans": row["name_sc"],
            },
            coordinate=Coordinate(latitude=row["lat"], longitude=row["lon"]),
            company=company,
            line_codes=tuple(row["line_codes"]),
        )
        for row in raw["stations"]
    ]


def load_mtr_lines() -> dict[str, list[list[str]]]:
    """Line code -> ordered station sequences, one per branch."""
    return _read_asset("mtr_lines.json")["lines"]


def load_interchange_allowlist(path: Path | None = None) -> dict[str, list[str]]:
    """Curated rail station id -> surface stop ids usable as transfer points.

    Args:
        path: Optional JSON file overriding the packaged allow-list. Same
              shape: {"interchanges": {"ADM": ["<stop id>", ...]}}.
    """
    if path is None:
        raw = _read_asset("interchanges.json")
    else:
        raw = json.loads(path.read_text(encoding="utf-8"))
    allowlist = {station: list(stops) for station, stops in raw["interchanges"].items()}
    logger.debug(f"Loaded interchange allow-list for {len(allowlist)} stations")
    return allowlist


async def fetch_all_rail_stations() -> list[RailStation]:
    """Return the complete rail-station snapshot."""
    stations = load_mtr_stations()
    logger.info(f"Loaded {len(stations)} MTR stations")
    return stations
