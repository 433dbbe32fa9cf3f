"""Tests for planner configuration."""

from hktransit_mcp.data.config import PlannerConfig, get_planner_config


def test_defaults(monkeypatch):
    for var in [
        "HKT_JOURNEY_CACHE_TTL",
        "HKT_CACHE_KEY_PRECISION",
        "HKT_ROUTE_SEED",
        "HKT_SURFACE_COMPANIES",
    ]:
        monkeypatch.delenv(var, raising=False)

    config = PlannerConfig(_env_file=None)

    assert config.journey_cache_ttl_seconds == 900
    assert config.short_trip_threshold_meters == 600
    assert config.rail_search_radius_meters == 800
    assert config.surface_search_radius_meters == 600
    assert config.max_results == 5
    assert config.cache_key_precision is None
    assert config.route_seed is None
    assert config.surface_companies == ["KMB", "GMB"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HKT_JOURNEY_CACHE_TTL", "60")
    monkeypatch.setenv("HKT_CACHE_KEY_PRECISION", "4")
    monkeypatch.setenv("HKT_ROUTE_SEED", "42")

    config = PlannerConfig(_env_file=None)

    assert config.journey_cache_ttl_seconds == 60
    assert config.cache_key_precision == 4
    assert config.route_seed == 42


def test_surface_companies_from_environment(monkeypatch):
    monkeypatch.setenv("HKT_SURFACE_COMPANIES", '["kmb"]')

    config = PlannerConfig(_env_file=None)

    assert config.surface_companies == ["KMB"]


def test_get_planner_config_is_cached():
    get_planner_config.cache_clear()
    assert get_planner_config() is get_planner_config()
    get_planner_config.cache_clear()
