"""Shared fixtures for roof_portfolio tests."""

import copy
from typing import Any, Dict

import pytest

from roof_portfolio import config as config_module
from roof_portfolio.registry import BuildingRegistry
from roof_portfolio.utils.insights import BuildingInsights, LatLng, parse_building_insights


SAMPLE_PAYLOAD: Dict[str, Any] = {
    "name": "buildings/ChIJtest",
    "center": {"latitude": 37.4419, "longitude": -122.143},
    "boundingBox": {
        "sw": {"latitude": 37.4418, "longitude": -122.1431},
        "ne": {"latitude": 37.442, "longitude": -122.1429},
    },
    "imageryDate": {"year": 2023, "month": 6, "day": 15},
    "imageryProcessedDate": {"year": 2023, "month": 7, "day": 1},
    "postalCode": "94301",
    "administrativeArea": "CA",
    "regionCode": "US",
    "imageryQuality": "HIGH",
    "solarPotential": {
        "maxArrayPanelsCount": 100,
        "panelCapacityWatts": 400,
        "panelHeightMeters": 2,
        "panelWidthMeters": 1,
        "panelLifetimeYears": 25,
        "maxArrayAreaMeters2": 200,
        "maxSunshineHoursPerYear": 2000,
        "carbonOffsetFactorKgPerMwh": 428,
        "wholeRoofStats": {
            "areaMeters2": 250,
            "sunshineQuantiles": [1800, 1900, 2000],
            "groundAreaMeters2": 250,
        },
        "solarPanelConfigs": [
            {"panelsCount": 50, "yearlyEnergyDcKwh": 20000, "roofSegmentSummaries": []},
            {"panelsCount": 75, "yearlyEnergyDcKwh": 30000, "roofSegmentSummaries": []},
            {"panelsCount": 100, "yearlyEnergyDcKwh": 40000, "roofSegmentSummaries": []},
        ],
    },
}


@pytest.fixture(autouse=True)
def default_config():
    """Run every test against a fresh default configuration."""
    yield config_module.reset_config()
    config_module.reset_config()


@pytest.fixture
def payload() -> Dict[str, Any]:
    """Deep copy of the sample provider payload, safe to modify."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def insights(payload) -> BuildingInsights:
    return parse_building_insights(payload)


@pytest.fixture
def location_a() -> LatLng:
    return LatLng(37.4419, -122.143)


@pytest.fixture
def location_b() -> LatLng:
    return LatLng(37.442, -122.1431)


@pytest.fixture
def registry() -> BuildingRegistry:
    return BuildingRegistry()
