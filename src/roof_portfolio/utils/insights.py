"""Value objects for building insights returned by the solar data provider.

The provider answers with a camelCase JSON document (Google Solar API
``buildingInsights``). Only the figures needed for selection and
aggregation are modelled here; everything else in the payload is ignored.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .constants import IMAGERY_QUALITIES

logger = logging.getLogger(__name__)


def planar_distance(lat_a, lng_a, lat_b, lng_b):
    """
    Distance in degrees as sqrt(dlat² + dlng²), with no latitude correction.

    Works on plain floats and on numpy arrays alike.
    """
    lat_diff = np.abs(np.subtract(lat_a, lat_b))
    lng_diff = np.abs(np.subtract(lng_a, lng_b))
    return np.sqrt(lat_diff * lat_diff + lng_diff * lng_diff)


class SolarApiError(ValueError):
    """Error envelope returned by the solar data provider."""

    def __init__(self, code: int, status: str, message: str):
        super().__init__(f"[{code}] {status}: {message}")
        self.code = code
        self.status = status
        self.message = message


@dataclass(frozen=True)
class LatLng:
    """Latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    def distance_to(self, other: "LatLng") -> float:
        """
        Planar distance to another point, in degrees.

        This is sqrt(dlat² + dlng²) with no latitude correction, so it is
        only meaningful for very small distances.
        """
        return float(planar_distance(self.latitude, self.longitude, other.latitude, other.longitude))

    def as_tuple(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatLng":
        return cls(
            latitude=float(_require(data, "latitude")),
            longitude=float(_require(data, "longitude")),
        )


@dataclass(frozen=True)
class RoofStats:
    """Area and sunshine statistics for a roof or building."""

    area_meters2: float
    sunshine_quantiles: Tuple[float, ...] = ()
    ground_area_meters2: float = 0.0


@dataclass(frozen=True)
class SolarPanelConfig:
    """One panel layout option: how many panels and what they yield."""

    panels_count: int
    yearly_energy_dc_kwh: float


@dataclass(frozen=True)
class SolarPotential:
    """Building-level solar figures plus the available panel configurations."""

    max_array_panels_count: int
    max_array_area_meters2: float
    panel_capacity_watts: float
    carbon_offset_factor_kg_per_mwh: float
    whole_roof_stats: RoofStats
    solar_panel_configs: Tuple[SolarPanelConfig, ...] = ()
    panel_height_meters: Optional[float] = None
    panel_width_meters: Optional[float] = None
    panel_lifetime_years: Optional[int] = None
    max_sunshine_hours_per_year: Optional[float] = None


@dataclass(frozen=True)
class BuildingInsights:
    """Solar potential dataset for a single building."""

    name: str
    center: LatLng
    solar_potential: SolarPotential
    imagery_date: Optional[date] = None
    imagery_quality: Optional[str] = None
    postal_code: Optional[str] = None
    region_code: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def solar_panel_configs(self) -> Tuple[SolarPanelConfig, ...]:
        return self.solar_potential.solar_panel_configs


def _require(data: Dict[str, Any], key: str) -> Any:
    """Fetch a required key, naming it in the error when missing."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object containing '{key}', got {type(data).__name__}")
    if key not in data or data[key] is None:
        raise ValueError(f"Building insights payload is missing '{key}'")
    return data[key]


def parse_date(data: Optional[Dict[str, Any]]) -> Optional[date]:
    """
    Convert a provider ``{year, month, day}`` object to a date.

    Args:
        data: Date object as returned by the provider, or None

    Returns:
        The date, or None when no date was supplied

    Raises:
        ValueError: If the fields are missing or do not form a valid calendar date
    """
    if not data:
        return None
    return date(
        int(_require(data, "year")),
        int(_require(data, "month")),
        int(_require(data, "day")),
    )


def _optional_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    return float(value) if value is not None else None


def _parse_roof_stats(data: Dict[str, Any]) -> RoofStats:
    return RoofStats(
        area_meters2=float(_require(data, "areaMeters2")),
        sunshine_quantiles=tuple(float(q) for q in data.get("sunshineQuantiles", [])),
        ground_area_meters2=float(data.get("groundAreaMeters2", 0.0)),
    )


def _parse_panel_config(data: Dict[str, Any]) -> SolarPanelConfig:
    return SolarPanelConfig(
        panels_count=int(_require(data, "panelsCount")),
        yearly_energy_dc_kwh=float(_require(data, "yearlyEnergyDcKwh")),
    )


def _parse_solar_potential(data: Dict[str, Any]) -> SolarPotential:
    configs = sorted(
        (_parse_panel_config(c) for c in data.get("solarPanelConfigs", [])),
        key=lambda c: c.yearly_energy_dc_kwh,
    )
    lifetime = data.get("panelLifetimeYears")

    return SolarPotential(
        max_array_panels_count=int(_require(data, "maxArrayPanelsCount")),
        max_array_area_meters2=float(_require(data, "maxArrayAreaMeters2")),
        panel_capacity_watts=float(_require(data, "panelCapacityWatts")),
        carbon_offset_factor_kg_per_mwh=float(_require(data, "carbonOffsetFactorKgPerMwh")),
        whole_roof_stats=_parse_roof_stats(_require(data, "wholeRoofStats")),
        solar_panel_configs=tuple(configs),
        panel_height_meters=_optional_float(data, "panelHeightMeters"),
        panel_width_meters=_optional_float(data, "panelWidthMeters"),
        panel_lifetime_years=int(lifetime) if lifetime is not None else None,
        max_sunshine_hours_per_year=_optional_float(data, "maxSunshineHoursPerYear"),
    )


def parse_building_insights(payload: Dict[str, Any]) -> BuildingInsights:
    """
    Build a BuildingInsights object from the provider's JSON response.

    Args:
        payload: Decoded JSON body of a ``buildingInsights:findClosest`` call

    Returns:
        BuildingInsights with configurations ordered by ascending yearly yield

    Raises:
        SolarApiError: If the payload is an error envelope
        ValueError: If a required field is missing or malformed
    """
    if isinstance(payload, dict) and "error" in payload:
        error = payload["error"] or {}
        if not isinstance(error, dict):
            raise SolarApiError(code=0, status="UNKNOWN", message=str(error))
        raise SolarApiError(
            code=int(error.get("code", 0)),
            status=str(error.get("status", "UNKNOWN")),
            message=str(error.get("message", "")),
        )

    solar_potential = _parse_solar_potential(_require(payload, "solarPotential"))
    quality = payload.get("imageryQuality")
    if quality is not None and quality not in IMAGERY_QUALITIES:
        logger.warning(f"Unexpected imagery quality: {quality}")
    known = {
        "name", "center", "solarPotential", "imageryDate",
        "imageryQuality", "postalCode", "regionCode",
    }

    insights = BuildingInsights(
        name=str(payload.get("name", "")),
        center=LatLng.from_dict(_require(payload, "center")),
        solar_potential=solar_potential,
        imagery_date=parse_date(payload.get("imageryDate")),
        imagery_quality=quality,
        postal_code=payload.get("postalCode"),
        region_code=payload.get("regionCode"),
        extra={k: v for k, v in payload.items() if k not in known},
    )
    logger.debug(
        f"Parsed insights for {insights.name or 'unnamed building'}: "
        f"{len(solar_potential.solar_panel_configs)} panel configurations"
    )
    return insights
