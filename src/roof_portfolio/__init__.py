"""Multi-building selection and solar aggregation."""

from roof_portfolio.registry import AggregatedResult, BuildingEntry, BuildingRegistry, Detachable
from roof_portfolio.utils.insights import BuildingInsights, LatLng, parse_building_insights

__version__ = "1.0.0"

__all__ = [
    "AggregatedResult",
    "BuildingEntry",
    "BuildingRegistry",
    "BuildingInsights",
    "Detachable",
    "LatLng",
    "parse_building_insights",
]
