"""Registry of selected buildings and solar aggregation across the active set."""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol

import numpy as np

from roof_portfolio.config import get_config
from roof_portfolio.utils.constants import COORDINATE_DECIMALS, HOUSE_NUMBER_PATTERN, KWH_PER_MWH
from roof_portfolio.utils.insights import BuildingInsights, LatLng, SolarPanelConfig, planar_distance

# Set up logging
logger = logging.getLogger(__name__)


class Detachable(Protocol):
    """Map overlay handle owned by the rendering layer."""

    def detach(self) -> None:
        """Remove the overlay from its display surface. Must be idempotent."""
        ...


@dataclass
class BuildingEntry:
    """A selected building and its selection state."""

    id: str
    insights: BuildingInsights
    config_index: int
    location: LatLng
    address: str
    nickname: str
    boundary: Optional[Detachable] = None
    panels: List[Detachable] = field(default_factory=list)
    is_active: bool = True

    def __setattr__(self, name: str, value: Any) -> None:
        # id and insights are fixed once the entry exists
        if name in ("id", "insights") and name in self.__dict__:
            raise AttributeError(f"BuildingEntry.{name} cannot be changed after creation")
        super().__setattr__(name, value)

    def selected_config(self) -> SolarPanelConfig:
        """
        Return the panel configuration chosen by config_index.

        Raises:
            IndexError: If config_index does not address a configuration
        """
        configs = self.insights.solar_potential.solar_panel_configs
        if self.config_index < 0:
            raise IndexError(f"Configuration index {self.config_index} out of range for {self.id}")
        return configs[self.config_index]

    def detach_resources(self) -> None:
        """Tell the owner of every attached overlay to stop showing it."""
        if self.boundary is not None:
            self.boundary.detach()
        for panel in self.panels:
            panel.detach()


@dataclass
class AggregatedResult:
    """Combined solar figures across the active buildings."""

    total_panels: int = 0
    total_yearly_energy_ac: float = 0.0
    total_area: float = 0.0
    total_max_array_panels: int = 0
    total_max_array_area: float = 0.0
    total_roof_area: float = 0.0
    total_carbon_offset_per_year: float = 0.0
    average_panel_capacity_watts: float = 0.0
    buildings: List[BuildingEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "total_panels": self.total_panels,
            "total_yearly_energy_ac": self.total_yearly_energy_ac,
            "total_area": self.total_area,
            "total_max_array_panels": self.total_max_array_panels,
            "total_max_array_area": self.total_max_array_area,
            "total_roof_area": self.total_roof_area,
            "total_carbon_offset_per_year": self.total_carbon_offset_per_year,
            "average_panel_capacity_watts": self.average_panel_capacity_watts,
            "buildings": [
                {
                    "id": b.id,
                    "nickname": b.nickname,
                    "address": b.address,
                    "config_index": b.config_index,
                }
                for b in self.buildings
            ],
        }


UpdateCallback = Callable[[List[BuildingEntry]], None]


class BuildingRegistry:
    """
    Ordered collection of selected buildings.

    Every call that changes membership or an entry field hands the full
    list of entries to the update callback. Attaching overlays with
    set_panels/set_boundary does not.

    Usage:
        registry = BuildingRegistry(on_update=refresh_summary)
        building_id = registry.add(insights, LatLng(52.52, 13.405), "Hauptstr. 14a, Berlin")
        summary = registry.aggregate()
    """

    def __init__(self, on_update: Optional[UpdateCallback] = None):
        """
        Initialize an empty registry.

        Args:
            on_update: Called with all entries after every mutation
        """
        self._entries: Dict[str, BuildingEntry] = {}
        self._on_update = on_update

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, building_id: object) -> bool:
        return building_id in self._entries

    def __iter__(self) -> Iterator[BuildingEntry]:
        return iter(list(self._entries.values()))

    def add(
        self,
        insights: BuildingInsights,
        location: LatLng,
        address: str,
        config_index: int = 0,
        nickname: Optional[str] = None,
    ) -> str:
        """
        Add a building to the selection.

        Args:
            insights: Solar dataset for the building
            location: Where the building was picked
            address: Display address
            config_index: Initial panel configuration (0 = smallest)
            nickname: Display label, derived from the address when omitted

        Returns:
            The new building id
        """
        building_id = self._generate_id(location)
        entry = BuildingEntry(
            id=building_id,
            insights=insights,
            config_index=config_index,
            location=location,
            address=address,
            nickname=nickname or self._generate_nickname(address),
        )
        self._entries[building_id] = entry
        logger.debug(f"Added building {building_id} ({entry.nickname})")
        self._notify()
        return building_id

    def remove(self, building_id: str) -> bool:
        """
        Remove a building and detach its overlays. False if unknown.

        If a detach() call raises, the error propagates and the entry stays
        registered with some overlays already detached. Detaching is
        idempotent, so calling remove() again is safe.
        """
        entry = self._entries.get(building_id)
        if entry is None:
            logger.debug(f"Cannot remove unknown building {building_id}")
            return False

        entry.detach_resources()
        del self._entries[building_id]
        logger.debug(f"Removed building {building_id}")
        self._notify()
        return True

    def update_config(self, building_id: str, config_index: int) -> bool:
        entry = self._entries.get(building_id)
        if entry is None:
            return False
        entry.config_index = config_index
        self._notify()
        return True

    def update_nickname(self, building_id: str, nickname: str) -> bool:
        entry = self._entries.get(building_id)
        if entry is None:
            return False
        entry.nickname = nickname
        self._notify()
        return True

    def toggle_active(self, building_id: str) -> bool:
        entry = self._entries.get(building_id)
        if entry is None:
            return False
        entry.is_active = not entry.is_active
        logger.debug(f"Building {building_id} active={entry.is_active}")
        self._notify()
        return True

    def set_panels(self, building_id: str, panels: List[Detachable]) -> bool:
        """
        Attach panel overlays to a building.

        Previously attached panels are replaced, not detached; detach them
        first or they stay on the map.
        """
        entry = self._entries.get(building_id)
        if entry is None:
            return False
        entry.panels = list(panels)
        return True

    def set_boundary(self, building_id: str, boundary: Detachable) -> bool:
        """Attach a boundary overlay. Replaces the old one without detaching it."""
        entry = self._entries.get(building_id)
        if entry is None:
            return False
        entry.boundary = boundary
        return True

    def get(self, building_id: str) -> Optional[BuildingEntry]:
        return self._entries.get(building_id)

    def all(self) -> List[BuildingEntry]:
        """All entries in insertion order."""
        return list(self._entries.values())

    def active(self) -> List[BuildingEntry]:
        """Active entries in insertion order."""
        return [entry for entry in self._entries.values() if entry.is_active]

    def proximity_match(self, location: LatLng, threshold: Optional[float] = None) -> Optional[str]:
        """
        Find an already selected building close to a location.

        Distance is planar in degrees, sqrt(dlat² + dlng²), without any
        latitude correction. Only usable for small thresholds.

        Args:
            location: Point to test
            threshold: Strict upper bound on the distance in degrees
                (defaults to the configured proximity threshold)

        Returns:
            Id of the first inserted entry within threshold, or None
        """
        if threshold is None:
            threshold = get_config().registry.proximity_threshold_deg
        if not self._entries:
            return None

        ids = list(self._entries)
        coords = np.array(
            [entry.location.as_tuple() for entry in self._entries.values()],
            dtype=float,
        )
        distances = planar_distance(coords[:, 0], coords[:, 1], location.latitude, location.longitude)

        matches = np.flatnonzero(distances < threshold)
        if matches.size == 0:
            return None
        return ids[int(matches[0])]

    def aggregate(
        self,
        panel_capacity_ratio: Optional[float] = None,
        dc_to_ac_derate: Optional[float] = None,
    ) -> AggregatedResult:
        """
        Combine solar figures across active buildings.

        Args:
            panel_capacity_ratio: User panel wattage / dataset panel wattage
            dc_to_ac_derate: DC to AC conversion factor

        Returns:
            AggregatedResult; all zero with no active buildings

        Raises:
            IndexError: If an active entry's config_index is out of range
        """
        solar = get_config().solar
        if panel_capacity_ratio is None:
            panel_capacity_ratio = solar.panel_capacity_ratio
        if dc_to_ac_derate is None:
            dc_to_ac_derate = solar.dc_to_ac_derate

        active = self.active()
        result = AggregatedResult(buildings=active)
        total_panel_capacity = 0.0

        for entry in active:
            config = entry.selected_config()
            potential = entry.insights.solar_potential
            yearly_ac = config.yearly_energy_dc_kwh * panel_capacity_ratio * dc_to_ac_derate

            result.total_panels += math.floor(config.panels_count * panel_capacity_ratio)
            result.total_yearly_energy_ac += yearly_ac
            result.total_max_array_panels += potential.max_array_panels_count
            result.total_max_array_area += potential.max_array_area_meters2
            result.total_roof_area += potential.whole_roof_stats.area_meters2
            result.total_carbon_offset_per_year += (
                yearly_ac * potential.carbon_offset_factor_kg_per_mwh / KWH_PER_MWH
            )
            total_panel_capacity += potential.panel_capacity_watts

        # Approximate footprint, not derived from panel dimensions
        result.total_area = result.total_panels * get_config().registry.panel_area_m2
        if active:
            result.average_panel_capacity_watts = total_panel_capacity / len(active)
        return result

    def clear(self) -> None:
        """
        Detach all overlays and drop every entry.

        If a detach() call raises, nothing is removed and the observer is not
        notified. Detaching is idempotent, so calling clear() again is safe.
        """
        for entry in self._entries.values():
            entry.detach_resources()
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Cleared {count} buildings")
        self._notify()

    def _generate_id(self, location: LatLng) -> str:
        prefix = get_config().registry.id_prefix
        lat = f"{location.latitude:.{COORDINATE_DECIMALS}f}"
        lng = f"{location.longitude:.{COORDINATE_DECIMALS}f}"
        timestamp = int(time.time() * 1000)

        building_id = f"{prefix}_{lat}_{lng}_{timestamp}"
        while building_id in self._entries:
            timestamp += 1
            building_id = f"{prefix}_{lat}_{lng}_{timestamp}"
        return building_id

    def _generate_nickname(self, address: str) -> str:
        prefix = get_config().registry.nickname_prefix
        first_part = address.split(",")[0].strip()
        match = HOUSE_NUMBER_PATTERN.search(first_part)
        return f"{prefix} {match.group(1)}" if match else prefix

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self.all())
