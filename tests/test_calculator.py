"""Unit tests for calculator module."""

import pytest

from roof_portfolio.utils.calculator import (
    find_solar_config,
    format_area,
    format_energy,
    format_money,
    format_number,
    panel_capacity_ratio,
)
from roof_portfolio.utils.insights import SolarPanelConfig


CONFIGS = [
    SolarPanelConfig(panels_count=50, yearly_energy_dc_kwh=20000),
    SolarPanelConfig(panels_count=75, yearly_energy_dc_kwh=30000),
    SolarPanelConfig(panels_count=100, yearly_energy_dc_kwh=40000),
]


def test_panel_capacity_ratio() -> None:
    """Test ratio between chosen and default panel wattage."""
    assert panel_capacity_ratio(400, 400) == 1.0
    assert panel_capacity_ratio(500, 400) == 1.25
    assert panel_capacity_ratio(200, 400) == 0.5


def test_panel_capacity_ratio_invalid_default() -> None:
    with pytest.raises(ValueError, match="must be positive"):
        panel_capacity_ratio(400, 0)


def test_find_solar_config() -> None:
    """Test that the smallest covering configuration is chosen."""
    # 20000 * 0.85 = 17000, 30000 * 0.85 = 25500
    assert find_solar_config(CONFIGS, 15000, 1.0, 0.85) == 0
    assert find_solar_config(CONFIGS, 17000, 1.0, 0.85) == 0
    assert find_solar_config(CONFIGS, 20000, 1.0, 0.85) == 1
    assert find_solar_config(CONFIGS, 30000, 1.0, 0.85) == 2


def test_find_solar_config_with_ratio() -> None:
    """Test that larger panels reach the target with a smaller configuration."""
    assert find_solar_config(CONFIGS, 30000, 1.0, 0.85) == 2
    assert find_solar_config(CONFIGS, 30000, 2.0, 0.85) == 0


def test_find_solar_config_not_found() -> None:
    assert find_solar_config(CONFIGS, 1_000_000, 1.0, 0.85) == -1
    assert find_solar_config([], 1, 1.0, 0.85) == -1


def test_format_number() -> None:
    assert format_number(1234.56) == "1,234.6"
    assert format_number(42500) == "42,500"
    assert format_number(0) == "0"


def test_format_helpers() -> None:
    """Test display formatting with units."""
    assert format_money(1234.5) == "$1,234.50"
    assert format_energy(17000) == "17,000 kWh"
    assert format_area(250) == "250.0 m²"


if __name__ == "__main__":
    pytest.main([__file__])
