"""Panel sizing helpers and display formatting for solar summaries."""

from typing import Sequence

from .insights import SolarPanelConfig


def panel_capacity_ratio(panel_capacity_watts: float, default_watts: float) -> float:
    """
    Scale factor between the user's panel wattage and the dataset's.

    Args:
        panel_capacity_watts: Wattage of the panels the user intends to install
        default_watts: Panel wattage the solar dataset was computed with

    Returns:
        Ratio to pass to aggregation (1.0 when both match)

    Raises:
        ValueError: If default_watts is not positive
    """
    if default_watts <= 0:
        raise ValueError(f"Default panel wattage must be positive, got {default_watts}")
    return panel_capacity_watts / default_watts


def find_solar_config(
    solar_panel_configs: Sequence[SolarPanelConfig],
    yearly_kwh_energy_consumption: float,
    panel_capacity_ratio: float,
    dc_to_ac_derate: float,
) -> int:
    """
    Find the smallest configuration that covers a yearly consumption.

    Configurations are expected in ascending yield order, as provided.

    Returns:
        Index of the first matching configuration, or -1 if none covers it
    """
    for index, config in enumerate(solar_panel_configs):
        yearly_ac = config.yearly_energy_dc_kwh * panel_capacity_ratio * dc_to_ac_derate
        if yearly_ac >= yearly_kwh_energy_consumption:
            return index
    return -1


def format_number(value: float) -> str:
    """Format a number with thousands separators and at most one decimal."""
    text = f"{value:,.1f}"
    return text[:-2] if text.endswith(".0") else text


def format_money(amount: float) -> str:
    """Format currency with USD symbol and commas."""
    return f"${amount:,.2f}"


def format_energy(kwh: float) -> str:
    """Format yearly energy."""
    return f"{format_number(kwh)} kWh"


def format_area(area_m2: float) -> str:
    """Format area with units."""
    return f"{area_m2:,.1f} m²"
