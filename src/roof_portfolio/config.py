"""Configuration module for centralized application settings."""

import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class RegistryConfig:
    """Configuration for the building registry."""

    # ~11 m at the reference threshold
    proximity_threshold_deg: float = 0.0001

    # Fixed per-panel footprint used for total area (m²)
    panel_area_m2: float = 2.0

    nickname_prefix: str = "Building"
    id_prefix: str = "building"


@dataclass
class SolarDefaultsConfig:
    """Default parameters for solar aggregation."""

    # User panel wattage / dataset panel wattage
    panel_capacity_ratio: float = 1.0

    # DC to AC conversion (inverter and wiring losses)
    dc_to_ac_derate: float = 0.85  # 85%

    # Panel wattage assumed by the solar data provider
    default_panel_capacity_watts: float = 400.0


@dataclass
class AppConfig:
    """Main application configuration."""

    # Application metadata
    app_name: str = "Roof Portfolio"
    app_version: str = "1.0.0"
    app_description: str = "Multi-building selection and solar aggregation"

    # Component configurations
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    solar: SolarDefaultsConfig = field(default_factory=SolarDefaultsConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app_name": self.app_name,
            "app_version": self.app_version,
            "app_description": self.app_description,
            "registry": {
                "proximity_threshold_deg": self.registry.proximity_threshold_deg,
                "panel_area_m2": self.registry.panel_area_m2,
                "nickname_prefix": self.registry.nickname_prefix,
                "id_prefix": self.registry.id_prefix,
            },
            "solar": {
                "panel_capacity_ratio": self.solar.panel_capacity_ratio,
                "dc_to_ac_derate": self.solar.dc_to_ac_derate,
                "default_panel_capacity_watts": self.solar.default_panel_capacity_watts,
            },
            "logging": {
                "log_level": self.log_level,
                "log_file": str(self.log_file) if self.log_file else None,
            },
        }


# Global configuration instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return config


def update_config(**kwargs: Any) -> None:
    """Update configuration with new values.

    Keys are matched against the top-level config first, then the
    registry and solar sections. Unknown keys raise ``KeyError``.
    """
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        elif hasattr(config.registry, key):
            setattr(config.registry, key, value)
        elif hasattr(config.solar, key):
            setattr(config.solar, key, value)
        else:
            raise KeyError(f"Unknown configuration key: {key}")


def reset_config() -> AppConfig:
    """Restore the global configuration to its defaults."""
    global config
    config = AppConfig()
    return config


def configure_logging(app_config: Optional[AppConfig] = None) -> None:
    """Apply the configured log level and optional log file."""
    app_config = app_config or get_config()

    level = getattr(logging, app_config.log_level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if app_config.log_file:
        handlers.append(logging.FileHandler(app_config.log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
