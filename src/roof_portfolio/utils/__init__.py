"""Utility modules for solar data and summary calculations."""

from . import constants, insights, calculator

__all__ = ["constants", "insights", "calculator"]
