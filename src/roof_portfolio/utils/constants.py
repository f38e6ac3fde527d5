"""Shared constants for building selection and solar aggregation."""

import re

# Decimal digits of latitude/longitude kept in building identifiers
COORDINATE_DECIMALS = 6

# House number, optionally followed by a single letter (e.g. "14a")
HOUSE_NUMBER_PATTERN = re.compile(r"(\d+[a-zA-Z]?)")

# Energy conversion
KWH_PER_MWH = 1000

# Imagery quality levels reported by the solar data provider
IMAGERY_QUALITIES = ("HIGH", "MEDIUM", "LOW", "BASE")

__all__ = [
    "COORDINATE_DECIMALS",
    "HOUSE_NUMBER_PATTERN",
    "KWH_PER_MWH",
    "IMAGERY_QUALITIES",
]
