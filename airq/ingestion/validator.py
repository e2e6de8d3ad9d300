"""
Validator for upstream payload fields.

Validates:
- Geocoding entries carry a string name and numeric coordinates in range
- Coordinates are not the (0, 0) placeholder
- AQI is an integer in [1, 5]
- Pollutant concentrations are finite, non-negative numbers
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

COORDINATE_BOUNDS = {
    "lat": (-90.0, 90.0),
    "lon": (-180.0, 180.0),
}

AQI_BOUNDS = (1, 5)


@dataclass
class ValidationResult:
    """Result of validating one payload fragment."""
    is_valid: bool = True
    reasons: List[str] = field(default_factory=list)

    def add_error(self, msg: str):
        self.reasons.append(msg)
        self.is_valid = False

    def __str__(self) -> str:
        if self.is_valid:
            return "Valid"
        return "Invalid: " + "; ".join(self.reasons)


def is_number(value: Any) -> bool:
    """JSON number check; bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_geocode_entry(entry: Any) -> ValidationResult:
    """Check a single element of the geocoding response array."""
    result = ValidationResult()

    if not isinstance(entry, dict):
        result.add_error(f"Geocoding entry must be an object, got {type(entry).__name__}")
        return result

    if not isinstance(entry.get("name"), str):
        result.add_error("Missing required field: name")

    for key, (min_val, max_val) in COORDINATE_BOUNDS.items():
        value = entry.get(key)
        if not is_number(value):
            result.add_error(f"{key} must be numeric, got {type(value).__name__}")
            continue
        if not _is_finite(value):
            result.add_error(f"{key} is not a finite number")
        elif not min_val <= value <= max_val:
            result.add_error(f"{key}={value} outside [{min_val}, {max_val}]")

    if not result.is_valid:
        logger.warning("Geocoding entry rejected: %s", result.reasons)
    return result


def _is_finite(value: Any) -> bool:
    """Huge JSON integers overflow float conversion; NaN and Infinity are not concentrations."""
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def extract_message(payload: Any) -> Optional[str]:
    """Return a top-level ``message`` string from a parsed payload, if any."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def is_placeholder_point(lat: float, lon: float) -> bool:
    """(0, 0) is what the geocoder hands back for an unresolved place."""
    return lat == 0 and lon == 0


def validate_aqi(aqi: Any) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(aqi, int) or isinstance(aqi, bool):
        result.add_error(f"aqi must be an integer, got {type(aqi).__name__}")
    elif not AQI_BOUNDS[0] <= aqi <= AQI_BOUNDS[1]:
        result.add_error(f"aqi={aqi} outside [{AQI_BOUNDS[0]}, {AQI_BOUNDS[1]}]")
    return result


def validate_components(components: Any, keys: List[str]) -> ValidationResult:
    """Every expected key must be present with a non-negative number."""
    result = ValidationResult()

    if not isinstance(components, dict):
        result.add_error(f"components must be an object, got {type(components).__name__}")
        return result

    for key in keys:
        if key not in components:
            result.add_error(f"Missing required field: {key}")
            continue
        value = components[key]
        if not is_number(value):
            result.add_error(f"{key} must be numeric, got {type(value).__name__}")
        elif not _is_finite(value):
            result.add_error(f"{key} is not a finite number")
        elif value < 0:
            result.add_error(f"{key}={value} below physical minimum 0")

    if not result.is_valid:
        logger.warning("Pollution components rejected: %s", result.reasons)
    return result
