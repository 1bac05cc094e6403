"""Area bucketing for reports.

Structured address data wins; otherwise the coordinates are folded into a
fixed table of locality names. The fold is a coarse stand-in for reverse
geocoding and must stay stable so historic dashboards keep their buckets.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

UNKNOWN_AREA = "Unknown Area"

LOCALITY_NAMES: tuple[str, ...] = (
    "Sector 45",
    "Green Park",
    "Indiranagar",
    "MG Road",
    "Koramangala",
    "Whitefield",
    "Electronic City",
    "HSR Layout",
    "JP Nagar",
    "Banashankari",
    "Rajajinagar",
    "Malleshwaram",
    "Basavanagudi",
    "Jayanagar",
    "Vijayanagar",
    "Hebbal",
    "Yeshwanthpur",
    "Peenya",
    "Yelahanka",
    "Marathahalli",
)

_DETAIL_KEYS = ("area", "subLocality", "locality")


def locality_for_coordinates(latitude: float, longitude: float) -> str:
    index = abs(math.floor(latitude * 1000) + math.floor(longitude * 1000)) % len(LOCALITY_NAMES)
    return LOCALITY_NAMES[index]


def resolve_area(
    location_details: Mapping[str, Any] | None,
    latitude: float | None,
    longitude: float | None,
) -> str:
    if location_details:
        for key in _DETAIL_KEYS:
            value = location_details.get(key)
            if value:
                return str(value)
    if latitude is not None and longitude is not None:
        return locality_for_coordinates(latitude, longitude)
    return UNKNOWN_AREA


__all__ = ["LOCALITY_NAMES", "UNKNOWN_AREA", "locality_for_coordinates", "resolve_area"]
