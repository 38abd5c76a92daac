"""Great-circle distance utilities

Haversine distance between two latitude/longitude points, plus the small
presentation helpers listing cards use (distance text, transport hint).

    a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
    d = 2R · atan2(√a, √(1−a))
"""

import math
from dataclasses import dataclass
from typing import Any

from .numbers import is_number, round_half_up

EARTH_RADIUS_MILES = 3959
EARTH_RADIUS_KM = 6371

FEET_PER_MILE = 5280


def calculate_distance(
    lat1: Any,
    lon1: Any,
    lat2: Any,
    lon2: Any,
    unit: str = "miles"
) -> float:
    """Haversine distance between two points

    Invalid input does not raise: non-numeric values, latitudes outside
    [-90, 90] and longitudes outside [-180, 180] all yield 0. A result of 0
    therefore does not prove the points coincide; check
    has_valid_coordinates() first when that matters.

    Args:
        lat1, lon1: first point in degrees
        lat2, lon2: second point in degrees
        unit: "km" for kilometres, anything else for miles

    Returns:
        distance in the requested unit
    """
    if not all(is_number(v) for v in (lat1, lon1, lat2, lon2)):
        return 0

    if not (-90 <= lat1 <= 90 and -90 <= lat2 <= 90):
        return 0

    if not (-180 <= lon1 <= 180 and -180 <= lon2 <= 180):
        return 0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    radius = EARTH_RADIUS_KM if unit == "km" else EARTH_RADIUS_MILES
    return radius * c


def has_valid_coordinates(lat: Any, lng: Any) -> bool:
    """Numeric, in range, and not the 0/0 "unset" placeholder"""
    if not (is_number(lat) and is_number(lng)):
        return False
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return False
    return not (lat == 0 and lng == 0)


# ========== Presentation ==========

@dataclass(frozen=True)
class TransportSuggestion:
    """Suggested way to cover a distance

    Attributes:
        mode: walking | biking | driving | transit
        time: estimate text (e.g. "6 min walk")
    """
    mode: str
    time: str


def format_distance(distance: float) -> str:
    """Distance in miles as display text ("528 ft", "0.3 mi", "5.2 mi")"""
    if distance < 0.1:
        feet = round_half_up(distance * FEET_PER_MILE)
        return f"{feet:,} ft"
    return f"{distance:.1f} mi"


def calculate_walking_time(distance: float, walking_speed_mph: float = 3) -> int:
    """Walking time in minutes"""
    return round_half_up((distance / walking_speed_mph) * 60)


def get_transportation_mode(distance: float) -> TransportSuggestion:
    """Pick a transport mode by distance band (miles)"""
    if distance <= 0.5:
        return TransportSuggestion("walking", f"{calculate_walking_time(distance)} min walk")
    if distance <= 2:
        return TransportSuggestion("biking", f"{round_half_up(distance * 4)} min bike")
    if distance <= 10:
        return TransportSuggestion("driving", f"{round_half_up(distance * 2)} min drive")
    return TransportSuggestion("transit", f"{round_half_up(distance * 3)} min transit")
