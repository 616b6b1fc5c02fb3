from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_M


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """True for finite latitude/longitude inside their ranges."""
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters (haversine).

    Callers must reject NaN or out-of-range coordinates before calling.
    """
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))
