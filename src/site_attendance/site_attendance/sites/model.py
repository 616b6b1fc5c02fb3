from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import Coordinate
from ..core.constants import DEFAULT_SITE_RADIUS_M


@dataclass(frozen=True)
class Site:
    """Domain entity: a store or branch with a circular geofence."""

    site_id: str
    name: Optional[str]
    lat: Optional[float]
    lng: Optional[float]
    radius_m: float = DEFAULT_SITE_RADIUS_M
    is_active: bool = True

    @property
    def center(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(lat=float(self.lat), lng=float(self.lng))
