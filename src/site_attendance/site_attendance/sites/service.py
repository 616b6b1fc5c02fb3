from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import Coordinate, distance_meters, is_valid_coordinate
from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected, ValidationError
from .repository import SiteRepository


@dataclass(frozen=True)
class DistanceReport:
    site_id: str
    site_name: Optional[str]
    distance_m: float
    site_radius_m: float

    def to_dict(self) -> dict:
        return {
            "site_id": self.site_id,
            "site_name": self.site_name,
            "distance_m": self.distance_m,
            "site_radius_m": self.site_radius_m,
        }


class SiteLocator:
    """Troubleshooting helper: how far is a point from a site's registered center."""

    def __init__(self, sites: SiteRepository):
        self._sites = sites

    def distance_report(self, site_id: str, lat: float, lng: float) -> DistanceReport:
        if not is_valid_coordinate(lat, lng):
            raise ValidationError("lat/lng out of range")

        site = self._sites.get_by_id(site_id)
        if site is None or site.center is None:
            raise CheckinRejected(RejectReason.SITE_NOT_FOUND, {"site_id": site_id})

        return DistanceReport(
            site_id=site.site_id,
            site_name=site.name,
            distance_m=distance_meters(Coordinate(lat, lng), site.center),
            site_radius_m=site.radius_m,
        )
