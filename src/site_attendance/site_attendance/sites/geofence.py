from __future__ import annotations

from dataclasses import dataclass

from ..common.geo import Coordinate, distance_meters
from ..core.constants import ACCURACY_CEILING_M
from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected
from .model import Site


@dataclass(frozen=True)
class GeofenceAdmission:
    distance_m: float
    radius_m: float


class SiteGeofenceValidator:
    """Decide whether a reported GPS position is inside a site's geofence.

    Rules run in a fixed order: site availability, then reading accuracy, then
    distance. A low-confidence reading is refused even when it lands inside the
    radius.
    """

    def __init__(self, *, accuracy_ceiling_m: float = ACCURACY_CEILING_M):
        self._accuracy_ceiling_m = float(accuracy_ceiling_m)

    @property
    def accuracy_ceiling_m(self) -> float:
        return self._accuracy_ceiling_m

    def admit(self, site: Site, position: Coordinate, accuracy_m: float) -> GeofenceAdmission:
        center = site.center
        if not site.is_active or center is None:
            raise CheckinRejected(RejectReason.SITE_UNAVAILABLE, {"site_id": site.site_id})

        if accuracy_m > self._accuracy_ceiling_m:
            raise CheckinRejected(
                RejectReason.ACCURACY_TOO_LOW,
                {"accuracy": accuracy_m, "max_accuracy": self._accuracy_ceiling_m},
            )

        distance = distance_meters(position, center)
        if distance > site.radius_m:
            raise CheckinRejected(
                RejectReason.OUTSIDE_GEOFENCE,
                {"distance_m": distance, "required_radius": site.radius_m, "accuracy": accuracy_m},
            )

        return GeofenceAdmission(distance_m=distance, radius_m=site.radius_m)
