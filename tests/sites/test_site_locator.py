import pytest

from src.site_attendance.site_attendance.core.enums import RejectReason
from src.site_attendance.site_attendance.core.exceptions import CheckinRejected, ValidationError
from src.site_attendance.site_attendance.sites.model import Site
from src.site_attendance.site_attendance.sites.service import SiteLocator

from tests.fakes import SCZ, FakeSitesRepo


def test_distance_report_for_known_site():
    locator = SiteLocator(FakeSitesRepo([SCZ]))
    report = locator.distance_report("site-scz", SCZ.lat, SCZ.lng)
    assert report.to_dict() == {
        "site_id": "site-scz",
        "site_name": "Santa Cruz",
        "distance_m": 0.0,
        "site_radius_m": 100.0,
    }


def test_unknown_site_or_missing_center_is_not_found():
    locator = SiteLocator(FakeSitesRepo([Site(site_id="s-x", name="X", lat=None, lng=None)]))
    for site_id in ("nope", "s-x"):
        with pytest.raises(CheckinRejected) as exc:
            locator.distance_report(site_id, -17.0, -63.0)
        assert exc.value.reason == RejectReason.SITE_NOT_FOUND


def test_out_of_range_position_is_rejected():
    with pytest.raises(ValidationError):
        SiteLocator(FakeSitesRepo([SCZ])).distance_report("site-scz", 123.0, 0.0)
