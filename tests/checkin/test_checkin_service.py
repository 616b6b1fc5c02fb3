from __future__ import annotations

from datetime import timedelta

import pytest

from src.site_attendance.site_attendance.checkin.service import CheckinIngestionService
from src.site_attendance.site_attendance.core.enums import MarkType, RejectReason
from src.site_attendance.site_attendance.core.exceptions import CheckinRejected
from src.site_attendance.site_attendance.sites.geofence import SiteGeofenceValidator
from src.site_attendance.site_attendance.tokens.model import AccessToken
from src.site_attendance.site_attendance.tokens.service import AccessTokenValidator

from tests.fakes import (
    ANA,
    JUAN,
    OLD,
    ROSA,
    SCZ,
    FakeBlobStore,
    FakeMarkRepo,
    FakePeopleRepo,
    FakeSitesRepo,
    FakeTokenRepo,
    lapaz,
    selfie_b64,
)

NOW = lapaz(2025, 1, 6, 8, 40)


def _payload(**overrides):
    body = {
        "person_id": "p-ana",
        "site_id": "site-scz",
        "type": "in",
        "lat": SCZ.lat,
        "lng": SCZ.lng,
        "accuracy": 12.5,
        "device_id": "dev-1",
        "selfie_base64": selfie_b64(),
        "qr_code": "123456-in",
    }
    body.update(overrides)
    return body


class Harness:
    def __init__(self, *, people_fail=False, blob_fail=False, insert_fail=False, tokens=None):
        self.people = FakePeopleRepo([ANA, JUAN, ROSA], fail=people_fail)
        self.sites = FakeSitesRepo([SCZ, OLD])
        self.marks = FakeMarkRepo(fail_insert=insert_fail)
        self.blobs = FakeBlobStore(fail=blob_fail)
        self.tokens = FakeTokenRepo(
            tokens
            if tokens is not None
            else [
                AccessToken("site-scz", "123456-in", NOW + timedelta(seconds=60)),
                AccessToken("site-old", "123456-in", NOW + timedelta(seconds=60)),
            ]
        )
        self.service = CheckinIngestionService(
            self.people,
            self.sites,
            self.marks,
            self.blobs,
            geofence=SiteGeofenceValidator(accuracy_ceiling_m=60),
            tokens=AccessTokenValidator(self.tokens),
            clock=lambda: NOW,
        )

    def reject(self, payload, *, method="check_in"):
        with pytest.raises(CheckinRejected) as exc:
            getattr(self.service, method)(payload)
        return exc.value


def test_check_in_records_mark_with_evidence():
    h = Harness()
    result = h.service.check_in(_payload())

    assert result.mark_id == 1
    assert result.distance_m == 0.0
    assert result.recorded_at == NOW
    assert result.to_dict() == {"ok": True, "type": "in", "recorded_at": NOW.isoformat(), "distance_m": 0.0}

    [stored] = h.marks.marks
    assert stored.mark_type == MarkType.IN
    assert stored.observed_at == NOW
    assert stored.accuracy_m == 12.5
    assert stored.device_id == "dev-1"

    key = f"site-scz/p-ana/{int(NOW.timestamp() * 1000)}.jpg"
    assert stored.evidence_ref == key
    assert h.blobs.objects[key].startswith(b"\xff\xd8")


def test_spanish_type_synonym_is_accepted():
    h = Harness()
    h.service.check_in(_payload(type="Salida"))
    assert h.marks.marks[0].mark_type == MarkType.OUT


@pytest.mark.parametrize(
    "payload,reason",
    [
        (["not", "an", "object"], RejectReason.BAD_JSON),
        (None, RejectReason.BAD_JSON),
        (_payload(person_id=None), RejectReason.MISSING_FIELD),
        (_payload(qr_code="  "), RejectReason.MISSING_FIELD),
        (_payload(type="lunch_out"), RejectReason.TYPE_INVALID),
        (_payload(type="almuerzo"), RejectReason.TYPE_INVALID),
        (_payload(lat="-17.78"), RejectReason.TYPE_INVALID),
        (_payload(lat=True), RejectReason.TYPE_INVALID),
        (_payload(lat=95.0), RejectReason.TYPE_INVALID),
        (_payload(accuracy=-1), RejectReason.TYPE_INVALID),
        (_payload(selfie_base64="not base64 at all!"), RejectReason.TYPE_INVALID),
        (_payload(selfie_base64="aGVsbG8gd29ybGQ="), RejectReason.TYPE_INVALID),
    ],
)
def test_malformed_requests_have_no_side_effects(payload, reason):
    h = Harness()
    assert h.reject(payload).reason == reason
    assert h.marks.marks == []
    assert h.blobs.objects == {}


def test_missing_field_names_the_field():
    body = _payload()
    del body["device_id"]
    assert Harness().reject(body).details == {"field": "device_id"}


@pytest.mark.parametrize(
    "overrides,reason",
    [
        (dict(person_id="p-nobody"), RejectReason.PERSON_NOT_FOUND),
        (dict(person_id="p-juan"), RejectReason.PERSON_INACTIVE),
        (dict(person_id="p-rosa"), RejectReason.ROLE_NOT_ALLOWED),
        (dict(site_id="site-zzz"), RejectReason.SITE_NOT_FOUND),
        (dict(site_id="site-old", lat=OLD.lat, lng=OLD.lng), RejectReason.SITE_UNAVAILABLE),
        (dict(accuracy=61), RejectReason.ACCURACY_TOO_LOW),
        (dict(lat=SCZ.lat + 0.01), RejectReason.OUTSIDE_GEOFENCE),
        (dict(qr_code="999999-in"), RejectReason.TOKEN_INVALID_OR_EXPIRED),
    ],
)
def test_eligibility_presence_and_token_rejections(overrides, reason):
    h = Harness()
    assert h.reject(_payload(**overrides)).reason == reason
    assert h.marks.marks == []
    assert h.blobs.objects == {}


def test_geofence_runs_before_token_check():
    rejection = Harness().reject(_payload(lat=SCZ.lat + 0.01, qr_code="bogus"))
    assert rejection.reason == RejectReason.OUTSIDE_GEOFENCE
    assert rejection.details["required_radius"] == 100.0
    assert rejection.details["distance_m"] > 1000


def test_expired_token_is_rejected():
    h = Harness(tokens=[AccessToken("site-scz", "123456-in", NOW)])
    assert h.reject(_payload()).reason == RejectReason.TOKEN_INVALID_OR_EXPIRED


def test_upload_failure_prevents_insert():
    h = Harness(blob_fail=True)
    assert h.reject(_payload()).reason == RejectReason.EVIDENCE_UPLOAD_FAILED
    assert h.marks.marks == []


def test_insert_failure_leaves_orphaned_evidence():
    h = Harness(insert_fail=True)
    assert h.reject(_payload()).reason == RejectReason.PERSIST_FAILED
    assert len(h.blobs.objects) == 1


def test_unreachable_lookup_fails_closed():
    h = Harness(people_fail=True)
    assert h.reject(_payload()).reason == RejectReason.DEPENDENCY_UNAVAILABLE
    assert h.marks.marks == []
    assert h.blobs.objects == {}


def test_record_break_stores_lunch_mark_without_position_or_evidence():
    h = Harness()
    result = h.service.record_break({"person_id": "p-ana", "site_id": "site-scz", "type": "lunch_out", "qr_code": "123456-in"})

    assert result.to_dict() == {"ok": True, "type": "lunch_out", "recorded_at": NOW.isoformat()}
    [stored] = h.marks.marks
    assert stored.mark_type == MarkType.LUNCH_OUT
    assert stored.lat is None and stored.evidence_ref is None
    assert h.blobs.objects == {}


@pytest.mark.parametrize(
    "overrides,reason",
    [
        (dict(type="in"), RejectReason.TYPE_INVALID),
        (dict(qr_code=None), RejectReason.MISSING_FIELD),
        (dict(qr_code="000000-in"), RejectReason.TOKEN_INVALID_OR_EXPIRED),
        (dict(site_id="site-old"), RejectReason.SITE_UNAVAILABLE),
        (dict(person_id="p-rosa"), RejectReason.ROLE_NOT_ALLOWED),
    ],
)
def test_record_break_rejections(overrides, reason):
    body = {"person_id": "p-ana", "site_id": "site-scz", "type": "lunch_in", "qr_code": "123456-in"}
    body.update(overrides)
    h = Harness()
    assert h.reject(body, method="record_break").reason == reason
    assert h.marks.marks == []
