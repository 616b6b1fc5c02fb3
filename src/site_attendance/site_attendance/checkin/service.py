from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from ..attendance.model import AttendanceMark
from ..attendance.repository import MarkRepository
from ..common.datetime_utils import utc_now
from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected, StorageError
from ..evidence.blob_store import BlobStore, evidence_key
from ..evidence.codec import decode_evidence
from ..people.model import Person
from ..people.repository import PersonRepository
from ..sites.geofence import SiteGeofenceValidator
from ..sites.model import Site
from ..sites.repository import SiteRepository
from ..tokens.service import AccessTokenValidator
from .model import BreakRequest, CheckinRequest, CheckinResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CheckinIngestionService:
    """Use case: validate presence at a site and append one attendance mark.

    The pipeline is serial and fail-fast:
    fields -> person -> site -> geofence -> token -> evidence -> insert.
    Evidence is stored before the mark is inserted, so a persisted mark never
    points at a missing file. If the insert fails afterwards the file stays
    behind as an orphan for the out-of-band cleanup job.
    """

    def __init__(
        self,
        people: PersonRepository,
        sites: SiteRepository,
        marks: MarkRepository,
        blobs: BlobStore,
        *,
        geofence: SiteGeofenceValidator,
        tokens: AccessTokenValidator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._people = people
        self._sites = sites
        self._marks = marks
        self._blobs = blobs
        self._geofence = geofence
        self._tokens = tokens
        self._clock = clock

    def check_in(self, payload: Any) -> CheckinResult:
        try:
            return self._check_in(payload)
        except CheckinRejected as e:
            logger.info("check-in rejected: %s %s", e.reason.value, e.details)
            raise

    def record_break(self, payload: Any) -> CheckinResult:
        """Lunch marks: same eligibility and token gates, no geofence or evidence."""
        try:
            return self._record_break(payload)
        except CheckinRejected as e:
            logger.info("break mark rejected: %s %s", e.reason.value, e.details)
            raise

    def _check_in(self, payload: Any) -> CheckinResult:
        req = CheckinRequest.from_payload(payload)
        evidence = decode_evidence(req.selfie_base64)

        self._load_person(req.person_id)
        site = self._load_site(req.site_id)
        admission = self._geofence.admit(site, req.position, req.accuracy_m)

        now = self._clock()
        self._guard(self._tokens.validate, req.site_id, req.qr_code, now)

        key = evidence_key(site_id=req.site_id, person_id=req.person_id, taken_at=now)
        try:
            evidence_ref = self._blobs.put(key, evidence, content_type="image/jpeg")
        except StorageError as exc:
            logger.warning("evidence upload failed for person=%s: %s", req.person_id, exc)
            raise CheckinRejected(RejectReason.EVIDENCE_UPLOAD_FAILED) from exc

        mark = AttendanceMark(
            person_id=req.person_id,
            site_id=req.site_id,
            mark_type=req.mark_type,
            observed_at=now,
            lat=req.position.lat,
            lng=req.position.lng,
            accuracy_m=req.accuracy_m,
            device_id=req.device_id,
            evidence_ref=evidence_ref,
        )
        mark_id = self._persist(mark, orphan=evidence_ref)

        logger.info(
            "check-in %s person=%s site=%s distance=%.1fm",
            req.mark_type.value,
            req.person_id,
            req.site_id,
            admission.distance_m,
        )
        return CheckinResult(
            mark_id=mark_id,
            mark_type=req.mark_type,
            recorded_at=now,
            distance_m=admission.distance_m,
            evidence_ref=evidence_ref,
        )

    def _record_break(self, payload: Any) -> CheckinResult:
        req = BreakRequest.from_payload(payload)

        self._load_person(req.person_id)
        site = self._load_site(req.site_id)
        if not site.is_active:
            raise CheckinRejected(RejectReason.SITE_UNAVAILABLE, {"site_id": site.site_id})

        now = self._clock()
        self._guard(self._tokens.validate, req.site_id, req.qr_code, now)

        mark = AttendanceMark(
            person_id=req.person_id,
            site_id=req.site_id,
            mark_type=req.mark_type,
            observed_at=now,
            device_id=req.device_id,
        )
        mark_id = self._persist(mark)
        logger.info("break %s person=%s site=%s", req.mark_type.value, req.person_id, req.site_id)
        return CheckinResult(mark_id=mark_id, mark_type=req.mark_type, recorded_at=now)

    def _load_person(self, person_id: str) -> Person:
        person = self._guard(self._people.get_by_id, person_id)
        if person is None:
            raise CheckinRejected(RejectReason.PERSON_NOT_FOUND)
        if not person.active:
            raise CheckinRejected(RejectReason.PERSON_INACTIVE)
        if not person.can_check_in:
            raise CheckinRejected(RejectReason.ROLE_NOT_ALLOWED, {"role": person.role.value})
        return person

    def _load_site(self, site_id: str) -> Site:
        site = self._guard(self._sites.get_by_id, site_id)
        if site is None:
            raise CheckinRejected(RejectReason.SITE_NOT_FOUND)
        return site

    def _persist(self, mark: AttendanceMark, *, orphan: Optional[str] = None) -> int:
        try:
            return self._marks.insert(mark)
        except StorageError as exc:
            if orphan:
                logger.error("mark insert failed, orphaned evidence %s: %s", orphan, exc)
            else:
                logger.error("mark insert failed: %s", exc)
            raise CheckinRejected(RejectReason.PERSIST_FAILED) from exc

    @staticmethod
    def _guard(fn: Callable[..., T], *args: Any) -> T:
        """Run a lookup; an unreachable store rejects the request instead of admitting it."""
        try:
            return fn(*args)
        except StorageError as exc:
            logger.warning("lookup failed, rejecting check-in: %s", exc)
            raise CheckinRejected(RejectReason.DEPENDENCY_UNAVAILABLE) from exc
