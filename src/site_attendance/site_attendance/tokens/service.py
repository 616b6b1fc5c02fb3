from __future__ import annotations

import io
import logging
import math
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

import qrcode

from ..common.datetime_utils import utc_now
from ..core.constants import QR_DEFAULT_TTL_SECONDS, QR_MAX_TTL_SECONDS
from ..core.enums import MarkType, RejectReason
from ..core.exceptions import CheckinRejected
from ..people.repository import PersonRepository
from ..sites.repository import SiteRepository
from .model import AccessToken
from .repository import AccessTokenRepository

logger = logging.getLogger(__name__)


def clamp_ttl(raw: Any, *, default: int = QR_DEFAULT_TTL_SECONDS, maximum: int = QR_MAX_TTL_SECONDS) -> int:
    """Requested lifetime in seconds: default when missing or nonsensical, capped at maximum."""
    if raw is None or raw == "":
        return default
    try:
        parsed = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(parsed) or parsed <= 0:
        return default
    return max(1, min(int(round(parsed)), maximum))


class AccessTokenValidator:
    """Check a scanned code against the tokens issued for one site."""

    def __init__(self, tokens: AccessTokenRepository):
        self._tokens = tokens

    def validate(self, site_id: str, code: str, now: datetime) -> AccessToken:
        # No replay tracking: a code stays usable by anyone at that site until it expires.
        token = self._tokens.find_valid(site_id=site_id, code=code, now=now)
        if token is None or not token.is_usable(site_id=site_id, now=now):
            raise CheckinRejected(RejectReason.TOKEN_INVALID_OR_EXPIRED, {"site_id": site_id})
        return token


class AccessTokenService:
    """Use case: issue the rotating code a site displays as a QR."""

    def __init__(
        self,
        people: PersonRepository,
        sites: SiteRepository,
        tokens: AccessTokenRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
        default_ttl: int = QR_DEFAULT_TTL_SECONDS,
        max_ttl: int = QR_MAX_TTL_SECONDS,
    ):
        self._people = people
        self._sites = sites
        self._tokens = tokens
        self._clock = clock
        self._default_ttl = int(default_ttl)
        self._max_ttl = int(max_ttl)

    def issue(self, *, person_id: str, site_id: str, mark_type: str, ttl: Optional[Any] = None) -> AccessToken:
        kind = MarkType.parse(mark_type)
        if kind == MarkType.UNKNOWN:
            raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "type"})

        person = self._people.get_by_id(person_id)
        if person is None:
            raise CheckinRejected(RejectReason.PERSON_NOT_FOUND)
        if not person.active:
            raise CheckinRejected(RejectReason.PERSON_INACTIVE)
        if person.assigned_site_id and person.assigned_site_id != site_id:
            raise CheckinRejected(RejectReason.SITE_MISMATCH, {"assigned_site_id": person.assigned_site_id})

        site = self._sites.get_by_id(site_id)
        if site is None:
            raise CheckinRejected(RejectReason.SITE_NOT_FOUND)
        if not site.is_active:
            raise CheckinRejected(RejectReason.SITE_UNAVAILABLE, {"site_id": site_id})

        now = self._clock()
        purged = self._tokens.purge_expired(now=now)
        if purged:
            logger.debug("purged %s expired tokens", purged)

        lifetime = clamp_ttl(ttl, default=self._default_ttl, maximum=self._max_ttl)
        token = AccessToken(
            site_id=site_id,
            code=f"{100000 + secrets.randbelow(900000)}-{kind.value}",
            expires_at=now + timedelta(seconds=lifetime),
        )
        self._tokens.create(token)
        logger.info("issued %s token for site=%s person=%s ttl=%ss", kind.value, site_id, person_id, lifetime)
        return token

    @staticmethod
    def render_qr_png(code: str) -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
