from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.geo import Coordinate, is_valid_coordinate
from ..common.validators import require_number, require_text
from ..core.enums import MarkType, RejectReason
from ..core.exceptions import CheckinRejected


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise CheckinRejected(RejectReason.BAD_JSON)
    return payload


def _require_mark_type(payload: Mapping[str, Any], allowed: tuple[MarkType, ...]) -> MarkType:
    raw = payload.get("type")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise CheckinRejected(RejectReason.MISSING_FIELD, {"field": "type"})
    kind = MarkType.parse(raw) if isinstance(raw, str) else MarkType.UNKNOWN
    if kind not in allowed:
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "type"})
    return kind


@dataclass(frozen=True)
class CheckinRequest:
    """A validated shift check-in (``in`` / ``out``) as sent by the client."""

    person_id: str
    site_id: str
    mark_type: MarkType
    position: Coordinate
    accuracy_m: float
    device_id: str
    selfie_base64: str
    qr_code: str

    @classmethod
    def from_payload(cls, payload: Any) -> "CheckinRequest":
        data = _require_mapping(payload)
        person_id = require_text(data, "person_id")
        site_id = require_text(data, "site_id")
        mark_type = _require_mark_type(data, (MarkType.IN, MarkType.OUT))

        lat = require_number(data, "lat")
        lng = require_number(data, "lng")
        if not is_valid_coordinate(lat, lng):
            raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "lat/lng"})

        accuracy = require_number(data, "accuracy")
        if accuracy < 0:
            raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "accuracy"})

        return cls(
            person_id=person_id,
            site_id=site_id,
            mark_type=mark_type,
            position=Coordinate(lat=lat, lng=lng),
            accuracy_m=accuracy,
            device_id=require_text(data, "device_id"),
            selfie_base64=require_text(data, "selfie_base64"),
            qr_code=require_text(data, "qr_code"),
        )


@dataclass(frozen=True)
class BreakRequest:
    """A validated lunch mark: no position, no evidence."""

    person_id: str
    site_id: str
    mark_type: MarkType
    qr_code: str
    device_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "BreakRequest":
        data = _require_mapping(payload)
        person_id = require_text(data, "person_id")
        site_id = require_text(data, "site_id")
        mark_type = _require_mark_type(data, (MarkType.LUNCH_OUT, MarkType.LUNCH_IN))
        qr_code = require_text(data, "qr_code")
        device_id = require_text(data, "device_id") if data.get("device_id") is not None else None
        return cls(person_id=person_id, site_id=site_id, mark_type=mark_type, qr_code=qr_code, device_id=device_id)


@dataclass(frozen=True)
class CheckinResult:
    mark_id: int
    mark_type: MarkType
    recorded_at: datetime
    distance_m: Optional[float] = None
    evidence_ref: Optional[str] = None

    def to_dict(self) -> dict:
        body = {"ok": True, "type": self.mark_type.value, "recorded_at": self.recorded_at.isoformat()}
        if self.distance_m is not None:
            body["distance_m"] = round(self.distance_m, 1)
        return body
