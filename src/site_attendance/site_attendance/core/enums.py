from __future__ import annotations

from enum import Enum
from typing import Optional

from ..common.text import fold_text


class Role(str, Enum):
    """Closed set of roles used for eligibility and report population."""

    ADMIN = "admin"
    MANAGEMENT = "management"
    COORDINATOR = "coordinator"
    LEADER = "leader"
    ADVISOR = "advisor"
    PROMOTER = "promoter"
    LOGISTICS = "logistics"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Role":
        """Map a raw role label to a Role. Unrecognised labels become UNKNOWN."""
        folded = fold_text(raw)
        if not folded:
            return cls.UNKNOWN
        direct = _ROLE_SYNONYMS.get(folded)
        if direct is not None:
            return direct
        for prefix, role in _ROLE_PREFIXES:
            if folded.startswith(prefix):
                return role
        return cls.UNKNOWN


_ROLE_SYNONYMS = {
    "admin": Role.ADMIN,
    "administrador": Role.ADMIN,
    "management": Role.MANAGEMENT,
    "gerencia": Role.MANAGEMENT,
    "coordinator": Role.COORDINATOR,
    "leader": Role.LEADER,
    "lider": Role.LEADER,
    "supervisor": Role.LEADER,
    "supervisora": Role.LEADER,
    "advisor": Role.ADVISOR,
    "asesor": Role.ADVISOR,
    "asesora": Role.ADVISOR,
    "vendedor": Role.ADVISOR,
    "vendedora": Role.ADVISOR,
    "promoter": Role.PROMOTER,
    "promotor": Role.PROMOTER,
    "promotora": Role.PROMOTER,
    "logistics": Role.LOGISTICS,
    "logistica": Role.LOGISTICS,
}

# "coordinador", "coordinadora", "coordinador regional", ...
_ROLE_PREFIXES = (
    ("coordinad", Role.COORDINATOR),
    ("promotor", Role.PROMOTER),
)


class MarkType(str, Enum):
    """Kind of a raw attendance mark."""

    IN = "in"
    OUT = "out"
    LUNCH_OUT = "lunch_out"
    LUNCH_IN = "lunch_in"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "MarkType":
        return _MARK_SYNONYMS.get(fold_text(raw), cls.UNKNOWN)


_MARK_SYNONYMS = {
    "in": MarkType.IN,
    "entrada": MarkType.IN,
    "out": MarkType.OUT,
    "salida": MarkType.OUT,
    "lunch_out": MarkType.LUNCH_OUT,
    "lunch_in": MarkType.LUNCH_IN,
}


class RejectReason(str, Enum):
    """Why a check-in (or token request) was refused. Values are wire error codes."""

    BAD_JSON = "bad_json"
    MISSING_FIELD = "missing_field"
    TYPE_INVALID = "type_invalid"
    ACCURACY_TOO_LOW = "accuracy_too_high"
    PERSON_NOT_FOUND = "person_not_found"
    PERSON_INACTIVE = "person_inactive"
    ROLE_NOT_ALLOWED = "role_not_allowed"
    SITE_NOT_FOUND = "site_not_found"
    SITE_UNAVAILABLE = "site_unavailable"
    SITE_MISMATCH = "site_mismatch"
    OUTSIDE_GEOFENCE = "outside_geofence"
    TOKEN_INVALID_OR_EXPIRED = "qr_invalid_or_expired"
    EVIDENCE_UPLOAD_FAILED = "upload_failed"
    PERSIST_FAILED = "insert_failed"
    DEPENDENCY_UNAVAILABLE = "dependency_unavailable"


class ReportRowType(str, Enum):
    DAY = "day"
    PERSON_TOTAL = "person_total"
