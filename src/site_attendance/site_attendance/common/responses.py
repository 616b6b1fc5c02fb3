from __future__ import annotations

from flask import jsonify

from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected

HTTP_STATUS = {
    RejectReason.BAD_JSON: 400,
    RejectReason.MISSING_FIELD: 400,
    RejectReason.TYPE_INVALID: 400,
    RejectReason.ACCURACY_TOO_LOW: 400,
    RejectReason.PERSON_NOT_FOUND: 404,
    RejectReason.SITE_NOT_FOUND: 404,
    RejectReason.PERSON_INACTIVE: 403,
    RejectReason.ROLE_NOT_ALLOWED: 403,
    RejectReason.SITE_UNAVAILABLE: 403,
    RejectReason.SITE_MISMATCH: 403,
    RejectReason.OUTSIDE_GEOFENCE: 403,
    RejectReason.TOKEN_INVALID_OR_EXPIRED: 403,
    RejectReason.EVIDENCE_UPLOAD_FAILED: 500,
    RejectReason.PERSIST_FAILED: 500,
    RejectReason.DEPENDENCY_UNAVAILABLE: 503,
}


def json_response(body: dict, status: int = 200):
    resp = jsonify(body)
    resp.status_code = status
    resp.headers["Cache-Control"] = "no-store"
    return resp


def error_response(error: str, status: int, **extra):
    return json_response({"error": error, **extra}, status)


def rejection_response(exc: CheckinRejected):
    return error_response(exc.reason.value, HTTP_STATUS.get(exc.reason, 400), **exc.details)
