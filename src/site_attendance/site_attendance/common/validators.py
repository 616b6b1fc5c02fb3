from __future__ import annotations

import math
from typing import Any, Mapping

from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected


def require_text(payload: Mapping[str, Any], field_name: str) -> str:
    """Required identifier-like field. Integers are accepted and stringified."""
    value = payload.get(field_name)
    if value is None:
        raise CheckinRejected(RejectReason.MISSING_FIELD, {"field": field_name})
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": field_name})
    text = str(value).strip()
    if not text:
        raise CheckinRejected(RejectReason.MISSING_FIELD, {"field": field_name})
    return text


def require_number(payload: Mapping[str, Any], field_name: str) -> float:
    value = payload.get(field_name)
    if value is None:
        raise CheckinRejected(RejectReason.MISSING_FIELD, {"field": field_name})
    # bool is an int subclass; JSON true/false is not a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": field_name})
    number = float(value)
    if not math.isfinite(number):
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": field_name})
    return number
