from __future__ import annotations

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from ..core.enums import RejectReason
from ..core.exceptions import CheckinRejected

JPEG_QUALITY = 85


def decode_evidence(raw: str) -> bytes:
    """Turn a base64 string or data URL into JPEG bytes.

    Anything that is not a decodable image is rejected as ``type_invalid``.
    """
    payload = raw.split(",", 1)[1] if "," in raw else raw
    try:
        data = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "selfie_base64"}) from exc

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            buf = io.BytesIO()
            img.convert("RGB").save(buf, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError) as exc:
        raise CheckinRejected(RejectReason.TYPE_INVALID, {"field": "selfie_base64"}) from exc
    return buf.getvalue()
