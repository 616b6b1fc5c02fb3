from __future__ import annotations

import logging

from flask import Flask, request

from ..common.responses import error_response, json_response, rejection_response
from ..core.exceptions import CheckinRejected
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/checkin", methods=["POST"], endpoint="checkin")
    def checkin():
        """Entrada/salida from the field app: GPS fix, selfie and scanned site code."""
        payload = request.get_json(silent=True)
        try:
            result = container.checkin_service.check_in(payload)
        except CheckinRejected as e:
            return rejection_response(e)
        except Exception:
            logger.exception("check-in failed unexpectedly")
            return error_response("internal_error", 500)
        return json_response(result.to_dict())

    @app.route("/checkin/break", methods=["POST"], endpoint="checkin_break")
    def checkin_break():
        payload = request.get_json(silent=True)
        try:
            result = container.checkin_service.record_break(payload)
        except CheckinRejected as e:
            return rejection_response(e)
        except Exception:
            logger.exception("break mark failed unexpectedly")
            return error_response("internal_error", 500)
        return json_response(result.to_dict())
