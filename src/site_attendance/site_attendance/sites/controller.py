from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, json_response, rejection_response
from ..common.validators import require_number, require_text
from ..core.exceptions import CheckinRejected, StorageError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/debug/distance", methods=["POST"], endpoint="api_debug_distance")
    def api_debug_distance():
        """How far a reported position is from a site's registered center."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return error_response("bad_json", 400)

        try:
            site_id = require_text(payload, "site_id")
            lat = require_number(payload, "lat")
            lng = require_number(payload, "lng")
            report = container.site_locator.distance_report(site_id, lat, lng)
        except CheckinRejected as e:
            return rejection_response(e)
        except ValidationError as e:
            return error_response("bad_input", 400, message=str(e))
        except StorageError:
            return error_response("dependency_unavailable", 503)

        return json_response({"ok": True, **report.to_dict()})
