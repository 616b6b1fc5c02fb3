from __future__ import annotations

import io
import logging

from flask import Flask, request, send_file, session

from ..common.auth import login_required
from ..common.responses import error_response, json_response, rejection_response
from ..core.exceptions import CheckinRejected, StorageError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/qr", methods=["GET"], endpoint="api_attendance_qr")
    @login_required
    def api_attendance_qr():
        site_id = (request.args.get("site_id") or "").strip()
        mark_type = (request.args.get("type") or "").strip()
        if not site_id:
            return error_response("site_id_required", 400)
        if not mark_type:
            return error_response("type_required", 400)

        try:
            token = container.token_service.issue(
                person_id=str(session["person_id"]),
                site_id=site_id,
                mark_type=mark_type,
                ttl=request.args.get("ttl"),
            )
        except CheckinRejected as e:
            return rejection_response(e)
        except StorageError as e:
            logger.warning("token issue failed: %s", e)
            return error_response("dependency_unavailable", 503)

        return json_response(
            {
                "ok": True,
                "code": token.code,
                "site_id": token.site_id,
                "exp_at": token.expires_at.isoformat(),
            }
        )

    @app.route("/api/attendance/qr/image", methods=["GET"], endpoint="api_attendance_qr_image")
    @login_required
    def api_attendance_qr_image():
        code = (request.args.get("code") or "").strip()
        if not code:
            return error_response("code_required", 400)

        buf = io.BytesIO(container.token_service.render_qr_png(code))
        resp = send_file(buf, mimetype="image/png")
        resp.headers["Cache-Control"] = "no-store"
        return resp
