from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.auth import login_required
from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response, json_response
from ..core.exceptions import StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/summary", methods=["GET"], endpoint="api_attendance_summary")
    def api_attendance_summary():
        raw_start = (request.args.get("start") or "").strip()
        raw_end = (request.args.get("end") or "").strip()
        if not raw_start or not raw_end:
            return error_response("missing_date_range", 400)
        try:
            start = parse_iso_date(raw_start)
            end = parse_iso_date(raw_end)
        except ValueError:
            return error_response("invalid_date_range", 400)

        try:
            report = container.report_service.build_report(
                start=start,
                end=end,
                site_id=(request.args.get("site_id") or "").strip() or None,
                name_query=(request.args.get("q") or "").strip() or None,
            )
        except ValidationError:
            return error_response("invalid_date_range", 400)
        except StorageError as e:
            logger.error("summary lookups failed: %s", e)
            return error_response("dependency_unavailable", 503)

        return json_response(report.to_dict())

    @app.route("/api/my/attendance", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def api_my_attendance():
        month = (request.args.get("month") or "").strip()
        if not month:
            month = container.bucketing.to_local(container.clock()).strftime("%Y-%m")

        try:
            view = container.report_service.build_person_month(person_id=str(session["person_id"]), month=month)
        except ValidationError:
            return error_response("invalid_month", 400)
        except StorageError as e:
            logger.error("monthly view failed: %s", e)
            return error_response("dependency_unavailable", 503)

        return json_response(view.to_dict())
