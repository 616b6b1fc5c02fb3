"""Example: call the report service directly, without going through Flask.

Controllers are thin; the weekly compliance numbers below come straight from
the service layer over the configured MySQL database.
"""

import importlib
import json
from datetime import date, timedelta

from config import get_settings_module

from src.site_attendance.site_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, evidence_dir=settings.EVIDENCE_DIR)

    end = date.today()
    report = container.report_service.build_report(start=end - timedelta(days=6), end=end)
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
