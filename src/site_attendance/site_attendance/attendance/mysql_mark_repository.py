from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import MarkType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime, to_mysql_datetime
from .model import AttendanceMark
from .repository import MarkRepository

logger = logging.getLogger(__name__)


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _to_mark(row: Dict[str, Any]) -> Optional[AttendanceMark]:
    observed_at = normalize_mysql_datetime(row.get("created_at"))
    if observed_at is None:
        return None
    return AttendanceMark(
        mark_id=int(row["mark_id"]),
        person_id=str(row["person_id"]),
        site_id=str(row["site_id"]),
        mark_type=MarkType.parse(row.get("type")),
        observed_at=observed_at,
        lat=_opt_float(row.get("lat")),
        lng=_opt_float(row.get("lng")),
        accuracy_m=_opt_float(row.get("accuracy_m")),
        device_id=row.get("device_id"),
        evidence_ref=row.get("selfie_path") or None,
    )


class MySQLMarkRepository(MarkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, mark: AttendanceMark) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    person_id, site_id, type, created_at,
                    lat, lng, accuracy_m, device_id, selfie_path, source
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,'web')
                """,
                (
                    mark.person_id,
                    mark.site_id,
                    mark.mark_type.value,
                    to_mysql_datetime(mark.observed_at),
                    mark.lat,
                    mark.lng,
                    mark.accuracy_m,
                    mark.device_id,
                    mark.evidence_ref,
                ),
            )
            return int(cur.lastrowid)

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        site_id: Optional[str] = None,
        person_id: Optional[str] = None,
    ) -> Sequence[AttendanceMark]:
        clauses = ["created_at >= %s", "created_at < %s"]
        params: list[object] = [to_mysql_datetime(start), to_mysql_datetime(end)]

        if site_id is not None:
            clauses.append("site_id=%s")
            params.append(site_id)
        if person_id is not None:
            clauses.append("person_id=%s")
            params.append(person_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT mark_id, person_id, site_id, type, created_at,
                       lat, lng, accuracy_m, device_id, selfie_path
                FROM attendance
                WHERE {where}
                ORDER BY created_at ASC, mark_id ASC
                """,
                tuple(params),
            )
            marks = []
            for r in fetchall(cur):
                mark = _to_mark(r)
                if mark is None:
                    logger.warning("skipping attendance row %s without timestamp", r.get("mark_id"))
                    continue
                marks.append(mark)
            return marks
