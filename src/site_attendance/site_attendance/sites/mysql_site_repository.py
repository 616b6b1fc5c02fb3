from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.constants import DEFAULT_SITE_RADIUS_M
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Site
from .repository import SiteRepository

_COLUMNS = "site_id, name, lat, lng, radius_m, is_active"


def _to_site(row: Dict[str, Any]) -> Site:
    radius = row.get("radius_m")
    return Site(
        site_id=str(row["site_id"]),
        name=row.get("name"),
        lat=float(row["lat"]) if row.get("lat") is not None else None,
        lng=float(row["lng"]) if row.get("lng") is not None else None,
        radius_m=float(radius) if radius is not None else DEFAULT_SITE_RADIUS_M,
        is_active=bool(row.get("is_active", True)),
    )


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, site_id: str) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE site_id=%s", (site_id,))
            row = fetchone(cur)
            return _to_site(row) if row else None

    def list_by_ids(self, site_ids: Iterable[str]) -> Sequence[Site]:
        ids = sorted(set(site_ids))
        if not ids:
            return []
        placeholders = ", ".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE site_id IN ({placeholders})", tuple(ids))
            return [_to_site(r) for r in fetchall(cur)]
