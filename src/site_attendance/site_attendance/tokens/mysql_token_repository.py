from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_datetime, to_mysql_datetime
from .model import AccessToken
from .repository import AccessTokenRepository


class MySQLAccessTokenRepository(AccessTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_valid(self, *, site_id: str, code: str, now: datetime) -> Optional[AccessToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT site_id, code, exp_at
                FROM qr_tokens
                WHERE site_id=%s AND code=%s AND exp_at > %s
                LIMIT 1
                """,
                (site_id, code, to_mysql_datetime(now)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AccessToken(
                site_id=str(r["site_id"]),
                code=r["code"],
                expires_at=normalize_mysql_datetime(r["exp_at"]),
            )

    def create(self, token: AccessToken) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO qr_tokens(site_id, code, exp_at) VALUES(%s,%s,%s)",
                (token.site_id, token.code, to_mysql_datetime(token.expires_at)),
            )

    def purge_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM qr_tokens WHERE exp_at < %s", (to_mysql_datetime(now),))
            return int(cur.rowcount or 0)
