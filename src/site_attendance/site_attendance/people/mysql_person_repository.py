from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Person
from .repository import PersonRepository

_COLUMNS = "person_id, full_name, role, site_id, active"


def _to_person(row: Dict[str, Any]) -> Person:
    return Person(
        person_id=str(row["person_id"]),
        full_name=row.get("full_name") or "",
        role=Role.parse(row.get("role")),
        active=bool(row.get("active", True)),
        assigned_site_id=row.get("site_id"),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, person_id: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM people WHERE person_id=%s", (person_id,))
            row = fetchone(cur)
            return _to_person(row) if row else None

    def list_by_ids(self, person_ids: Iterable[str]) -> Sequence[Person]:
        ids = sorted(set(person_ids))
        if not ids:
            return []
        placeholders = ", ".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM people WHERE person_id IN ({placeholders})", tuple(ids))
            return [_to_person(r) for r in fetchall(cur)]
