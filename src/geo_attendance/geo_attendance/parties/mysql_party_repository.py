from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Party
from .repository import PartyRepository

_SELECT = """
    SELECT p.party_id, p.name, p.description, p.is_active, p.created_by,
           u.name AS created_by_name, p.created_at, p.updated_at
    FROM parties p
    LEFT JOIN users u ON u.user_id = p.created_by
"""


def _row_to_party(r: Dict[str, Any]) -> Party:
    return Party(
        party_id=int(r["party_id"]),
        name=r["name"],
        description=r.get("description") or "",
        is_active=bool(r.get("is_active", True)),
        created_by=r.get("created_by"),
        created_by_name=r.get("created_by_name"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPartyRepository(PartyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, party_id: int) -> Optional[Party]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.party_id=%s", (party_id,))
            row = fetchone(cur)
            return _row_to_party(row) if row else None

    def find_active_by_name(self, name: str, *, exclude_id: Optional[int] = None) -> Optional[Party]:
        sql = _SELECT + " WHERE p.name=%s AND p.is_active=1"
        params: list[object] = [name]
        if exclude_id is not None:
            sql += " AND p.party_id<>%s"
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            row = fetchone(cur)
            return _row_to_party(row) if row else None

    def list_active(self) -> Sequence[Party]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.is_active=1 ORDER BY p.name ASC")
            return [_row_to_party(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Party]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY p.name ASC")
            return [_row_to_party(r) for r in fetchall(cur)]

    def create(self, *, name: str, description: str, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO parties(name, description, is_active, created_by)
                VALUES(%s,%s,1,%s)
                """,
                (name, description, created_by),
            )
            return int(cur.lastrowid)

    def update(self, *, party_id: int, name: str, description: str, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE parties
                SET name=%s, description=%s, is_active=%s
                WHERE party_id=%s
                """,
                (name, description, 1 if is_active else 0, int(party_id)),
            )
            return cur.rowcount > 0

    def set_active(self, party_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE parties SET is_active=%s WHERE party_id=%s",
                (1 if is_active else 0, int(party_id)),
            )
            return cur.rowcount > 0
