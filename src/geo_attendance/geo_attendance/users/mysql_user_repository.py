from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT user_id, username, password_hash, name, email, role, is_active, reset_otp, reset_otp_expires
    FROM users
"""


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        reset_otp=row.get("reset_otp"),
        reset_otp_expires=row.get("reset_otp_expires"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where, (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one(" WHERE user_id=%s", user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one(" WHERE username=%s", username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one(" WHERE email=%s", email)

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        name: str,
        email: str,
        role: Role,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, password_hash, name, email, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (username, password_hash, name, email, role.value),
            )
            return int(cur.lastrowid)

    def set_reset_otp(self, user_id: int, *, otp: Optional[str], expires: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_otp=%s, reset_otp_expires=%s WHERE user_id=%s",
                (otp, expires, int(user_id)),
            )
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET password_hash=%s, reset_otp=NULL, reset_otp_expires=NULL
                WHERE user_id=%s
                """,
                (password_hash, int(user_id)),
            )
            return cur.rowcount > 0
