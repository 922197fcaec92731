"""Schema creation and demo seed data for local development."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # username, password, role, name, email
    ("admin", "admin123", "admin", "Admin User", "admin@company.com"),
    ("john", "john123", "user", "John Doe", "john@company.com"),
    ("jane", "jane123", "user", "Jane Smith", "jane@company.com"),
)

DEMO_PARTIES = (
    ("ABC Corporation", "Main corporate client"),
    ("XYZ Industries", "Manufacturing partner"),
    ("Tech Solutions Ltd", "Technology consulting"),
    ("Global Services Inc", "International services provider"),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "attendance_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(_strip_comments(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def seed_demo_data(db_config: dict) -> None:
    """Upsert demo users and, when none exist yet, the demo parties."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        for username, password, role, name, email in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users(username, password_hash, name, email, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE
                    password_hash=VALUES(password_hash), name=VALUES(name), role=VALUES(role), is_active=1
                """,
                (username, generate_password_hash(password), name, email, role),
            )

        cur.execute("SELECT user_id FROM users WHERE username=%s", ("admin",))
        admin_id = int(cur.fetchone()["user_id"])

        cur.execute("SELECT COUNT(*) AS n FROM parties")
        if int(cur.fetchone()["n"]) == 0:
            for name, description in DEMO_PARTIES:
                cur.execute(
                    "INSERT INTO parties(name, description, is_active, created_by) VALUES(%s,%s,1,%s)",
                    (name, description, admin_id),
                )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users and parties seeded")


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
