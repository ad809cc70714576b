from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_sql_file(conn_factory: DatabaseConnection, path: Path) -> None:
    sql = _strip_create_db_and_use(path.read_text(encoding="utf-8"))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(conn_factory)
    _apply_sql_file(conn_factory, Path(schema_path))
    logger.info("Schema applied to %s", conn_factory.config.database)


def apply_seed_sql(conn_factory: DatabaseConnection, *, seed_path: str | Path = SEED_PATH) -> None:
    _apply_sql_file(conn_factory, Path(seed_path))
    logger.info("Seed data applied to %s", conn_factory.config.database)


def ensure_default_admin(conn_factory: DatabaseConnection, *, email: str, password: str, name: str = "Administrator") -> None:
    """Create the bootstrap admin account, or reset its password if it exists."""
    password_hash = generate_password_hash(password)
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT admin_id FROM admins WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute(
                "UPDATE admins SET password_hash=%s, is_active=1 WHERE email=%s",
                (password_hash, email),
            )
        else:
            cur.execute(
                "INSERT INTO admins (email, name, password_hash) VALUES (%s, %s, %s)",
                (email, name, password_hash),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Default admin %s ready", email)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
