from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Admin
from .repository import AdminRepository


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT admin_id, email, name, password_hash, is_active
                FROM admins
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Admin(
                admin_id=int(row["admin_id"]),
                email=row["email"],
                name=row["name"],
                password_hash=row["password_hash"],
                is_active=bool(row.get("is_active", True)),
            )
