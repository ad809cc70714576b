from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Reason
from .repository import ReasonRepository


class MySQLReasonRepository(ReasonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_name(self, name: str) -> Optional[Reason]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT reason_id, name FROM reasons WHERE name=%s", (name,))
            row = fetchone(cur)
            if not row:
                return None
            return Reason(reason_id=int(row["reason_id"]), name=row["name"])
