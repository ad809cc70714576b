from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceInterval, AttendanceRow
from .repository import AttendanceRepository

_INTERVAL_COLUMNS = "attendance_id, user_id, reason_id, check_in, check_out"


def _to_interval(r: dict) -> AttendanceInterval:
    return AttendanceInterval(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        reason_id=int(r["reason_id"]),
        check_in=r["check_in"],
        check_out=r.get("check_out"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open_by_user(self, user_id: int) -> Optional[AttendanceInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INTERVAL_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND check_out IS NULL
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return _to_interval(r) if r else None

    def find_by_check_in_range(self, start: datetime, end: datetime) -> Sequence[AttendanceInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INTERVAL_COLUMNS}
                FROM attendance
                WHERE check_in BETWEEN %s AND %s
                ORDER BY check_in ASC
                """,
                (start, end),
            )
            return [_to_interval(r) for r in fetchall(cur)]

    def list_rows(self, *, open_only: Optional[bool] = None) -> Sequence[AttendanceRow]:
        where = ""
        if open_only is True:
            where = "WHERE a.check_out IS NULL"
        elif open_only is False:
            where = "WHERE a.check_out IS NOT NULL"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.user_id, a.reason_id, a.check_in, a.check_out,
                    u.email, u.name, u.last_name, u.rut,
                    r.name AS reason
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                JOIN reasons r ON r.reason_id = a.reason_id
                {where}
                ORDER BY a.check_in DESC
                """
            )
            return [
                AttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    user_id=int(r["user_id"]),
                    reason_id=int(r["reason_id"]),
                    check_in=r["check_in"],
                    check_out=r.get("check_out"),
                    email=r["email"],
                    name=r["name"],
                    last_name=r["last_name"],
                    rut=r.get("rut"),
                    reason=r["reason"],
                )
                for r in fetchall(cur)
            ]

    def create(self, *, user_id: int, reason_id: int, check_in: datetime) -> AttendanceInterval:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(user_id, reason_id, check_in, check_out)
                    VALUES(%s,%s,%s,NULL)
                    """,
                    (user_id, reason_id, check_in),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("User already has an open check-in. Please check out first.") from e
            raise

        return AttendanceInterval(
            attendance_id=attendance_id,
            user_id=user_id,
            reason_id=reason_id,
            check_in=check_in,
            check_out=None,
        )

    def close(self, *, attendance_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s
                WHERE attendance_id=%s AND check_out IS NULL
                """,
                (check_out, attendance_id),
            )
            return cur.rowcount > 0

    def close_open_before(self, deadline: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s
                WHERE check_out IS NULL AND check_in <= %s
                """,
                (deadline, deadline),
            )
            return int(cur.rowcount)
