from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceInterval, AttendanceRow


class AttendanceRepository(Protocol):
    def find_open_by_user(self, user_id: int) -> Optional[AttendanceInterval]:
        raise NotImplementedError

    def find_by_check_in_range(self, start: datetime, end: datetime) -> Sequence[AttendanceInterval]:
        """Intervals whose check-in lies in ``[start, end]`` (both inclusive)."""

        raise NotImplementedError

    def list_rows(self, *, open_only: Optional[bool] = None) -> Sequence[AttendanceRow]:
        """``open_only=True`` for open sessions, ``False`` for closed, ``None`` for all."""

        raise NotImplementedError

    def create(self, *, user_id: int, reason_id: int, check_in: datetime) -> AttendanceInterval:
        """Open a session. Raises ``ConflictError`` if one is already open."""

        raise NotImplementedError

    def close(self, *, attendance_id: int, check_out: datetime) -> bool:
        raise NotImplementedError

    def close_open_before(self, deadline: datetime) -> int:
        """Set ``check_out=deadline`` on every open session checked in at or before it."""

        raise NotImplementedError
