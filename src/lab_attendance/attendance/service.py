from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..common.datetime_utils import now_local, parse_hhmm, parse_instant
from ..common.validators import require_fields, require_object
from ..core.constants import TOP_USERS_LIMIT
from ..core.enums import SessionState
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..labconfig.store import LabConfigStore
from ..reasons.repository import ReasonRepository
from ..users.repository import UserRepository
from .model import AttendanceInterval, AttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserTime:
    user_id: int
    email: str
    name: str
    last_name: str
    total_ms: int
    session_count: int

    def to_dict(self) -> dict:
        hour_ms = 1000 * 60 * 60
        return {
            "userId": self.user_id,
            "email": self.email,
            "name": self.name,
            "lastName": self.last_name,
            "totalTime": self.total_ms,
            "sessionCount": self.session_count,
            "totalTimeHours": round(self.total_ms / hour_ms, 2),
            "averageSessionHours": round(self.total_ms / self.session_count / hour_ms, 2),
        }


class AttendanceService:
    """Use case: check users in and out of the lab.

    A user has at most one open session; check-in while one is open is a
    conflict and leaves the open session untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        reasons: ReasonRepository,
        config: LabConfigStore,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._reasons = reasons
        self._config = config
        self._clock = clock

    def check_in(self, payload: Mapping[str, Any]) -> AttendanceInterval:
        payload = dict(require_object(payload))
        if "reason" not in payload and "Reason" in payload:
            payload["reason"] = payload["Reason"]
        require_fields(payload, ("email", "checkIn", "reason"))
        check_in = parse_instant(payload["checkIn"], "checkIn")

        user = self._users.get_by_email(str(payload["email"]).strip())
        if not user:
            raise NotFoundError("User not found.")

        if self._attendance.find_open_by_user(user.user_id):
            raise ConflictError("User already has an open check-in. Please check out first.")

        reason = self._reasons.get_by_name(str(payload["reason"]).strip())
        if not reason:
            raise NotFoundError("Reason not found.")

        interval = self._attendance.create(user_id=user.user_id, reason_id=reason.reason_id, check_in=check_in)
        logger.info("Check-in user=%s reason=%s at %s", user.email, reason.name, check_in.isoformat())
        return interval

    def check_out(self, payload: Mapping[str, Any]) -> AttendanceInterval:
        require_fields(payload, ("email", "checkOut"))
        check_out = parse_instant(payload["checkOut"], "checkOut")

        user = self._users.get_by_email(str(payload["email"]).strip())
        if not user:
            raise NotFoundError("User not found.")

        open_interval = self._attendance.find_open_by_user(user.user_id)
        if not open_interval:
            raise NotFoundError("No open check-in found for this user.")
        if check_out < open_interval.check_in:
            raise ValidationError("checkOut cannot be earlier than the open check-in.")

        if not self._attendance.close(attendance_id=open_interval.attendance_id, check_out=check_out):
            # Closed concurrently (e.g. by the forced checkout) between read and write.
            raise NotFoundError("No open check-in found for this user.")

        logger.info("Check-out user=%s at %s", user.email, check_out.isoformat())
        return AttendanceInterval(
            attendance_id=open_interval.attendance_id,
            user_id=open_interval.user_id,
            reason_id=open_interval.reason_id,
            check_in=open_interval.check_in,
            check_out=check_out,
        )

    def checkout_deadline(self, *, now: Optional[datetime] = None) -> datetime:
        now = now or self._clock()
        return datetime.combine(now.date(), parse_hhmm(self._config.get().final_hour))

    def force_checkout(self, *, now: Optional[datetime] = None) -> int:
        """Close every session still open at today's closing hour.

        Safe to run repeatedly or concurrently: only sessions that are open and
        checked in at or before the deadline are touched.
        """
        deadline = self.checkout_deadline(now=now)
        closed = self._attendance.close_open_before(deadline)
        logger.info("Forced checkout at %s closed %d session(s)", deadline.isoformat(), closed)
        return closed

    def list_sessions(self, state: SessionState = SessionState.ALL) -> List[AttendanceRow]:
        open_only = {SessionState.OPEN: True, SessionState.CLOSED: False}.get(state)
        return list(self._attendance.list_rows(open_only=open_only))

    def top_users(self, *, limit: int = TOP_USERS_LIMIT) -> List[UserTime]:
        totals: Dict[int, dict] = {}
        for row in self._attendance.list_rows(open_only=False):
            duration_ms = int((row.check_out - row.check_in).total_seconds() * 1000)
            s = totals.get(row.user_id)
            if not s:
                s = {"row": row, "total_ms": 0, "sessions": 0}
                totals[row.user_id] = s
            s["total_ms"] += duration_ms
            s["sessions"] += 1

        ranked = sorted(totals.values(), key=lambda s: s["total_ms"], reverse=True)[:limit]
        return [
            UserTime(
                user_id=s["row"].user_id,
                email=s["row"].email,
                name=s["row"].name,
                last_name=s["row"].last_name,
                total_ms=s["total_ms"],
                session_count=s["sessions"],
            )
            for s in ranked
        ]
