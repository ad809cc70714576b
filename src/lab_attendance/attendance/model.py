from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceInterval:
    """One user's check-in/check-out session.

    ``check_out is None`` means the session is still open.
    """

    attendance_id: int
    user_id: int
    reason_id: int
    check_in: datetime
    check_out: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "reasonId": self.reason_id,
            "checkIn": self.check_in.isoformat(),
            "checkOut": self.check_out.isoformat() if self.check_out else None,
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model joining an interval with its user and reason."""

    attendance_id: int
    user_id: int
    reason_id: int
    check_in: datetime
    check_out: Optional[datetime]
    email: str
    name: str
    last_name: str
    rut: Optional[str]
    reason: str

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "reasonId": self.reason_id,
            "checkIn": self.check_in.isoformat(),
            "checkOut": self.check_out.isoformat() if self.check_out else None,
            "email": self.email,
            "name": self.name,
            "lastName": self.last_name,
            "rut": self.rut,
            "reason": self.reason,
        }
