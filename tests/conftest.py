from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from lab_attendance import create_app
from lab_attendance.admins.model import Admin
from lab_attendance.attendance.model import AttendanceInterval, AttendanceRow
from lab_attendance.container import wire_container
from lab_attendance.core.exceptions import ConflictError
from lab_attendance.heartbeat.model import InstanceConfiguration
from lab_attendance.labconfig.model import LabConfiguration
from lab_attendance.labconfig.store import LabConfigStore
from lab_attendance.reasons.model import Reason
from lab_attendance.users.model import User


class InMemoryUsers:
    def __init__(self, users):
        self._by_email = {u.email: u for u in users}
        self.by_id = {u.user_id: u for u in users}

    def get_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(email)


class InMemoryReasons:
    def __init__(self, reasons):
        self._by_name = {r.name: r for r in reasons}
        self.by_id = {r.reason_id: r for r in reasons}

    def get_by_name(self, name: str) -> Optional[Reason]:
        return self._by_name.get(name)


class InMemoryAdmins:
    def __init__(self, admins):
        self._by_email = {a.email: a for a in admins}

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self._by_email.get(email)


class InMemoryAttendance:
    """Mirrors the MySQL repository, including the one-open-session unique key."""

    def __init__(self, users: InMemoryUsers, reasons: InMemoryReasons):
        self._users = users
        self._reasons = reasons
        self.intervals: dict[int, AttendanceInterval] = {}
        self._id = 0

    def add(self, user_id: int, check_in: datetime, check_out: Optional[datetime] = None, reason_id: int = 1) -> AttendanceInterval:
        self._id += 1
        rec = AttendanceInterval(
            attendance_id=self._id,
            user_id=user_id,
            reason_id=reason_id,
            check_in=check_in,
            check_out=check_out,
        )
        self.intervals[rec.attendance_id] = rec
        return rec

    def find_open_by_user(self, user_id: int) -> Optional[AttendanceInterval]:
        for rec in self.intervals.values():
            if rec.user_id == user_id and rec.check_out is None:
                return rec
        return None

    def find_by_check_in_range(self, start: datetime, end: datetime):
        items = [r for r in self.intervals.values() if start <= r.check_in <= end]
        items.sort(key=lambda r: r.check_in)
        return items

    def list_rows(self, *, open_only=None):
        rows = []
        for r in self.intervals.values():
            if open_only is True and r.check_out is not None:
                continue
            if open_only is False and r.check_out is None:
                continue
            u = self._users.by_id[r.user_id]
            rows.append(
                AttendanceRow(
                    attendance_id=r.attendance_id,
                    user_id=r.user_id,
                    reason_id=r.reason_id,
                    check_in=r.check_in,
                    check_out=r.check_out,
                    email=u.email,
                    name=u.name,
                    last_name=u.last_name,
                    rut=u.rut,
                    reason=self._reasons.by_id[r.reason_id].name,
                )
            )
        rows.sort(key=lambda r: r.check_in, reverse=True)
        return rows

    def create(self, *, user_id: int, reason_id: int, check_in: datetime) -> AttendanceInterval:
        if self.find_open_by_user(user_id):
            raise ConflictError("User already has an open check-in. Please check out first.")
        return self.add(user_id, check_in, None, reason_id)

    def close(self, *, attendance_id: int, check_out: datetime) -> bool:
        rec = self.intervals.get(attendance_id)
        if not rec or rec.check_out is not None:
            return False
        self.intervals[attendance_id] = AttendanceInterval(
            attendance_id=rec.attendance_id,
            user_id=rec.user_id,
            reason_id=rec.reason_id,
            check_in=rec.check_in,
            check_out=check_out,
        )
        return True

    def close_open_before(self, deadline: datetime) -> int:
        n = 0
        for rec in list(self.intervals.values()):
            if rec.check_out is None and rec.check_in <= deadline:
                self.close(attendance_id=rec.attendance_id, check_out=deadline)
                n += 1
        return n


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2026, 2, 4, 12, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id=1, email="ana@example.edu", name="Ana", last_name="Pérez", rut="1-9"),
            User(user_id=2, email="bruno@example.edu", name="Bruno", last_name="Soto", rut="2-7"),
            User(user_id=3, email="carla@example.edu", name="Carla", last_name="Rojas", rut="3-5"),
        ]
    )


@pytest.fixture
def reasons_repo() -> InMemoryReasons:
    return InMemoryReasons([Reason(reason_id=1, name="Estudio"), Reason(reason_id=2, name="Clases")])


@pytest.fixture
def admins_repo() -> InMemoryAdmins:
    return InMemoryAdmins(
        [
            Admin(admin_id=1, email="admin@example.edu", name="Admin", password_hash=generate_password_hash("secret123")),
            Admin(
                admin_id=2,
                email="old@example.edu",
                name="Old",
                password_hash=generate_password_hash("secret123"),
                is_active=False,
            ),
        ]
    )


@pytest.fixture
def attendance_repo(users_repo, reasons_repo) -> InMemoryAttendance:
    return InMemoryAttendance(users_repo, reasons_repo)


@pytest.fixture
def lab_config() -> LabConfigStore:
    return LabConfigStore(None, defaults=LabConfiguration(inicial_hour="08:30", final_hour="17:30", max_capacity=10))


@pytest.fixture
def instance() -> InstanceConfiguration:
    return InstanceConfiguration.from_dict(
        {
            "instance_id": "LAB_TEST",
            "name": "Test lab",
            "port": 3000,
            "description": "Lab used by the test-suite",
            "main_server_url": "http://coordinator.test",
            "environment": "test",
        }
    )


@pytest.fixture
def container(users_repo, reasons_repo, admins_repo, attendance_repo, lab_config, instance, fixed_now):
    return wire_container(
        users_repo=users_repo,
        reasons_repo=reasons_repo,
        admins_repo=admins_repo,
        attendance_repo=attendance_repo,
        lab_config=lab_config,
        secret_key="test-secret",
        instance=instance,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def app(container):
    return create_app("lab_attendance.settings.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(container) -> dict:
    token = container.tokens.issue("admin@example.edu")
    return {"Authorization": f"Bearer {token}"}
