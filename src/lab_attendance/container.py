from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AuthService
from .admins.tokens import TokenService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .database.connection import DatabaseConnection, DBConfig
from .heartbeat.client import HeartbeatClient
from .heartbeat.model import InstanceConfiguration
from .heartbeat.monitor import HeartbeatMonitor
from .labconfig.model import LabConfiguration
from .labconfig.service import LabConfigService
from .labconfig.store import LabConfigStore
from .reasons.mysql_reason_repository import MySQLReasonRepository
from .reasons.repository import ReasonRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .utilization.service import UtilizationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    reasons_repo: ReasonRepository
    admins_repo: AdminRepository
    attendance_repo: AttendanceRepository

    lab_config: LabConfigStore
    tokens: TokenService
    instance: InstanceConfiguration
    heartbeat_monitor: HeartbeatMonitor
    heartbeat_client: HeartbeatClient

    auth_service: AuthService
    config_service: LabConfigService
    attendance_service: AttendanceService
    utilization_service: UtilizationService


def wire_container(
    *,
    users_repo: UserRepository,
    reasons_repo: ReasonRepository,
    admins_repo: AdminRepository,
    attendance_repo: AttendanceRepository,
    lab_config: LabConfigStore,
    secret_key: str,
    instance: InstanceConfiguration,
    token_ttl_hours: int = 8,
    heartbeat_timeout: float = 10,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over the given repositories (MySQL or in-memory)."""
    tokens = TokenService(secret_key, ttl_hours=token_ttl_hours)
    monitor = HeartbeatMonitor()

    return Container(
        conn=conn,
        users_repo=users_repo,
        reasons_repo=reasons_repo,
        admins_repo=admins_repo,
        attendance_repo=attendance_repo,
        lab_config=lab_config,
        tokens=tokens,
        instance=instance,
        heartbeat_monitor=monitor,
        heartbeat_client=HeartbeatClient(instance, monitor, timeout=heartbeat_timeout),
        auth_service=AuthService(admins_repo, tokens),
        config_service=LabConfigService(lab_config),
        attendance_service=AttendanceService(attendance_repo, users_repo, reasons_repo, lab_config, clock=clock),
        utilization_service=UtilizationService(attendance_repo, lab_config, clock=clock),
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    defaults = LabConfiguration.from_document(getattr(settings, "DEFAULT_LAB_CONFIG", {}))
    lab_config = LabConfigStore(getattr(settings, "LAB_CONFIG_PATH", None), defaults=defaults)

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        reasons_repo=MySQLReasonRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        lab_config=lab_config,
        secret_key=getattr(settings, "SECRET_KEY"),
        instance=InstanceConfiguration.from_dict(getattr(settings, "INSTANCE_CONFIG", {})),
        token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", 8)),
        heartbeat_timeout=float(getattr(settings, "HEARTBEAT_TIMEOUT", 10)),
        conn=conn,
    )
