"""Lab attendance API.

Feature modules (attendance, utilization, labconfig, heartbeat, admins) each
own their model, repository and service, with a thin Flask controller that
registers its routes on the app.
"""
from __future__ import annotations

import atexit
import importlib
import logging
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .admins.controller import register as register_admins
from .attendance.controller import register as register_attendance
from .common.log_setup import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_admin, list_tables
from .heartbeat.controller import register as register_heartbeat
from .jobs.scheduler import BackgroundJobs
from .labconfig.controller import register as register_config
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def _load_settings(settings_module: Optional[str]) -> ModuleType:
    return importlib.import_module(settings_module or get_settings_module())


def _bootstrap_database(container: Container, settings: ModuleType) -> None:
    if container.conn is None:
        return
    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(container.conn)
        logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(container.conn)
        admin = getattr(settings, "DEFAULT_ADMIN", {}) or {}
        if admin.get("email") and admin.get("password"):
            ensure_default_admin(container.conn, email=admin["email"], password=admin["password"])


def _start_jobs(container: Container, settings: ModuleType) -> Optional[BackgroundJobs]:
    if not getattr(settings, "SCHEDULER_ENABLED", False):
        return None

    heartbeat = None
    if getattr(settings, "HEARTBEAT_ENABLED", False):
        errors = container.instance.validate()
        if errors:
            for e in errors:
                logger.error("Invalid instance configuration: %s", e)
            logger.error("Heartbeat disabled until the instance configuration is fixed")
        else:
            heartbeat = container.heartbeat_client

    jobs = BackgroundJobs(
        container.attendance_service,
        container.lab_config,
        heartbeat=heartbeat,
        monitor=container.heartbeat_monitor,
        heartbeat_interval=int(getattr(settings, "HEARTBEAT_INTERVAL", 15)),
    )
    jobs.start()
    atexit.register(jobs.shutdown)
    return jobs


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(settings_module)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        container = build_container(settings)
        db = container.conn.config
        logger.info("settings=%s db=%s@%s:%s/%s", settings.__name__, db.user, db.host, db.port, db.database)
        _bootstrap_database(container, settings)

    register_admins(app, container)
    register_attendance(app, container)
    register_config(app, container)
    register_heartbeat(app, container)

    app.extensions["lab_attendance"] = container
    app.extensions["lab_attendance_jobs"] = _start_jobs(container, settings)
    return app
