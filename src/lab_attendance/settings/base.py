"""Settings shared by every environment; each one overrides what it needs."""

import os

from ..core.constants import (
    DEFAULT_DB_CONNECT_TIMEOUT,
    DEFAULT_FINAL_HOUR,
    DEFAULT_INICIAL_HOUR,
    DEFAULT_MAX_CAPACITY,
    DEFAULT_TOKEN_TTL_HOURS,
    HEARTBEAT_INTERVAL_SECONDS,
    HEARTBEAT_TIMEOUT_SECONDS,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", str(DEFAULT_TOKEN_TTL_HOURS)))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_attendance"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", str(DEFAULT_DB_CONNECT_TIMEOUT))),
}

LAB_CONFIG_PATH = os.getenv("LAB_CONFIG_PATH", "instance/lab_config.json")
DEFAULT_LAB_CONFIG = {
    "inicialHour": os.getenv("LAB_INICIAL_HOUR", DEFAULT_INICIAL_HOUR),
    "finalHour": os.getenv("LAB_FINAL_HOUR", DEFAULT_FINAL_HOUR),
    "maxCapacity": int(os.getenv("LAB_MAX_CAPACITY", str(DEFAULT_MAX_CAPACITY))),
}

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))

HEARTBEAT_ENABLED = bool(int(os.getenv("HEARTBEAT_ENABLED", "1")))
HEARTBEAT_INTERVAL = int(os.getenv("HEARTBEAT_INTERVAL_SECONDS", str(HEARTBEAT_INTERVAL_SECONDS)))
HEARTBEAT_TIMEOUT = float(os.getenv("HEARTBEAT_TIMEOUT_SECONDS", str(HEARTBEAT_TIMEOUT_SECONDS)))

INSTANCE_CONFIG = {
    "instance_id": os.getenv("INSTANCE_ID", "LAB_01"),
    "name": os.getenv("INSTANCE_NAME", "Computer lab 01"),
    "port": int(os.getenv("PORT", "3000")),
    "description": os.getenv("INSTANCE_DESCRIPTION", "Computer lab 01"),
    "main_server_url": os.getenv("MAIN_SERVER_URL", "http://localhost:3002"),
    "environment": os.getenv("INSTANCE_ENVIRONMENT", "development"),
}

DEFAULT_ADMIN = {
    "email": os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.edu"),
    "password": os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

DEBUG = False
TESTING = False

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
# Optional: also seed reasons, demo users and the default admin on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
