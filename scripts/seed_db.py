from __future__ import annotations

import importlib

from dotenv import load_dotenv

from lab_attendance.database.bootstrap import apply_seed_sql, ensure_default_admin
from lab_attendance.database.connection import DatabaseConnection, DBConfig
from lab_attendance.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    apply_seed_sql(conn)
    admin = settings.DEFAULT_ADMIN
    ensure_default_admin(conn, email=admin["email"], password=admin["password"])

    cfg = conn.config
    print(f"OK: Seeded database -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database}")


if __name__ == "__main__":
    main()
