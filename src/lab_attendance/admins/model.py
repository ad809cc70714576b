from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    """Administrator account allowed to read reports and change settings."""

    admin_id: int
    email: str
    name: str
    password_hash: str
    is_active: bool = True
