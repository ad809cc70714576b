from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """Lab user identified by email at the check-in kiosk."""

    user_id: int
    email: str
    name: str
    last_name: str
    rut: Optional[str] = None
