from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Reason:
    """Why a user is in the lab (class, study, project...)."""

    reason_id: int
    name: str
