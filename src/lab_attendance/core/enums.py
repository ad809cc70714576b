from __future__ import annotations

from enum import Enum


class Environment(str, Enum):
    """Deployment environment reported to the coordinator."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


class SessionState(str, Enum):
    """Listing filter over attendance intervals."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"
