from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..core.enums import Environment


@dataclass(frozen=True)
class InstanceConfiguration:
    """Identity this server reports to the coordinator."""

    instance_id: str
    name: str
    port: int
    description: str
    main_server_url: str
    environment: Environment = Environment.DEVELOPMENT

    @classmethod
    def from_dict(cls, d: dict) -> "InstanceConfiguration":
        try:
            port = int(d.get("port") or 0)
        except (TypeError, ValueError):
            port = 0
        return cls(
            instance_id=str(d.get("instance_id") or "").strip(),
            name=str(d.get("name") or "").strip(),
            port=port,
            description=str(d.get("description") or ""),
            main_server_url=str(d.get("main_server_url") or "").rstrip("/"),
            environment=Environment(d.get("environment") or Environment.DEVELOPMENT.value),
        )

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not self.instance_id:
            errors.append("instance_id is required and cannot be empty")
        if not self.name:
            errors.append("name is required and cannot be empty")
        if not 1000 <= self.port <= 65535:
            errors.append("port must be a number between 1000 and 65535")
        if not self.main_server_url.startswith("http"):
            errors.append("main_server_url must be a URL starting with http")
        return errors

    def registration_payload(self) -> dict:
        return {
            "instanceId": self.instance_id,
            "name": self.name,
            "port": self.port,
            "description": self.description,
        }


@dataclass(frozen=True)
class HeartbeatAttempt:
    timestamp: datetime
    success: bool
    response_time_ms: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
            "responseTime": self.response_time_ms,
            "error": self.error,
        }
