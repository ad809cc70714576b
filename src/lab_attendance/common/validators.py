from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_object(payload: Any) -> Mapping[str, Any]:
    """JSON bodies must be objects; ``None`` counts as an empty one."""
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def require_fields(payload: Any, fields: Sequence[str]) -> None:
    payload = require_object(payload)
    if not payload:
        raise ValidationError("Missing required fields.")
    missing = [f for f in fields if payload.get(f) in (None, "")]
    if missing:
        raise ValidationError("Missing required fields.", errors=[f"{f} is required" for f in missing])
