from __future__ import annotations

import math
import re
from datetime import date, datetime, time

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_instant(value, field_name: str) -> datetime:
    """Parse an ISO-8601 timestamp into server-local naive time.

    Offset-aware values (including a trailing ``Z``) are converted to the
    local zone first; naive values are taken as local wall-clock time.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field_name} is required")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO-8601 timestamp")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def is_valid_hhmm(value) -> bool:
    return isinstance(value, str) and bool(_HHMM.match(value))


def parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


def hhmm_to_minutes(value: str) -> int:
    t = parse_hhmm(value)
    return t.hour * 60 + t.minute


def round_half_up(value: float) -> int:
    """Integer rounding with .5 going up, for non-negative percentages."""
    return int(math.floor(value + 0.5))


def now_local() -> datetime:
    """Current local wall-clock time (naive)."""
    return datetime.now()
