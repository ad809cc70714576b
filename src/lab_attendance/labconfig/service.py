from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import is_valid_hhmm, now_local
from ..common.validators import require_object
from ..core.exceptions import ValidationError
from .model import CAPACITY_ERROR, LabConfiguration
from .store import LabConfigStore


class LabConfigService:
    """Use case: read and validate-then-update the lab configuration."""

    def __init__(self, store: LabConfigStore):
        self._store = store

    def current(self) -> LabConfiguration:
        return self._store.get()

    def update(
        self,
        payload: Any,
        *,
        updated_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LabConfiguration:
        """Apply a partial update.

        Every problem is collected before raising, so the caller gets the
        full list in ``ValidationError.errors``. The opening/closing order is
        checked on the configuration the change is merged into, inside the
        store lock.
        """
        payload = require_object(payload)
        now = now or now_local()
        errors: list[str] = []
        changes: dict = {}

        inicial = payload.get("inicialHour")
        final = payload.get("finalHour")
        capacity = payload.get("maxCapacity")

        if inicial is not None:
            if is_valid_hhmm(inicial):
                changes["inicial_hour"] = inicial
            else:
                errors.append("inicialHour must use the HH:MM format (e.g. 08:30)")

        if final is not None:
            if is_valid_hhmm(final):
                changes["final_hour"] = final
            else:
                errors.append("finalHour must use the HH:MM format (e.g. 17:30)")

        if capacity is not None:
            try:
                number = int(capacity)
                if isinstance(capacity, bool) or (isinstance(capacity, float) and not capacity.is_integer()):
                    raise ValueError(capacity)
            except (TypeError, ValueError):
                errors.append(CAPACITY_ERROR)
            else:
                if number < 1:
                    errors.append(CAPACITY_ERROR)
                else:
                    changes["max_capacity"] = number

        changes["last_updated"] = now.isoformat(timespec="seconds")
        changes["updated_by"] = payload.get("updatedBy") or updated_by

        def build(current: LabConfiguration) -> LabConfiguration:
            merged = replace(current, **changes)
            found = errors + [e for e in merged.validate() if e not in errors]
            if found:
                raise ValidationError("Validation errors", errors=found)
            return merged

        return self._store.apply(build)
