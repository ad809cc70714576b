from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from ..common.datetime_utils import hhmm_to_minutes, is_valid_hhmm
from ..core.constants import DEFAULT_FINAL_HOUR, DEFAULT_INICIAL_HOUR, DEFAULT_MAX_CAPACITY

RANGE_ERROR = "The opening hour must be earlier than the closing hour"
CAPACITY_ERROR = "maxCapacity must be a whole number greater than or equal to 1"


@dataclass(frozen=True)
class LabConfiguration:
    """Working hours and capacity of the lab.

    Hours are "HH:MM" strings in server-local wall-clock time.
    """

    inicial_hour: str = DEFAULT_INICIAL_HOUR
    final_hour: str = DEFAULT_FINAL_HOUR
    max_capacity: int = DEFAULT_MAX_CAPACITY
    last_updated: Optional[str] = None
    updated_by: Optional[str] = None

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not is_valid_hhmm(self.inicial_hour):
            errors.append("inicialHour must use the HH:MM format (e.g. 08:30)")
        if not is_valid_hhmm(self.final_hour):
            errors.append("finalHour must use the HH:MM format (e.g. 17:30)")
        if isinstance(self.max_capacity, bool) or not isinstance(self.max_capacity, int) or self.max_capacity < 1:
            errors.append(CAPACITY_ERROR)
        if not errors and hhmm_to_minutes(self.inicial_hour) >= hhmm_to_minutes(self.final_hour):
            errors.append(RANGE_ERROR)
        return errors

    def to_document(self) -> dict:
        d = asdict(self)
        return {
            "inicialHour": d["inicial_hour"],
            "finalHour": d["final_hour"],
            "maxCapacity": d["max_capacity"],
            "lastUpdated": d["last_updated"],
            "updatedBy": d["updated_by"],
        }

    @classmethod
    def from_document(cls, doc: dict, *, defaults: Optional["LabConfiguration"] = None) -> "LabConfiguration":
        """Build from the persisted camelCase document.

        Raises ``ValueError``/``TypeError`` when a field cannot be converted;
        the result still has to pass ``validate``.
        """
        base = defaults or cls()
        capacity = doc.get("maxCapacity", base.max_capacity)
        if isinstance(capacity, bool) or (isinstance(capacity, float) and not capacity.is_integer()):
            raise ValueError(f"maxCapacity {capacity!r} is not a whole number")
        return cls(
            inicial_hour=str(doc.get("inicialHour", base.inicial_hour)),
            final_hour=str(doc.get("finalHour", base.final_hour)),
            max_capacity=int(capacity),
            last_updated=doc.get("lastUpdated", base.last_updated),
            updated_by=doc.get("updatedBy", base.updated_by),
        )
