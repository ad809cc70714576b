from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List

from ..common.datetime_utils import parse_hhmm
from ..labconfig.model import LabConfiguration


@dataclass(frozen=True)
class WorkingWindow:
    start: datetime
    end: datetime

    @property
    def total_minutes(self) -> int:
        """Whole minutes in the window, never negative."""
        return max(0, int((self.end - self.start).total_seconds() // 60))

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


def resolve_working_window(day: date, config: LabConfiguration) -> WorkingWindow:
    """Opening and closing instants of ``day`` in local wall-clock time."""
    return WorkingWindow(
        start=datetime.combine(day, parse_hhmm(config.inicial_hour)),
        end=datetime.combine(day, parse_hhmm(config.final_hour)),
    )


def working_hours(config: LabConfiguration) -> List[int]:
    """Clock hours covered by the window, first and last inclusive."""
    start = parse_hhmm(config.inicial_hour).hour
    end = parse_hhmm(config.final_hour).hour
    return list(range(start, end + 1))


def hour_bounds(day: date, hour: int) -> WorkingWindow:
    start = datetime.combine(day, datetime.min.time()) + timedelta(hours=hour)
    return WorkingWindow(start=start, end=start + timedelta(hours=1))
