from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from ..common.datetime_utils import round_half_up


def utilization_percentage(utilized_minutes: int, max_capacity: int, window_minutes: int) -> int:
    """Share of the possible occupant-minutes that were used, 0..100.

    Zero when the window or the capacity is empty.
    """
    if window_minutes <= 0 or max_capacity <= 0:
        return 0
    return round_half_up(100 * utilized_minutes / (max_capacity * window_minutes))


@dataclass(frozen=True)
class DailyUtilization:
    date: date
    utilization_percentage: int
    total_utilized_minutes: int
    max_possible_minutes: int
    current_occupancy: int
    max_capacity: int

    def to_dict(self) -> dict:
        return {
            "utilizationPercentage": self.utilization_percentage,
            "totalUtilizedMinutes": self.total_utilized_minutes,
            "utilizationHours": self.total_utilized_minutes // 60,
            "utilizationMinutesRemainder": self.total_utilized_minutes % 60,
            "maxPossibleMinutes": self.max_possible_minutes,
            "currentOccupancy": self.current_occupancy,
            "maxCapacity": self.max_capacity,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class HourlyUtilization:
    hour: int
    utilization: int
    active_users: int
    total_minutes: int

    def to_dict(self) -> dict:
        return {
            "hour": f"{self.hour:02d}:00",
            "utilization": self.utilization,
            "activeUsers": self.active_users,
            "totalMinutes": self.total_minutes,
        }


@dataclass(frozen=True)
class DayUtilization:
    date: date
    utilization_percentage: int
    utilized_minutes: int
    active_users: int

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "date": d["date"].isoformat(),
            "utilizationPercentage": d["utilization_percentage"],
            "utilizedMinutes": d["utilized_minutes"],
            "activeUsers": d["active_users"],
        }


@dataclass(frozen=True)
class MonthlyUtilization:
    month: int
    year: int
    monthly_utilization_percentage: int
    average_daily_utilization_percentage: int
    total_utilized_minutes: int
    business_days_count: int
    total_possible_minutes: int
    daily_breakdown: List[DayUtilization] = field(default_factory=list)
    peak_day: Optional[DayUtilization] = None
    low_day: Optional[DayUtilization] = None

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "monthlyUtilizationPercentage": self.monthly_utilization_percentage,
            "averageDailyUtilizationPercentage": self.average_daily_utilization_percentage,
            "totalUtilizedMinutes": self.total_utilized_minutes,
            "totalUtilizedHours": self.total_utilized_minutes // 60,
            "totalUtilizedMinutesRemainder": self.total_utilized_minutes % 60,
            "businessDaysCount": self.business_days_count,
            "totalPossibleMinutes": self.total_possible_minutes,
            "dailyBreakdown": [d.to_dict() for d in self.daily_breakdown],
            "peakDay": self.peak_day.to_dict() if self.peak_day else None,
            "lowDay": self.low_day.to_dict() if self.low_day else None,
        }


def peak_day(days: Sequence[DayUtilization]) -> Optional[DayUtilization]:
    """Day with the highest percentage; the earliest one wins ties."""
    best = None
    for day in days:
        if best is None or day.utilization_percentage > best.utilization_percentage:
            best = day
    return best


def low_day(days: Sequence[DayUtilization]) -> Optional[DayUtilization]:
    """Day with the lowest percentage; the earliest one wins ties."""
    worst = None
    for day in days:
        if worst is None or day.utilization_percentage < worst.utilization_percentage:
            worst = day
    return worst


def summarize_month(
    *,
    month: int,
    year: int,
    days: Sequence[DayUtilization],
    max_capacity: int,
    window_minutes: int,
) -> MonthlyUtilization:
    total_utilized = sum(d.utilized_minutes for d in days)
    total_possible = len(days) * max(0, max_capacity) * max(0, window_minutes)

    if total_possible > 0:
        monthly_pct = round_half_up(100 * total_utilized / total_possible)
    else:
        monthly_pct = 0

    if days:
        average_pct = round_half_up(sum(d.utilization_percentage for d in days) / len(days))
    else:
        average_pct = 0

    return MonthlyUtilization(
        month=month,
        year=year,
        monthly_utilization_percentage=monthly_pct,
        average_daily_utilization_percentage=average_pct,
        total_utilized_minutes=total_utilized,
        business_days_count=len(days),
        total_possible_minutes=total_possible,
        daily_breakdown=list(days),
        peak_day=peak_day(days),
        low_day=low_day(days),
    )
