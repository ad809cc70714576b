from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

from ..attendance.model import AttendanceInterval
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..labconfig.model import LabConfiguration
from ..labconfig.store import LabConfigStore
from .aggregator import (
    DailyUtilization,
    DayUtilization,
    HourlyUtilization,
    MonthlyUtilization,
    summarize_month,
    utilization_percentage,
)
from .sampler import sample_occupancy
from .window import WorkingWindow, hour_bounds, resolve_working_window, working_hours


def business_days(year: int, month: int) -> List[date]:
    """Monday to Friday dates of the month, in order."""
    _, last = calendar.monthrange(year, month)
    days = (date(year, month, d) for d in range(1, last + 1))
    return [d for d in days if d.weekday() < 5]


def _within(intervals: Sequence[AttendanceInterval], window: WorkingWindow) -> List[AttendanceInterval]:
    return [i for i in intervals if window.contains(i.check_in)]


class UtilizationService:
    """Use case: lab utilization reports for a day, its hours, or a month."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        config: LabConfigStore,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._config = config
        self._clock = clock

    def _day_intervals(self, window: WorkingWindow) -> Sequence[AttendanceInterval]:
        return self._attendance.find_by_check_in_range(window.start, window.end)

    def daily(self, day: Optional[date] = None, *, now: Optional[datetime] = None) -> DailyUtilization:
        now = now or self._clock()
        day = day or now.date()
        config = self._config.get()
        window = resolve_working_window(day, config)
        is_today = day == now.date()

        intervals = self._day_intervals(window)
        result = sample_occupancy(
            intervals,
            start=window.start,
            minutes=window.total_minutes,
            max_capacity=config.max_capacity,
            open_until=min(now, window.end),
            cutoff=now if is_today else None,
        )

        return DailyUtilization(
            date=day,
            utilization_percentage=utilization_percentage(
                result.utilized_minutes, config.max_capacity, window.total_minutes
            ),
            total_utilized_minutes=result.utilized_minutes,
            max_possible_minutes=max(0, config.max_capacity) * window.total_minutes,
            current_occupancy=sum(1 for i in intervals if i.is_open),
            max_capacity=config.max_capacity,
        )

    def hourly(self, day: Optional[date] = None, *, now: Optional[datetime] = None) -> List[HourlyUtilization]:
        now = now or self._clock()
        day = day or now.date()
        config = self._config.get()
        window = resolve_working_window(day, config)
        is_today = day == now.date()

        intervals = self._day_intervals(window)
        open_until = min(now, window.end)

        out: List[HourlyUtilization] = []
        for hour in working_hours(config):
            bounds = hour_bounds(day, hour)
            if is_today and bounds.start > now:
                continue

            result = sample_occupancy(
                intervals,
                start=bounds.start,
                minutes=60,
                max_capacity=config.max_capacity,
                open_until=open_until,
                cutoff=now if is_today else None,
            )
            out.append(
                HourlyUtilization(
                    hour=hour,
                    utilization=utilization_percentage(result.utilized_minutes, config.max_capacity, 60),
                    active_users=result.peak,
                    total_minutes=result.utilized_minutes,
                )
            )
        return out

    def monthly(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> MonthlyUtilization:
        """Roll up every business day of the month.

        Past days sample every minute of their window, today only the minutes
        up to now, and future days are counted as business days that used
        nothing.
        """
        now = now or self._clock()
        month = now.month if month is None else int(month)
        year = now.year if year is None else int(year)
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        if not 1 <= year <= 9999:
            raise ValidationError("year is out of range")

        config = self._config.get()
        days = business_days(year, month)
        window_minutes = resolve_working_window(date(year, month, 1), config).total_minutes

        intervals: Sequence[AttendanceInterval] = []
        if days:
            first = resolve_working_window(days[0], config)
            last = resolve_working_window(days[-1], config)
            intervals = self._attendance.find_by_check_in_range(first.start, last.end)

        breakdown = [
            self._business_day(day, config, intervals, window_minutes=window_minutes, now=now)
            for day in days
        ]
        return summarize_month(
            month=month,
            year=year,
            days=breakdown,
            max_capacity=config.max_capacity,
            window_minutes=window_minutes,
        )

    def _business_day(
        self,
        day: date,
        config: LabConfiguration,
        intervals: Sequence[AttendanceInterval],
        *,
        window_minutes: int,
        now: datetime,
    ) -> DayUtilization:
        window = resolve_working_window(day, config)
        day_intervals = _within(intervals, window)
        result = sample_occupancy(
            day_intervals,
            start=window.start,
            minutes=window_minutes,
            max_capacity=config.max_capacity,
            open_until=window.end,
            cutoff=None if day < now.date() else now,
        )
        return DayUtilization(
            date=day,
            utilization_percentage=utilization_percentage(
                result.utilized_minutes, config.max_capacity, window_minutes
            ),
            utilized_minutes=result.utilized_minutes,
            active_users=len(day_intervals),
        )
