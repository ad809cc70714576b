from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from ..attendance.model import AttendanceInterval

ONE_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class MinuteSample:
    minute: datetime
    present: int
    counted: int


@dataclass(frozen=True)
class OccupancyResult:
    utilized_minutes: int
    samples: Tuple[MinuteSample, ...]

    @property
    def peak(self) -> int:
        """Highest raw (unclamped) occupancy seen in the sampled minutes."""
        return max((s.present for s in self.samples), default=0)


def count_present(intervals: Iterable[AttendanceInterval], instant: datetime, open_until: datetime) -> int:
    """Number of intervals covering ``instant``.

    An open interval is treated as ending at ``open_until``.
    """
    n = 0
    for interval in intervals:
        check_out = interval.check_out if interval.check_out is not None else open_until
        if interval.check_in <= instant < check_out:
            n += 1
    return n


def sample_occupancy(
    intervals: Sequence[AttendanceInterval],
    *,
    start: datetime,
    minutes: int,
    max_capacity: int,
    open_until: datetime,
    cutoff: Optional[datetime] = None,
) -> OccupancyResult:
    """Walk ``minutes`` whole minutes from ``start`` and count occupants.

    Each minute contributes ``min(present, max_capacity)``. Minutes strictly
    after ``cutoff`` are not sampled at all.
    """
    capacity = max(0, int(max_capacity))
    samples = []
    total = 0

    for m in range(max(0, int(minutes))):
        slot = start + m * ONE_MINUTE
        if cutoff is not None and slot > cutoff:
            break
        present = count_present(intervals, slot, open_until)
        counted = min(present, capacity)
        total += counted
        samples.append(MinuteSample(minute=slot, present=present, counted=counted))

    return OccupancyResult(utilized_minutes=total, samples=tuple(samples))
