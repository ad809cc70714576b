from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..core.constants import HEARTBEAT_HEALTHY_MINUTES, HEARTBEAT_HISTORY_SIZE, HEARTBEAT_RECENT_WINDOW
from .model import HeartbeatAttempt

logger = logging.getLogger(__name__)


def _rate(successes: int, total: int) -> float:
    return round(successes / total * 100, 2) if total else 0.0


class HeartbeatMonitor:
    """Bounded in-memory history of heartbeat attempts and running totals.

    Written from the scheduler thread and read from request threads.
    """

    def __init__(self, *, history_size: int = HEARTBEAT_HISTORY_SIZE, clock: Callable[[], datetime] = now_local):
        self._lock = threading.Lock()
        self._clock = clock
        self._history: deque[HeartbeatAttempt] = deque(maxlen=history_size)
        self._total = 0
        self._successful = 0
        self._last_success: Optional[datetime] = None
        self._active = False

    def record(self, success: bool, *, response_time_ms: Optional[int] = None, error: Optional[str] = None) -> HeartbeatAttempt:
        attempt = HeartbeatAttempt(
            timestamp=self._clock(),
            success=success,
            response_time_ms=response_time_ms,
            error=error,
        )
        with self._lock:
            self._history.append(attempt)
            self._total += 1
            if success:
                self._successful += 1
                self._last_success = attempt.timestamp
        logger.debug("Heartbeat attempt recorded: %s", "SUCCESS" if success else "FAILED")
        return attempt

    def set_active(self, active: bool) -> None:
        with self._lock:
            self._active = active
        logger.info("Heartbeat marked as %s", "ACTIVE" if active else "INACTIVE")

    def reset(self) -> None:
        with self._lock:
            self._history.clear()
            self._total = 0
            self._successful = 0
            self._last_success = None
        logger.info("Heartbeat statistics and history reset")

    def history(self, limit: int) -> List[HeartbeatAttempt]:
        with self._lock:
            items = list(self._history)
        return items[-limit:] if limit > 0 else []

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def status(self, *, now: Optional[datetime] = None) -> dict:
        now = now or self._clock()
        with self._lock:
            recent = list(self._history)[-HEARTBEAT_RECENT_WINDOW:]
            total = self._total
            successful = self._successful
            last_success = self._last_success
            active = self._active

        recent_rate = _rate(sum(1 for a in recent if a.success), len(recent))
        minutes_since = int((now - last_success).total_seconds() // 60) if last_success else None
        healthy = (
            active
            and minutes_since is not None
            and minutes_since < HEARTBEAT_HEALTHY_MINUTES
            and recent_rate > 50
        )

        return {
            "isActive": active,
            "isHealthy": healthy,
            "lastHeartbeat": last_success.isoformat() if last_success else None,
            "minutesSinceLastHeartbeat": minutes_since,
            "statistics": {
                "totalAttempts": total,
                "successfulAttempts": successful,
                "failedAttempts": total - successful,
                "successRate": _rate(successful, total),
                "recentSuccessRate": recent_rate,
            },
            "recentHistory": [a.to_dict() for a in recent],
        }
