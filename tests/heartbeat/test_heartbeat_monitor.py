from datetime import datetime, timedelta

from lab_attendance.heartbeat.monitor import HeartbeatMonitor

T0 = datetime(2026, 2, 4, 12, 0, 0)


class StepClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(seconds=15)
        return current


def test_statistics_count_every_attempt():
    monitor = HeartbeatMonitor(clock=StepClock(T0))
    monitor.record(True, response_time_ms=20)
    monitor.record(False, error="timeout")
    monitor.record(True, response_time_ms=30)

    stats = monitor.status(now=T0 + timedelta(minutes=1))["statistics"]

    assert stats == {
        "totalAttempts": 3,
        "successfulAttempts": 2,
        "failedAttempts": 1,
        "successRate": 66.67,
        "recentSuccessRate": 66.67,
    }


def test_history_is_bounded():
    monitor = HeartbeatMonitor(history_size=50, clock=StepClock(T0))
    for _ in range(60):
        monitor.record(True)

    assert len(monitor) == 50
    assert len(monitor.history(20)) == 20
    assert monitor.status(now=T0)["statistics"]["totalAttempts"] == 60


def test_healthy_needs_active_recent_success():
    monitor = HeartbeatMonitor(clock=StepClock(T0))
    monitor.record(True)

    assert monitor.status(now=T0 + timedelta(minutes=2))["isHealthy"] is False

    monitor.set_active(True)
    status = monitor.status(now=T0 + timedelta(minutes=2))
    assert status["isHealthy"] is True
    assert status["minutesSinceLastHeartbeat"] == 2
    assert status["lastHeartbeat"] == T0.isoformat()

    assert monitor.status(now=T0 + timedelta(minutes=6))["isHealthy"] is False


def test_mostly_failing_recent_window_is_unhealthy():
    monitor = HeartbeatMonitor(clock=StepClock(T0))
    monitor.set_active(True)
    monitor.record(True)
    for _ in range(9):
        monitor.record(False, error="timeout")

    status = monitor.status(now=T0 + timedelta(minutes=3))

    assert status["statistics"]["recentSuccessRate"] == 10.0
    assert status["isHealthy"] is False
    assert len(status["recentHistory"]) == 10


def test_reset_clears_history_and_counters():
    monitor = HeartbeatMonitor(clock=StepClock(T0))
    monitor.record(True)
    monitor.reset()

    status = monitor.status(now=T0)
    assert len(monitor) == 0
    assert status["lastHeartbeat"] is None
    assert status["minutesSinceLastHeartbeat"] is None
    assert status["statistics"]["successRate"] == 0.0
