import pytest
import requests

from lab_attendance.heartbeat.client import HeartbeatClient
from lab_attendance.heartbeat.model import InstanceConfiguration
from lab_attendance.heartbeat.monitor import HeartbeatMonitor


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _client(instance, outcome):
    monitor = HeartbeatMonitor()
    session = FakeSession(outcome)
    return HeartbeatClient(instance, monitor, timeout=10, session=session), monitor, session


def test_successful_registration(instance):
    client, monitor, session = _client(instance, FakeResponse(201))

    attempt = client.send()

    assert attempt.success is True
    assert attempt.error is None
    url, kwargs = session.calls[0]
    assert url == "http://coordinator.test/api/instance/create-instance"
    assert kwargs["timeout"] == 10
    assert kwargs["json"] == {
        "instanceId": "LAB_TEST",
        "name": "Test lab",
        "port": 3000,
        "description": "Lab used by the test-suite",
    }
    assert monitor.status()["statistics"]["successfulAttempts"] == 1


@pytest.mark.parametrize(
    "outcome,error",
    [
        (requests.Timeout("slow"), "timeout"),
        (requests.ConnectionError("refused"), "refused"),
        (FakeResponse(503), "503 Error"),
    ],
)
def test_failures_are_recorded_not_raised(instance, outcome, error):
    client, monitor, _ = _client(instance, outcome)

    attempt = client.send()

    assert attempt.success is False
    assert attempt.error == error
    assert monitor.status()["statistics"]["failedAttempts"] == 1


def test_instance_validation():
    bad = InstanceConfiguration.from_dict({"instance_id": " ", "port": "80", "main_server_url": "coordinator"})

    assert bad.validate() == [
        "instance_id is required and cannot be empty",
        "name is required and cannot be empty",
        "port must be a number between 1000 and 65535",
        "main_server_url must be a URL starting with http",
    ]


def test_instance_url_trailing_slash_is_dropped():
    cfg = InstanceConfiguration.from_dict(
        {"instance_id": "LAB", "name": "Lab", "port": 3000, "main_server_url": "http://main:3002/"}
    )
    assert cfg.main_server_url == "http://main:3002"
    assert cfg.validate() == []
