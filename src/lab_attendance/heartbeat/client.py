from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from ..core.constants import HEARTBEAT_TIMEOUT_SECONDS
from .model import HeartbeatAttempt, InstanceConfiguration
from .monitor import HeartbeatMonitor

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/instance/create-instance"


class HeartbeatClient:
    """Registers this instance with the coordinator.

    ``send`` never raises: every outcome, timeouts included, is logged and
    recorded on the monitor so one failed cycle cannot stop the next one.
    """

    def __init__(
        self,
        instance: InstanceConfiguration,
        monitor: HeartbeatMonitor,
        *,
        timeout: float = HEARTBEAT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._instance = instance
        self._monitor = monitor
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def instance(self) -> InstanceConfiguration:
        return self._instance

    def send(self) -> HeartbeatAttempt:
        url = f"{self._instance.main_server_url}{REGISTER_PATH}"
        started = time.monotonic()
        try:
            response = self._session.post(
                url,
                json=self._instance.registration_payload(),
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except requests.Timeout:
            elapsed = int((time.monotonic() - started) * 1000)
            logger.error("Heartbeat to %s timed out after %sms", url, elapsed)
            return self._monitor.record(False, response_time_ms=elapsed, error="timeout")
        except requests.HTTPError as e:
            elapsed = int((time.monotonic() - started) * 1000)
            logger.error("Heartbeat rejected by coordinator: status=%s", e.response.status_code)
            return self._monitor.record(False, response_time_ms=elapsed, error=str(e))
        except requests.RequestException as e:
            elapsed = int((time.monotonic() - started) * 1000)
            logger.error("Could not reach coordinator %s: %s", self._instance.main_server_url, e)
            return self._monitor.record(False, response_time_ms=elapsed, error=str(e))

        elapsed = int((time.monotonic() - started) * 1000)
        logger.info(
            "Heartbeat registered instance %s (%s:%s) in %sms",
            self._instance.instance_id, self._instance.name, self._instance.port, elapsed,
        )
        return self._monitor.record(True, response_time_ms=elapsed)
