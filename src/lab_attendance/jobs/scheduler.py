from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..attendance.service import AttendanceService
from ..common.datetime_utils import parse_hhmm
from ..core.constants import AUTO_CHECKOUT_JOB_ID, HEARTBEAT_INTERVAL_SECONDS, HEARTBEAT_JOB_ID
from ..heartbeat.client import HeartbeatClient
from ..heartbeat.monitor import HeartbeatMonitor
from ..labconfig.model import LabConfiguration
from ..labconfig.store import LabConfigStore

logger = logging.getLogger(__name__)


class BackgroundJobs:
    """Daily forced checkout and the heartbeat loop on one APScheduler.

    Both jobs can also be run by hand through ``run_auto_checkout`` and
    ``run_heartbeat``; scheduled runs log failures and keep going.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        config: LabConfigStore,
        *,
        heartbeat: Optional[HeartbeatClient] = None,
        monitor: Optional[HeartbeatMonitor] = None,
        heartbeat_interval: int = HEARTBEAT_INTERVAL_SECONDS,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._attendance = attendance
        self._config = config
        self._heartbeat = heartbeat
        self._monitor = monitor
        self._heartbeat_interval = int(heartbeat_interval)
        job_defaults = {"coalesce": True, "max_instances": 1, "misfire_grace_time": 3600}
        if scheduler is None:
            scheduler = BackgroundScheduler(job_defaults=job_defaults)
        self._scheduler = scheduler
        config.subscribe(self._on_config_change)

    @property
    def scheduler(self) -> BackgroundScheduler:
        return self._scheduler

    def _checkout_trigger(self, config: LabConfiguration) -> CronTrigger:
        # Server-local time, same clock as AttendanceService.checkout_deadline.
        deadline = parse_hhmm(config.final_hour)
        return CronTrigger(hour=deadline.hour, minute=deadline.minute)

    def run_auto_checkout(self) -> int:
        try:
            return self._attendance.force_checkout()
        except Exception:
            logger.exception("Scheduled auto-checkout failed")
            return 0

    def run_heartbeat(self) -> None:
        if self._heartbeat is None:
            return
        try:
            self._heartbeat.send()
        except Exception:
            logger.exception("Heartbeat cycle failed")

    def schedule_auto_checkout(self) -> None:
        config = self._config.get()
        self._scheduler.add_job(
            self.run_auto_checkout,
            trigger=self._checkout_trigger(config),
            id=AUTO_CHECKOUT_JOB_ID,
            name="Force checkout of open sessions at closing hour",
            replace_existing=True,
        )
        logger.info("Auto-checkout scheduled daily at %s", config.final_hour)

    def start_heartbeat(self) -> None:
        if self._heartbeat is None:
            return
        self._scheduler.add_job(
            self.run_heartbeat,
            trigger="interval",
            seconds=self._heartbeat_interval,
            id=HEARTBEAT_JOB_ID,
            name="Report liveness to the coordinator",
            replace_existing=True,
            next_run_time=datetime.now().astimezone(),
        )
        if self._monitor is not None:
            self._monitor.set_active(True)
        logger.info(
            "Heartbeat for instance %s every %ss to %s",
            self._heartbeat.instance.instance_id,
            self._heartbeat_interval,
            self._heartbeat.instance.main_server_url,
        )

    def start(self) -> None:
        self.schedule_auto_checkout()
        if not self._scheduler.running:
            self._scheduler.start()
        self.start_heartbeat()

    def shutdown(self) -> None:
        if self._monitor is not None and self._heartbeat is not None:
            self._monitor.set_active(False)
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def _on_config_change(self, previous: LabConfiguration, current: LabConfiguration) -> None:
        if previous.final_hour == current.final_hour:
            return
        if self._scheduler.get_job(AUTO_CHECKOUT_JOB_ID) is None:
            return
        self._scheduler.reschedule_job(AUTO_CHECKOUT_JOB_ID, trigger=self._checkout_trigger(current))
        logger.info("Auto-checkout moved to %s", current.final_hour)
