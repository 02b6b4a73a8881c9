"""
Stats collection scheduler.

Runs the tracked-players sweep on two fixed cron cadences using an
APScheduler AsyncIOScheduler on the application's event loop:

    daily       0 2 * * *     every day at 02:00
    six_hourly  0 */6 * * *   00:00, 06:00, 12:00, 18:00

The two jobs are independent: nothing stops a daily sweep from running
while a six-hourly or manually triggered sweep is still in progress.
"""

from typing import Awaitable, Callable

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from core.logging import get_logger

SWEEP_SCHEDULES: dict[str, str] = {
    "daily": "0 2 * * *",
    "six_hourly": "0 */6 * * *",
}

SweepRunner = Callable[[str], Awaitable[object]]


def build_triggers(timezone: str = "UTC") -> dict[str, CronTrigger]:
    """Cron trigger per schedule name, in the given timezone."""
    tz = pytz.timezone(timezone)
    return {
        name: CronTrigger.from_crontab(expression, timezone=tz)
        for name, expression in SWEEP_SCHEDULES.items()
    }


class StatsScheduler:
    """
    Owns the AsyncIOScheduler and its sweep jobs.

    Args:
        run_sweep: Coroutine function called with the schedule name
            ("daily" or "six_hourly") each time a job fires
        timezone: Timezone the cron expressions are evaluated in
    """

    def __init__(self, run_sweep: SweepRunner, timezone: str = "UTC"):
        self._run_sweep = run_sweep
        self.timezone = timezone
        self._scheduler = AsyncIOScheduler(timezone=pytz.timezone(timezone))
        self.log = get_logger("scheduler")

        for name, trigger in build_triggers(timezone).items():
            self._scheduler.add_job(
                self._fire,
                trigger=trigger,
                args=[name],
                id=f"{name}_sweep",
                name=f"{name} tracked players sweep",
                coalesce=True,
                misfire_grace_time=300,
                replace_existing=True,
            )

    async def _fire(self, schedule_name: str) -> None:
        self.log.info("scheduled_sweep_started", schedule=schedule_name)
        try:
            await self._run_sweep(schedule_name)
        except Exception as e:
            # A crashed sweep must not unschedule future runs
            self.log.error("scheduled_sweep_failed", schedule=schedule_name, error=str(e))
            return
        self.log.info("scheduled_sweep_finished", schedule=schedule_name)

    def job_ids(self) -> list[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Start firing jobs. Must be called from within a running event loop."""
        self._scheduler.start()
        self.log.info(
            "scheduler_started",
            jobs=self.job_ids(),
            schedules=SWEEP_SCHEDULES,
            timezone=self.timezone,
        )

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            self.log.info("scheduler_stopped")
