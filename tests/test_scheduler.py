import asyncio
from datetime import datetime

import pytz

from services.scheduler import SWEEP_SCHEDULES, StatsScheduler, build_triggers


def test_schedules():
    assert SWEEP_SCHEDULES == {"daily": "0 2 * * *", "six_hourly": "0 */6 * * *"}


def test_daily_trigger_fires_at_two_am():
    trigger = build_triggers("UTC")["daily"]
    now = pytz.utc.localize(datetime(2026, 10, 17, 3, 0))

    assert trigger.get_next_fire_time(None, now) == pytz.utc.localize(datetime(2026, 10, 18, 2, 0))


def test_six_hourly_trigger_fires_every_six_hours():
    trigger = build_triggers("UTC")["six_hourly"]
    now = pytz.utc.localize(datetime(2026, 10, 17, 3, 0))

    first = trigger.get_next_fire_time(None, now)
    second = trigger.get_next_fire_time(first, first.replace(minute=1))

    assert first == pytz.utc.localize(datetime(2026, 10, 17, 6, 0))
    assert second == pytz.utc.localize(datetime(2026, 10, 17, 12, 0))


async def _noop(schedule_name):
    return None


def test_scheduler_registers_one_job_per_schedule():
    scheduler = StatsScheduler(_noop)
    assert sorted(scheduler.job_ids()) == ["daily_sweep", "six_hourly_sweep"]
    assert not scheduler.running


def test_failed_sweep_does_not_raise():
    calls = []

    async def failing(schedule_name):
        calls.append(schedule_name)
        raise RuntimeError("boom")

    scheduler = StatsScheduler(failing)
    asyncio.run(scheduler._fire("daily"))

    assert calls == ["daily"]
