import logging
from datetime import timedelta

from fastapi.testclient import TestClient

from dining.core.constants import SCHEDULE_REFRESH_JOB_ID, SCHEDULE_ROLLOVER_JOB_ID, STATUS_TICK_JOB_ID
from dining.core.errors import DataSourceError
from dining.main import app, build_scheduler
from dining.scheduler.schedule_jobs import run_refresh_job, run_rollover_job, run_status_tick
from dining.services.schedule import ScheduleAggregator
from dining.services.schedule.types import OpenStatus


def _aggregator(source, tz, clock):
    return ScheduleAggregator(source, window_days=2, tz=tz, lookahead=timedelta(minutes=30), clock=clock)


def test_build_scheduler_registers_jobs(fake_source_cls, tz, clock):
    scheduler = build_scheduler(_aggregator(fake_source_cls(), tz, clock))
    assert {job.id for job in scheduler.get_jobs()} == {
        STATUS_TICK_JOB_ID,
        SCHEDULE_REFRESH_JOB_ID,
        SCHEDULE_ROLLOVER_JOB_ID,
    }


def test_refresh_job_logs_and_keeps_running(fake_source_cls, tz, clock, caplog):
    source = fake_source_cls(fail_dates={"2025-09-10"})
    aggregator = _aggregator(source, tz, clock)
    with caplog.at_level(logging.ERROR, logger="dining.scheduler.schedule_jobs"):
        run_refresh_job(aggregator)
    assert "Scheduled refresh failed" in caplog.text
    assert not aggregator.is_loaded


def test_status_tick_reclassifies_today(fake_source_cls, make_location, tz, clock, at):
    aggregator = _aggregator(fake_source_cls(default=[make_location()]), tz, clock)
    run_refresh_job(aggregator)
    clock.now = at(23)
    run_status_tick(aggregator)
    assert aggregator.locations_for_day(0)[0].status is OpenStatus.CLOSED


def test_health_without_lifespan():
    body = TestClient(app).get("/health").json()
    assert body["status"] == "ok"


class _FlakySource:
    """Fails the first `failures` fetches, then serves one location for every date."""

    def __init__(self, location, failures):
        self.location = location
        self.failures = failures

    def get_all_locations(self, date_str):
        if self.failures > 0:
            self.failures -= 1
            raise DataSourceError(f"boom for {date_str}", status_code=503)
        return [self.location]


def test_rollover_retries_until_window_advances(make_location, tz, clock, at):
    source = _FlakySource(make_location(), failures=0)
    aggregator = ScheduleAggregator(source, window_days=1, tz=tz, clock=clock)
    aggregator.refresh()
    clock.now = at(0, 1, days=1)
    source.failures = 2
    sleeps = []

    assert run_rollover_job(aggregator, attempts=5, retry_seconds=60, sleep=sleeps.append) is True
    assert sleeps == [60, 60]
    assert aggregator.days_represented == [at(0, days=1).date()]
    assert aggregator.is_stale() is False


def test_rollover_gives_up_and_reports_stale_window(make_location, tz, clock, at, caplog):
    source = _FlakySource(make_location(), failures=0)
    aggregator = ScheduleAggregator(source, window_days=1, tz=tz, clock=clock)
    aggregator.refresh()
    clock.now = at(0, 1, days=1)
    source.failures = 10
    sleeps = []

    with caplog.at_level(logging.WARNING, logger="dining.scheduler.schedule_jobs"):
        assert run_rollover_job(aggregator, attempts=3, retry_seconds=5, sleep=sleeps.append) is False
    assert sleeps == [5, 5]
    assert "gave up after 3 attempts" in caplog.text
    assert aggregator.heartbeat()["is_stale"] is True
