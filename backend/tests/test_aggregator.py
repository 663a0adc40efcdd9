import threading
from datetime import date, timedelta

import pytest

from dining.core.errors import DataSourceError, ScheduleNotReadyError
from dining.services.schedule import ScheduleAggregator
from dining.services.schedule.types import OpenStatus

WINDOW = ["2025-09-10", "2025-09-11", "2025-09-12"]


@pytest.fixture
def source(fake_source_cls, make_location):
    return fake_source_cls(default=[make_location(1, "Gracie's"), make_location(2, "Crossroads", events=[])])


@pytest.fixture
def aggregator(source, tz, clock):
    return ScheduleAggregator(
        source,
        window_days=3,
        tz=tz,
        lookahead=timedelta(minutes=30),
        max_workers=2,
        clock=clock,
    )


def test_readers_before_first_refresh(aggregator):
    assert not aggregator.is_loaded
    assert aggregator.days_represented == []
    assert aggregator.heartbeat()["last_refreshed"] is None
    with pytest.raises(ScheduleNotReadyError):
        aggregator.locations_for_day(0)
    with pytest.raises(ScheduleNotReadyError):
        aggregator.location_hours(1)


def test_refresh_fetches_every_day_of_the_window(aggregator, source, day):
    aggregator.refresh()
    assert sorted(source.calls) == WINDOW
    assert aggregator.days_represented == [day + timedelta(days=i) for i in range(3)]
    assert [len(d) for d in aggregator.locations_by_day] == [2, 2, 2]
    assert aggregator.locations_for_day(2)[0].date == "2025-09-12"
    assert aggregator.heartbeat()["window_start"] == "2025-09-10"


def test_refresh_with_explicit_today(aggregator, source):
    aggregator.refresh(today=date(2025, 9, 20))
    assert sorted(source.calls) == ["2025-09-20", "2025-09-21", "2025-09-22"]


def test_out_of_window_day_raises_index_error(aggregator):
    aggregator.refresh()
    with pytest.raises(IndexError):
        aggregator.locations_for_day(3)


def test_failed_refresh_keeps_previous_schedule(aggregator, source, clock, at):
    aggregator.refresh()
    before = [[s.to_dict() for s in d] for d in aggregator.locations_by_day]
    refreshed_at = aggregator.last_refreshed

    source.fail_dates = {"2025-09-11"}
    source.default = []
    clock.now = at(13)
    with pytest.raises(DataSourceError):
        aggregator.refresh()

    assert [[s.to_dict() for s in d] for d in aggregator.locations_by_day] == before
    assert aggregator.last_refreshed == refreshed_at
    beat = aggregator.heartbeat()
    assert "boom for 2025-09-11" in beat["last_error"]
    assert beat["is_refreshing"] is False


def test_successful_refresh_clears_last_error(aggregator, source):
    source.fail_dates = {"2025-09-12"}
    with pytest.raises(DataSourceError):
        aggregator.refresh()
    assert not aggregator.is_loaded

    source.fail_dates = set()
    aggregator.refresh()
    assert aggregator.is_loaded
    assert aggregator.heartbeat()["last_error"] is None


def test_recompute_updates_today_only(aggregator, clock, at):
    aggregator.refresh()
    assert aggregator.locations_for_day(0)[0].status is OpenStatus.OPEN

    clock.now = at(21, 45)
    aggregator.recompute_statuses()
    today, tomorrow = aggregator.locations_for_day(0), aggregator.locations_for_day(1)
    assert today[0].status is OpenStatus.CLOSING_SOON
    assert today[1].status is OpenStatus.CLOSED
    # tomorrow keeps the status computed at refresh time
    assert tomorrow[0].status is OpenStatus.CLOSED


def test_recompute_before_refresh_is_a_no_op(aggregator):
    aggregator.recompute_statuses()
    assert not aggregator.is_loaded


def test_readers_get_copies(aggregator):
    aggregator.refresh()
    copy = aggregator.locations_for_day(0)
    copy[0].status = OpenStatus.CLOSED
    copy.clear()
    assert aggregator.locations_for_day(0)[0].status is OpenStatus.OPEN


def test_find_location_and_hours(fake_source_cls, make_location, tz, clock):
    source = fake_source_cls(
        by_date={
            "2025-09-10": [make_location(1), make_location(5, "Ritz")],
            "2025-09-11": [make_location(1)],
            "2025-09-12": [make_location(1), make_location(5, "Ritz")],
        }
    )
    agg = ScheduleAggregator(source, window_days=3, tz=tz, clock=clock)
    agg.refresh()

    assert agg.find_location(5).name == "Ritz"
    assert agg.find_location(5, day_index=1) is None
    hours = agg.location_hours(5)
    assert [d.isoformat() for d, _ in hours] == WINDOW
    assert [loc is None for _, loc in hours] == [False, True, False]


def test_recompute_runs_while_refresh_is_fetching(fake_source_cls, make_location, tz, clock, at):
    class GatedSource(fake_source_cls):
        def __init__(self, **kwargs):
            super().__init__(**kwargs)
            self.entered = threading.Event()
            self.release = threading.Event()
            self.release.set()

        def get_all_locations(self, date_str):
            self.entered.set()
            assert self.release.wait(timeout=5)
            return super().get_all_locations(date_str)

    source = GatedSource(default=[make_location(1, "Gracie's")])
    agg = ScheduleAggregator(source, window_days=3, tz=tz, max_workers=3, clock=clock)
    agg.refresh()
    assert agg.locations_for_day(0)[0].status is OpenStatus.OPEN

    # the next refresh would publish a closed-all-day schedule
    source.default = [make_location(1, "Gracie's", events=[])]
    source.entered.clear()
    source.release.clear()
    worker = threading.Thread(target=agg.refresh)
    worker.start()
    try:
        assert source.entered.wait(timeout=5)
        assert agg.heartbeat()["is_refreshing"] is True

        clock.now = at(21, 45)
        agg.recompute_statuses()
        [gracies] = agg.locations_for_day(0)
        assert gracies.status is OpenStatus.CLOSING_SOON
        assert [(iv.open, iv.close) for iv in gracies.intervals] == [(at(7), at(22))]
    finally:
        source.release.set()
        worker.join(timeout=5)

    assert not worker.is_alive()
    [gracies] = agg.locations_for_day(0)
    assert gracies.intervals == ()
    assert gracies.status is OpenStatus.CLOSED


def test_is_stale_after_midnight_without_refresh(aggregator, clock, at):
    assert aggregator.is_stale() is False
    aggregator.refresh()
    assert aggregator.heartbeat()["is_stale"] is False

    clock.now = at(0, 5, days=1)
    assert aggregator.is_stale() is True
    assert aggregator.heartbeat()["is_stale"] is True

    aggregator.refresh()
    assert aggregator.is_stale() is False
    assert aggregator.heartbeat()["window_start"] == "2025-09-11"
