from datetime import timedelta
from itertools import permutations

import pytest

from dining.services.providers.types import RawEvent
from dining.services.schedule.intervals import (
    anchor,
    build_intervals,
    format_day_hours,
    format_interval,
    intervals_for_day,
    parse_time_components,
    repair_intervals,
)
from dining.services.schedule.types import NormalizedInterval


def _event(start, end, exceptions=None):
    payload = {"startTime": start, "endTime": end}
    if exceptions is not None:
        payload["exceptions"] = exceptions
    return RawEvent.model_validate(payload)


def _exception(start="10:00:00", end="14:00:00", open_=True):
    return {
        "id": 7,
        "name": "Fall Break",
        "startTime": start,
        "endTime": end,
        "startDate": "2025-09-10",
        "endDate": "2025-09-12",
        "open": open_,
    }


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("07:30:15", (7, 30, 15)),
        ("08:30", (8, 30, 0)),
        ("xx:15:00", (0, 15, 0)),
        ("", (0, 0, 0)),
        (None, (0, 0, 0)),
        ("0²:00:00", (0, 0, 0)),
        ("²:30:00", (0, 30, 0)),
        ("٠٧:00:00", (0, 0, 0)),
    ],
)
def test_parse_time_components_is_lenient(raw, expected):
    assert parse_time_components(raw) == expected


def test_anchor_handles_end_of_day(day, tz, at):
    assert anchor(day, 24, tz=tz) == at(0, days=1)
    assert anchor(day, 7, 30, tz=tz) == at(7, 30)


def test_event_hours_used_without_exceptions(day, tz, at):
    pairs = build_intervals([_event("07:00:00", "22:00:00")], day, tz=tz)
    assert pairs == [(at(7), at(22))]


def test_open_exception_overrides_event_hours(day, tz, at):
    pairs = build_intervals([_event("07:00:00", "22:00:00", [_exception("10:00:00", "14:00:00")])], day, tz=tz)
    assert pairs == [(at(10), at(14))]


def test_only_first_exception_is_consulted(day, tz, at):
    exceptions = [_exception("09:00:00", "11:00:00"), _exception(open_=False)]
    pairs = build_intervals([_event("07:00:00", "22:00:00", exceptions)], day, tz=tz)
    assert pairs == [(at(9), at(11))]


def test_closed_exception_yields_no_interval(day, tz):
    event = _event("07:00:00", "22:00:00", [_exception(open_=False)])
    assert build_intervals([event], day, tz=tz) == []


def test_empty_exception_list_falls_back_to_event_hours(day, tz, at):
    pairs = build_intervals([_event("07:00:00", "22:00:00", [])], day, tz=tz)
    assert pairs == [(at(7), at(22))]


def test_no_events_means_closed_all_day(day, tz):
    assert intervals_for_day([], day, tz=tz) == []


def test_wraparound_past_midnight(day, tz):
    [interval] = intervals_for_day([_event("22:00:00", "02:00:00")], day, tz=tz)
    assert interval.close - interval.open == timedelta(hours=4)
    assert interval.close.date() == day + timedelta(days=1)


def test_equal_open_and_close_is_continuous_service(day, tz):
    [interval] = intervals_for_day([_event("00:00:00", "00:00:00")], day, tz=tz)
    assert interval.close - interval.open == timedelta(hours=24)


def test_repair_sorts_out_of_order_intervals(day, tz, at):
    events = [_event("17:00:00", "20:00:00"), _event("11:00:00", "14:00:00")]
    intervals = intervals_for_day(events, day, tz=tz)
    assert [iv.open for iv in intervals] == [at(11), at(17)]


def test_repair_is_order_independent(at):
    pairs = [(at(17), at(20)), (at(22), at(1)), (at(7), at(9)), (at(11), at(11))]
    expected = repair_intervals(pairs)
    for perm in permutations(pairs):
        assert repair_intervals(perm) == expected


def test_every_repaired_interval_closes_after_it_opens(at):
    pairs = [(at(7), at(22)), (at(22), at(2)), (at(0), at(0)), (at(12), at(6)), (at(23, 59), at(23, 59))]
    for interval in repair_intervals(pairs):
        assert interval.close > interval.open


def test_format_interval(at, tz):
    assert format_interval(NormalizedInterval(open=at(7), close=at(22)), tz=tz) == "7:00 AM - 10:00 PM"
    assert format_interval(NormalizedInterval(open=at(11, 30), close=at(0, days=1)), tz=tz) == "11:30 AM - 12:00 AM"


def test_format_day_hours_without_intervals_reads_closed():
    assert format_day_hours([]) == ["Closed"]
