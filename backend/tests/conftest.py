"""Shared fixtures: facility time zone, a fixed reference day and raw record factories."""
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from dining.core.errors import DataSourceError
from dining.services.providers.types import RawLocation

TZ = ZoneInfo("America/New_York")
DAY = date(2025, 9, 10)  # a Wednesday, well away from DST changes


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def at():
    """at(21, 45) -> 21:45 on the reference day; days= shifts the calendar day."""

    def _at(hour: int, minute: int = 0, *, days: int = 0) -> datetime:
        return datetime(DAY.year, DAY.month, DAY.day, hour, minute, tzinfo=TZ) + timedelta(days=days)

    return _at


@pytest.fixture
def make_location():
    """Build a RawLocation from the upstream camelCase shape."""

    def _make(
        location_id: int = 1,
        name: str = "Gracie's",
        events: list[dict] | None = None,
        menus: list[dict] | None = None,
        **extra,
    ) -> RawLocation:
        payload = {
            "id": location_id,
            "name": name,
            "summary": "Dining Hall",
            "description": "All-you-care-to-eat",
            "mapsUrl": f"https://maps.example.edu/{location_id}",
            "events": events if events is not None else [{"startTime": "07:00:00", "endTime": "22:00:00"}],
            "menus": menus or [],
            **extra,
        }
        return RawLocation.model_validate(payload)

    return _make


class FakeSource:
    """In-memory DiningDataSource: per-date locations, optional per-date failures, records calls."""

    def __init__(self, by_date=None, default=None, fail_dates=()):
        self.by_date = dict(by_date or {})
        self.default = list(default or [])
        self.fail_dates = set(fail_dates)
        self.calls: list[str] = []

    def get_all_locations(self, date_str: str) -> list[RawLocation]:
        self.calls.append(date_str)
        if date_str in self.fail_dates:
            raise DataSourceError(f"boom for {date_str}", status_code=503)
        return list(self.by_date.get(date_str, self.default))


@pytest.fixture
def fake_source_cls():
    return FakeSource


@pytest.fixture
def clock(at):
    """Mutable fixed clock: clock.now is returned by clock()."""

    class _Clock:
        def __init__(self):
            self.now = at(12, 0)

        def __call__(self):
            return self.now

    return _Clock()
