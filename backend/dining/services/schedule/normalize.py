"""
Day normalization: raw per-location records for one date -> LocationSchedule list.

normalize_day and recompute_statuses are the two entry points the rest of the
service uses; both are pure apart from recompute_statuses rewriting `status`.
"""
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from dining.config import settings
from dining.services.providers.types import RawLocation
from dining.services.schedule.intervals import intervals_for_day
from dining.services.schedule.menus import parse_menus
from dining.services.schedule.status import classify
from dining.services.schedule.types import LocationSchedule


def facility_now(tz: tzinfo | None = None) -> datetime:
    """Current time in the facility time zone."""
    return datetime.now(tz or settings.tz)


def normalize_location(
    raw: RawLocation,
    day: date,
    now: datetime,
    *,
    tz: tzinfo,
    lookahead: timedelta,
) -> LocationSchedule:
    intervals = intervals_for_day(raw.events, day, tz=tz)
    chefs, specials = parse_menus(raw.menus, day, now, tz=tz, lookahead=lookahead, location_name=raw.name)
    return LocationSchedule(
        id=raw.id,
        name=raw.name,
        summary=raw.summary,
        description=raw.description,
        maps_url=raw.maps_url,
        mdo_id=raw.mdo_id,
        date=day.isoformat(),
        intervals=tuple(intervals),
        status=classify(now, intervals, lookahead),
        chefs=tuple(chefs),
        specials=tuple(specials),
    )


def normalize_day(
    raw_locations: Iterable[RawLocation],
    day: date,
    now: datetime | None = None,
    *,
    tz: tzinfo | None = None,
    lookahead: timedelta | None = None,
) -> list[LocationSchedule]:
    """
    One fresh LocationSchedule per raw location, in upstream order.
    `now` drives the initial status and chef statuses; defaults to the facility clock.
    """
    tz = tz or settings.tz
    lookahead = lookahead if lookahead is not None else settings.lookahead
    now = now or facility_now(tz)
    return [normalize_location(raw, day, now, tz=tz, lookahead=lookahead) for raw in raw_locations]


def recompute_statuses(
    schedules: Iterable[LocationSchedule],
    now: datetime,
    lookahead: timedelta | None = None,
) -> None:
    """Re-classify each schedule's existing intervals at `now`, in place. Never touches intervals."""
    lookahead = lookahead if lookahead is not None else settings.lookahead
    for schedule in schedules:
        schedule.status = classify(now, schedule.intervals, lookahead)
