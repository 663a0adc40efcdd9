"""
Interval builder and repairer: raw events (+ exceptions) for one date -> sorted open periods.

- Builder: for each event, the first exception (if any) overrides the event's hours;
  an exception with open=False means the event contributes nothing for the date.
- Repairer: close <= open means the period runs past midnight (or is 24h service),
  so close moves forward one day; then periods are sorted by open time because
  upstream does not list them chronologically.
"""
import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable

from dining.core.constants import CLOSED_LABEL, DISPLAY_TIME_FORMAT
from dining.services.providers.types import RawEvent
from dining.services.schedule.types import NormalizedInterval


RawPair = tuple[datetime, datetime]

_ASCII_DIGITS = re.compile(r"[0-9]+")


def parse_time_components(value: str | None) -> tuple[int, int, int]:
    """
    Split "HH:MM:SS" into (hour, minute, second).

    Lenient on purpose: a non-numeric or missing component becomes 0 instead of
    raising, so "08:30" -> (8, 30, 0) and "xx:15:00" -> (0, 15, 0).
    """
    parts = (value or "").split(":")
    out = []
    for i in range(3):
        raw = parts[i].strip() if i < len(parts) else ""
        out.append(int(raw) if _ASCII_DIGITS.fullmatch(raw) else 0)
    return out[0], out[1], out[2]


def anchor(day: date, hour: int, minute: int = 0, second: int = 0, *, tz: tzinfo) -> datetime:
    """
    Place a wall-clock time on `day` in the facility time zone.
    Offsets are added to local midnight so 24:00:00 lands on the next midnight instead of failing.
    """
    midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
    return midnight + timedelta(hours=hour, minutes=minute, seconds=second)


def event_hours(event: RawEvent) -> tuple[str, str] | None:
    """(start, end) strings that apply to the event, or None when an exception closes it for the day."""
    if event.exceptions:
        exc = event.exceptions[0]
        if not exc.open:
            return None
        return exc.start_time, exc.end_time
    return event.start_time, event.end_time


def build_intervals(events: Iterable[RawEvent], day: date, *, tz: tzinfo) -> list[RawPair]:
    """Raw (open, close) pairs for `day`. Unsorted and possibly close <= open; run repair_intervals next."""
    pairs: list[RawPair] = []
    for event in events:
        hours = event_hours(event)
        if hours is None:
            continue
        start, end = hours
        pairs.append(
            (
                anchor(day, *parse_time_components(start), tz=tz),
                anchor(day, *parse_time_components(end), tz=tz),
            )
        )
    return pairs


def wrap_close(open_at: datetime, close_at: datetime) -> datetime:
    """Move close forward one day when it is not after open (past-midnight or 24h service)."""
    if close_at <= open_at:
        return close_at + timedelta(days=1)
    return close_at


def repair_intervals(pairs: Iterable[RawPair]) -> list[NormalizedInterval]:
    """Apply wraparound, then sort ascending by open time. Every result has close > open."""
    repaired = [NormalizedInterval(open=o, close=wrap_close(o, c)) for o, c in pairs]
    repaired.sort(key=lambda iv: (iv.open, iv.close))
    return repaired


def intervals_for_day(events: Iterable[RawEvent], day: date, *, tz: tzinfo) -> list[NormalizedInterval]:
    """Builder + repairer in one call. Empty list means closed all day."""
    return repair_intervals(build_intervals(events, day, tz=tz))


def _display_time(dt: datetime, tz: tzinfo | None) -> str:
    local = dt.astimezone(tz) if tz is not None else dt
    return local.strftime(DISPLAY_TIME_FORMAT).lstrip("0")


def format_interval(interval: NormalizedInterval, *, tz: tzinfo | None = None) -> str:
    """Short display string, e.g. "7:00 AM - 10:00 PM"."""
    return f"{_display_time(interval.open, tz)} - {_display_time(interval.close, tz)}"


def format_day_hours(intervals: Iterable[NormalizedInterval], *, tz: tzinfo | None = None) -> list[str]:
    """One string per interval, or ["Closed"] when there are none."""
    out = [format_interval(iv, tz=tz) for iv in intervals]
    return out or [CLOSED_LABEL]
