"""
Schedule aggregator: the one stateful piece of the engine.

Holds the rolling window (today + N-1 days) of normalized schedules, indexed by
day offset (0 = today in the facility time zone). refresh() fetches every day of
the window and swaps the whole collection in only when every fetch succeeded;
recompute_statuses() re-classifies today's already-normalized intervals against
the clock without fetching or parsing. Readers always get copies.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable

from dining.config import settings
from dining.core.errors import ScheduleNotReadyError
from dining.services.providers.base import DiningDataSource
from dining.services.providers.types import RawLocation
from dining.services.schedule.normalize import facility_now, normalize_day, recompute_statuses
from dining.services.schedule.types import LocationSchedule

logger = logging.getLogger(__name__)


class ScheduleAggregator:
    def __init__(
        self,
        source: DiningDataSource,
        *,
        window_days: int | None = None,
        tz: tzinfo | None = None,
        lookahead: timedelta | None = None,
        max_workers: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._source = source
        self._window_days = window_days or settings.schedule_window_days
        self._tz = tz or settings.tz
        self._lookahead = lookahead if lookahead is not None else settings.lookahead
        self._max_workers = max_workers or settings.refresh_workers
        self._clock = clock or (lambda: facility_now(self._tz))

        # _lock guards the published collection; _refresh_lock keeps a single writer
        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._locations_by_day: list[list[LocationSchedule]] = []
        self._days: list[date] = []
        self._last_refreshed: datetime | None = None
        self._last_refresh_started_at: datetime | None = None
        self._last_error: str | None = None
        self._refreshing = False

    @property
    def tz(self) -> tzinfo:
        return self._tz

    @property
    def window_days(self) -> int:
        return self._window_days

    @property
    def lookahead(self) -> timedelta:
        return self._lookahead

    def now(self) -> datetime:
        return self._clock()

    def window_dates(self, today: date) -> list[date]:
        return [today + timedelta(days=offset) for offset in range(self._window_days)]

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def _fetch_window(self, days: list[date]) -> dict[date, list[RawLocation]]:
        """Fetch every day in parallel. The first failure cancels what has not started and is re-raised."""
        results: dict[date, list[RawLocation]] = {}
        workers = max(1, min(self._max_workers, len(days)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="schedule_refresh") as pool:
            futures = {pool.submit(self._source.get_all_locations, d.isoformat()): d for d in days}
            try:
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
            except Exception:
                for fut in futures:
                    fut.cancel()
                raise
        return results

    def refresh(self, today: date | None = None) -> None:
        """
        Fetch and normalize the whole window starting at `today` (default: facility today),
        then publish it. On any failure the previously published schedule stays as it was
        and the error propagates to the caller; no retries here.
        """
        with self._refresh_lock:
            now = self._clock()
            today = today or now.date()
            days = self.window_dates(today)
            self._last_refresh_started_at = now
            self._refreshing = True
            logger.info("Schedule refresh start window=%s..%s days=%d", days[0], days[-1], len(days))
            try:
                fetched = self._fetch_window(days)
                new_by_day = [
                    normalize_day(fetched[d], d, now, tz=self._tz, lookahead=self._lookahead) for d in days
                ]
            except Exception as e:
                self._last_error = repr(e)
                logger.warning("Schedule refresh failed; keeping previous schedule: %r", e)
                raise
            finally:
                self._refreshing = False

            with self._lock:
                self._locations_by_day = new_by_day
                self._days = days
                self._last_refreshed = self._clock()
                self._last_error = None
            logger.info(
                "Schedule refresh done window=%s..%s locations_per_day=%s",
                days[0],
                days[-1],
                [len(day) for day in new_by_day],
            )

    def recompute_statuses(self, now: datetime | None = None) -> None:
        """Re-classify today's entries in place. Safe to run while a refresh is in flight."""
        now = now or self._clock()
        with self._lock:
            today_entries = self._locations_by_day[0] if self._locations_by_day else []
        recompute_statuses(today_entries, now, self._lookahead)

    # ------------------------------------------------------------------
    # Readers (copies only)
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        with self._lock:
            return bool(self._days)

    @property
    def last_refreshed(self) -> datetime | None:
        return self._last_refreshed

    @property
    def days_represented(self) -> list[date]:
        with self._lock:
            return list(self._days)

    @property
    def locations_by_day(self) -> list[list[LocationSchedule]]:
        with self._lock:
            return [[replace(loc) for loc in day] for day in self._locations_by_day]

    def locations_for_day(self, day_index: int = 0) -> list[LocationSchedule]:
        """
        Copy of one day's schedules. Raises ScheduleNotReadyError before the first
        refresh and IndexError for a day outside the window.
        """
        with self._lock:
            if not self._days:
                raise ScheduleNotReadyError("no schedule loaded")
            if not 0 <= day_index < len(self._locations_by_day):
                raise IndexError(f"day {day_index} is outside the {len(self._locations_by_day)}-day window")
            return [replace(loc) for loc in self._locations_by_day[day_index]]

    def date_for_day(self, day_index: int = 0) -> date:
        with self._lock:
            if not self._days:
                raise ScheduleNotReadyError("no schedule loaded")
            return self._days[day_index]

    def find_location(self, location_id: int, day_index: int = 0) -> LocationSchedule | None:
        for loc in self.locations_for_day(day_index):
            if loc.id == location_id:
                return loc
        return None

    def location_hours(self, location_id: int) -> list[tuple[date, LocationSchedule | None]]:
        """One entry per day in the window; None where the location had no record that day."""
        with self._lock:
            if not self._days:
                raise ScheduleNotReadyError("no schedule loaded")
            out = []
            for d, day in zip(self._days, self._locations_by_day):
                match = next((loc for loc in day if loc.id == location_id), None)
                out.append((d, replace(match) if match is not None else None))
            return out

    def is_stale(self, today: date | None = None) -> bool:
        """True when a window is loaded but does not start at `today` (default: facility today)."""
        today = today or self._clock().date()
        with self._lock:
            return bool(self._days) and self._days[0] != today

    def heartbeat(self) -> dict:
        """Last refresh times, error (if any), whether a refresh is running and whether day 0 is behind the clock."""
        out = {
            "last_refreshed": self._last_refreshed.isoformat() if self._last_refreshed else None,
            "last_refresh_started_at": (
                self._last_refresh_started_at.isoformat() if self._last_refresh_started_at else None
            ),
            "last_error": self._last_error,
            "is_refreshing": self._refreshing,
            "days_loaded": len(self._days),
            "window_days": self._window_days,
            "is_stale": self.is_stale(),
        }
        if self._days:
            out["window_start"] = self._days[0].isoformat()
        return out
