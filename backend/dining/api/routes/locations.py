"""
Schedule API: locations by day, weekly hours, occupancy, visiting chefs and manual refresh.

All data comes from the in-memory ScheduleAggregator on app.state; nothing here
fetches schedules except POST /refresh.
"""
import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from dining.core.errors import DiningError, dining_error_to_http
from dining.services.providers import OccupancyClient
from dining.services.schedule import (
    LocationSchedule,
    NormalizedInterval,
    ScheduleAggregator,
    chef_status,
    format_day_hours,
)

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_DAY_INDEX = 13


def get_aggregator(request: Request) -> ScheduleAggregator:
    return request.app.state.aggregator


def get_occupancy_client(request: Request) -> OccupancyClient:
    client = getattr(request.app.state, "occupancy_client", None)
    return client or OccupancyClient()


def _day_or_404(aggregator: ScheduleAggregator, day: int) -> list[LocationSchedule]:
    try:
        return aggregator.locations_for_day(day)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"day {day} is outside the loaded window")
    except DiningError as e:
        raise dining_error_to_http(e)


def _location_or_404(aggregator: ScheduleAggregator, location_id: int, day: int = 0) -> LocationSchedule:
    for loc in _day_or_404(aggregator, day):
        if loc.id == location_id:
            return loc
    raise HTTPException(status_code=404, detail=f"location {location_id} not found")


def _last_refreshed_iso(aggregator: ScheduleAggregator) -> str | None:
    at = aggregator.last_refreshed
    return at.isoformat() if at is not None else None


@router.get("/locations")
def list_locations(
    day: int = Query(0, ge=0, le=MAX_DAY_INDEX, description="0 = today"),
    open_only: bool = Query(False, description="Only locations that are open or closing soon"),
    aggregator: ScheduleAggregator = Depends(get_aggregator),
):
    """Every location's schedule for one day of the rolling window."""
    if not aggregator.is_loaded:
        return {"date": None, "last_refreshed": None, "locations": []}
    locations = _day_or_404(aggregator, day)
    if open_only:
        locations = [loc for loc in locations if loc.status is not None and loc.status.is_open]
    return {
        "date": aggregator.date_for_day(day).isoformat(),
        "last_refreshed": _last_refreshed_iso(aggregator),
        "locations": [loc.to_dict() for loc in locations],
    }


@router.get("/locations/{location_id}")
def get_location(
    location_id: int,
    day: int = Query(0, ge=0, le=MAX_DAY_INDEX),
    aggregator: ScheduleAggregator = Depends(get_aggregator),
):
    return _location_or_404(aggregator, location_id, day).to_dict()


@router.get("/locations/{location_id}/hours")
def location_hours(location_id: int, aggregator: ScheduleAggregator = Depends(get_aggregator)):
    """
    Hours for each day of the rolling window, formatted for display
    ("7:00 AM - 10:00 PM", or ["Closed"] when the location has no open periods that day).
    """
    try:
        per_day = aggregator.location_hours(location_id)
    except DiningError as e:
        raise dining_error_to_http(e)
    if all(loc is None for _, loc in per_day):
        raise HTTPException(status_code=404, detail=f"location {location_id} not found")
    name = next(loc.name for _, loc in per_day if loc is not None)
    days = []
    for d, loc in per_day:
        intervals = loc.intervals if loc is not None else ()
        days.append(
            {
                "date": d.isoformat(),
                "weekday": d.strftime("%A"),
                "hours": format_day_hours(intervals, tz=aggregator.tz),
                "intervals": [iv.to_dict() for iv in intervals],
            }
        )
    return {"location_id": location_id, "name": name, "days": days}


@router.get("/locations/{location_id}/occupancy")
def location_occupancy(
    location_id: int,
    aggregator: ScheduleAggregator = Depends(get_aggregator),
    client: OccupancyClient = Depends(get_occupancy_client),
):
    """Live occupancy percentage. Only looked up while the location is open; otherwise null."""
    loc = _location_or_404(aggregator, location_id)
    out = {"location_id": location_id, "status": loc.status.value if loc.status else None, "occupancy": None}
    if loc.status is None or not loc.status.is_open or loc.mdo_id is None:
        return out
    try:
        out["occupancy"] = round(client.get_occupancy_percentage(loc.mdo_id), 1)
    except DiningError as e:
        raise dining_error_to_http(e)
    return out


@router.get("/chefs")
def list_chefs(
    day: int = Query(0, ge=0, le=MAX_DAY_INDEX),
    aggregator: ScheduleAggregator = Depends(get_aggregator),
):
    """Locations with visiting chefs on one day; chef statuses are evaluated at request time."""
    if not aggregator.is_loaded:
        return {"date": None, "locations": []}
    now = aggregator.now()
    out = []
    for loc in _day_or_404(aggregator, day):
        if not loc.chefs:
            continue
        chefs = [
            replace(c, status=chef_status(now, NormalizedInterval(open=c.open, close=c.close), aggregator.lookahead))
            for c in loc.chefs
        ]
        out.append(
            {
                "id": loc.id,
                "name": loc.name,
                "maps_url": loc.maps_url,
                "chefs": [c.to_dict() for c in chefs],
            }
        )
    return {"date": aggregator.date_for_day(day).isoformat(), "locations": out}


@router.post("/refresh")
def refresh_schedule(aggregator: ScheduleAggregator = Depends(get_aggregator)):
    """Fetch the rolling window now. Upstream failure -> 502 and the previous schedule stays in place."""
    try:
        aggregator.refresh()
    except DiningError as e:
        raise dining_error_to_http(e)
    return {"ok": True, **aggregator.heartbeat()}
