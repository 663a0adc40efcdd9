#!/usr/bin/env python3
"""Print one day's normalized schedule straight from the upstream API (no server needed).

Run from backend: python scripts/schedule_debug.py [--date YYYY-MM-DD] [--chefs]

Or with backend running: curl -s http://127.0.0.1:8000/locations | jq
"""
import argparse
import sys
from datetime import date
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from dining.config import settings
from dining.core.errors import DataSourceError
from dining.services.providers import TigerCenterClient
from dining.services.schedule import facility_now, format_day_hours, normalize_day


def main() -> int:
    p = argparse.ArgumentParser(description="Fetch and normalize one day of dining hours")
    p.add_argument("--date", help="YYYY-MM-DD (default: today in the facility time zone)")
    p.add_argument("--chefs", action="store_true", help="Also print visiting chefs and daily specials")
    args = p.parse_args()

    now = facility_now()
    day = date.fromisoformat(args.date) if args.date else now.date()

    try:
        raw = TigerCenterClient().get_all_locations(day.isoformat())
    except DataSourceError as e:
        print("FAIL fetch:", e)
        return 1

    schedules = normalize_day(raw, day, now)
    print(f"Dining hours for {day.isoformat()} (now {now.strftime('%H:%M')} {settings.facility_timezone})")
    print("=" * 60)
    for loc in schedules:
        status = loc.status.value if loc.status else "unknown"
        print(f"{loc.name[:40]:<40} {status}")
        for line in format_day_hours(loc.intervals, tz=settings.tz):
            print(f"    {line}")
        if args.chefs:
            for chef in loc.chefs or ():
                print(f"    chef: {chef.name} [{chef.status.value}]")
            for special in loc.specials or ():
                print(f"    special: {special.name} ({special.type or '-'})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
