#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from repo root or backend/:
  python backend/scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env (optional: every setting has a default)
    env_file = backend_dir / ".env"
    if env_file.exists():
        print("OK  .env exists")
    else:
        print("--  .env missing (using defaults)")

    # 2) Settings + time zone
    try:
        from dining.config import settings

        settings.tz
        print(f"OK  Facility time zone {settings.facility_timezone}")
    except Exception as e:
        errors.append(f"Settings: {e}")
        print("FAIL Settings:", e)

    # 3) App import (catches missing deps, bad imports)
    try:
        from dining.main import app  # noqa: F401
        print("OK  App import (dining.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)
        return 1

    # 4) Upstream dining API reachable for today
    try:
        from dining.services.providers import TigerCenterClient
        from dining.services.schedule import facility_now

        today = facility_now().date().isoformat()
        locations = TigerCenterClient().get_all_locations(today)
        print(f"OK  Dining API ({len(locations)} locations for {today})")
    except Exception as e:
        errors.append(f"Dining API: {e}")
        print("FAIL Dining API:", e)

    # 5) Port 8000
    try:
        import socket
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        print("\nThen start backend: cd backend && uvicorn dining.main:app --reload")
        return 1

    print("\nAll checks passed. Start with: cd backend && uvicorn dining.main:app --reload")
    return 0

if __name__ == "__main__":
    sys.exit(main())
