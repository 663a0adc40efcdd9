"""
FastAPI app entrypoint.

Serves the rolling 7-day dining schedule from memory. Two background jobs keep it
current: a short status tick (open/closed labels follow the clock) and a periodic
refresh (re-fetch + re-normalize), plus a rollover refresh just after midnight.
"""
import logging
import os
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from dining.api.routes import locations
from dining.config import settings
from dining.core.constants import (
    ROLLOVER_HOUR,
    ROLLOVER_MINUTE,
    SCHEDULE_REFRESH_JOB_ID,
    SCHEDULE_ROLLOVER_JOB_ID,
    STATUS_TICK_JOB_ID,
)
from dining.scheduler.schedule_jobs import run_refresh_job, run_rollover_job, run_status_tick
from dining.services.providers import OccupancyClient, TigerCenterClient
from dining.services.schedule import ScheduleAggregator

logger = logging.getLogger(__name__)


def configure_logging_if_needed() -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def build_scheduler(aggregator: ScheduleAggregator) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=settings.facility_timezone)
    scheduler.add_job(
        run_status_tick,
        "interval",
        seconds=settings.status_tick_seconds,
        id=STATUS_TICK_JOB_ID,
        args=[aggregator],
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_refresh_job,
        "interval",
        minutes=settings.refresh_interval_minutes,
        id=SCHEDULE_REFRESH_JOB_ID,
        args=[aggregator],
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_rollover_job,
        "cron",
        hour=ROLLOVER_HOUR,
        minute=ROLLOVER_MINUTE,
        id=SCHEDULE_ROLLOVER_JOB_ID,
        args=[aggregator],
        max_instances=1,
        coalesce=True,
    )
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging_if_needed()
    aggregator = ScheduleAggregator(TigerCenterClient())
    app.state.aggregator = aggregator
    app.state.occupancy_client = OccupancyClient()

    scheduler = build_scheduler(aggregator)
    scheduler.start()
    app.state.scheduler = scheduler

    def startup_background():
        # First refresh off the event loop; the interval job retries if this fails.
        try:
            aggregator.refresh()
            logger.info("Startup refresh done; next refresh in %s min", settings.refresh_interval_minutes)
        except Exception as e:
            logger.warning("Startup refresh failed: %s", e, exc_info=True)

    threading.Thread(target=startup_background, daemon=True).start()
    logger.info(
        "Dining hours ready tz=%s window_days=%s status_tick=%ss refresh_every=%smin",
        settings.facility_timezone,
        settings.schedule_window_days,
        settings.status_tick_seconds,
        settings.refresh_interval_minutes,
    )
    yield
    scheduler.shutdown(wait=False)


app = FastAPI(title="Dining Hours", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for a deployed frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(locations.router, tags=["schedule"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Dining Hours API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict:
    aggregator = getattr(app.state, "aggregator", None)
    out: dict = {"status": "ok"}
    if aggregator is not None:
        out["schedule"] = aggregator.heartbeat()
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        job = scheduler.get_job(SCHEDULE_REFRESH_JOB_ID)
        if job is not None and job.next_run_time is not None:
            out["next_refresh_at"] = job.next_run_time.isoformat()
    return out
