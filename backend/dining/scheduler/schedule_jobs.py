"""
Periodic schedule jobs, registered in main.py:

- status tick (every STATUS_TICK_SECONDS): re-classify today's intervals so labels
  flip from "Opening Soon" to "Open" without re-fetching.
- refresh (every REFRESH_INTERVAL_MINUTES): fetch and normalize the rolling window.
- rollover (just after midnight): same refresh, retried a few times so day 0
  does not stay on yesterday until the next interval run.

A failing run is logged and swallowed so the scheduler keeps the job.
"""
import logging
import time
from typing import Callable

from dining.core.constants import ROLLOVER_MAX_ATTEMPTS, ROLLOVER_RETRY_SECONDS
from dining.services.schedule import ScheduleAggregator

logger = logging.getLogger(__name__)


def run_status_tick(aggregator: ScheduleAggregator) -> None:
    try:
        aggregator.recompute_statuses()
    except Exception as e:
        logger.exception("Status tick failed: %s", e)


def run_refresh_job(aggregator: ScheduleAggregator) -> None:
    try:
        aggregator.refresh()
    except Exception as e:
        # refresh already kept the previous schedule; next run retries
        logger.exception("Scheduled refresh failed: %s", e)


def run_rollover_job(
    aggregator: ScheduleAggregator,
    attempts: int = ROLLOVER_MAX_ATTEMPTS,
    retry_seconds: float = ROLLOVER_RETRY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Refresh so the window starts on the new day. Returns True once a refresh succeeded."""
    for attempt in range(1, attempts + 1):
        try:
            aggregator.refresh()
            if attempt > 1:
                logger.info("Rollover refresh succeeded on attempt %d", attempt)
            return True
        except Exception as e:
            logger.warning("Rollover refresh attempt %d/%d failed: %s", attempt, attempts, e)
        if attempt < attempts:
            sleep(retry_seconds)
    logger.error(
        "Rollover refresh gave up after %d attempts; window still starts %s",
        attempts,
        aggregator.heartbeat().get("window_start"),
    )
    return False
