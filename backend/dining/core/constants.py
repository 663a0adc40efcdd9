"""
Centralized constants for the schedule engine and scheduler jobs.

Change job IDs, menu categories or thresholds here instead of scattering literals
across main, routes and the engine. Env-driven values (tick, refresh interval,
window size) come from config.settings.
"""
from datetime import timedelta

# Scheduler job IDs (must match ids used in main.py add_job)
STATUS_TICK_JOB_ID = "status_tick"
SCHEDULE_REFRESH_JOB_ID = "schedule_refresh"
SCHEDULE_ROLLOVER_JOB_ID = "schedule_rollover"

# Daily rollover refresh runs at this facility-local time so index 0 is always "today"
ROLLOVER_HOUR = 0
ROLLOVER_MINUTE = 1
# A failed rollover refresh is retried this many times, this far apart, before the interval job takes over
ROLLOVER_MAX_ATTEMPTS = 5
ROLLOVER_RETRY_SECONDS = 60

# Open/closed look-ahead window
STATUS_LOOKAHEAD = timedelta(minutes=30)
# An interval exactly this long is continuous service and never "closing soon"
CONTINUOUS_SERVICE = timedelta(hours=24)

DEFAULT_WINDOW_DAYS = 7

# Menu categories the upstream API uses; anything else is ignored
MENU_CATEGORY_VISITING_CHEF = "Visiting Chef"
MENU_CATEGORY_DAILY_SPECIAL = "Daily Specials"

# Display format for interval strings, e.g. "7:00 AM"
DISPLAY_TIME_FORMAT = "%I:%M %p"
CLOSED_LABEL = "Closed"
