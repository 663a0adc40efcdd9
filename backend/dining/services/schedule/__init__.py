"""
Schedule engine: raw dining records -> normalized open periods, open/closed status,
visiting chef appearances and daily specials, plus the rolling-window aggregator.

Everything here except ScheduleAggregator is a pure function of its inputs.
"""
from dining.services.schedule.aggregator import ScheduleAggregator
from dining.services.schedule.intervals import (
    build_intervals,
    format_day_hours,
    format_interval,
    intervals_for_day,
    parse_time_components,
    repair_intervals,
)
from dining.services.schedule.menus import (
    ChefLabelError,
    parse_chef_appearance,
    parse_daily_special,
    parse_menu_items,
    parse_menus,
)
from dining.services.schedule.normalize import facility_now, normalize_day, recompute_statuses
from dining.services.schedule.status import chef_status, classify
from dining.services.schedule.types import (
    ChefAppearance,
    ChefStatus,
    DailySpecial,
    LocationSchedule,
    MenuItem,
    NormalizedInterval,
    OpenStatus,
)

__all__ = [
    "ChefAppearance",
    "ChefLabelError",
    "ChefStatus",
    "DailySpecial",
    "LocationSchedule",
    "MenuItem",
    "NormalizedInterval",
    "OpenStatus",
    "ScheduleAggregator",
    "build_intervals",
    "chef_status",
    "classify",
    "facility_now",
    "format_day_hours",
    "format_interval",
    "intervals_for_day",
    "normalize_day",
    "parse_chef_appearance",
    "parse_daily_special",
    "parse_menu_items",
    "parse_menus",
    "parse_time_components",
    "recompute_statuses",
    "repair_intervals",
]
