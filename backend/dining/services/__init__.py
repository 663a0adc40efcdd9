from dining.services.schedule import ScheduleAggregator, normalize_day, recompute_statuses

__all__ = ["ScheduleAggregator", "normalize_day", "recompute_statuses"]
