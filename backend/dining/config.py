"""
Application settings (Pydantic Settings).
"""
from datetime import timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import field_validator
from pydantic_settings import BaseSettings

from dining.core.constants import DEFAULT_WINDOW_DAYS

# .env next to backend/ (parent of dining/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    tigercenter_base_url: str = "https://tigercenter.rit.edu/tigerCenterApi/tc"
    occupancy_base_url: str = "https://maps.rit.edu/proxySearch"
    facility_timezone: str = "America/New_York"
    request_timeout_seconds: float = 20.0
    # Rolling window: today + N-1 following days
    schedule_window_days: int = DEFAULT_WINDOW_DAYS
    status_lookahead_minutes: int = 30
    status_tick_seconds: int = 3
    refresh_interval_minutes: int = 30
    refresh_workers: int = 7

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("tigercenter_base_url", "occupancy_base_url", mode="after")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    @field_validator("schedule_window_days", mode="after")
    @classmethod
    def clamp_window(cls, v: int) -> int:
        return max(1, min(v, 14))

    @field_validator("status_tick_seconds", "refresh_workers", mode="after")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        return max(1, v)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.facility_timezone)

    @property
    def lookahead(self) -> timedelta:
        return timedelta(minutes=self.status_lookahead_minutes)


settings = Settings()
