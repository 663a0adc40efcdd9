"""
Dining data sources: the TigerCenter schedule API and the occupancy API.
Each returns the same wire types so the schedule engine stays source-agnostic.
"""
from dining.services.providers.base import DiningDataSource
from dining.services.providers.occupancy import OccupancyClient
from dining.services.providers.tigercenter import TigerCenterClient
from dining.services.providers.types import (
    HoursException,
    RawEvent,
    RawLocation,
    RawMealPlannerMenu,
    RawMenu,
    RawMenuRecipe,
)

__all__ = [
    "DiningDataSource",
    "HoursException",
    "OccupancyClient",
    "RawEvent",
    "RawLocation",
    "RawMealPlannerMenu",
    "RawMenu",
    "RawMenuRecipe",
    "TigerCenterClient",
]
