"""Protocol for dining data sources. The aggregator only depends on this contract."""
from typing import Protocol

from dining.services.providers.types import RawLocation


class DiningDataSource(Protocol):
    """Anything that can return every location's raw record for one date."""

    def get_all_locations(self, date_str: str) -> list[RawLocation]:
        """
        Fetch all locations for one date (YYYY-MM-DD).
        Raises DataSourceError on transport, HTTP or decode failure; never returns partial data.
        """
        ...
