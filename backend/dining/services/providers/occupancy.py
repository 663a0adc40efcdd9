"""Occupancy lookup: live head count vs capacity for one location (by its occupancy id)."""
import logging

import httpx
from pydantic import ValidationError

from dining.config import settings
from dining.core.errors import DataSourceError
from dining.services.providers.tigercenter import get_json
from dining.services.providers.types import RawOccupancy

logger = logging.getLogger(__name__)

OCCUPANCY_PATH = "/densityMapDetail.php"


def occupancy_percentage(record: RawOccupancy) -> float:
    """count / max_occ as a percentage. Raises DataSourceError when capacity is unknown."""
    if record.max_occ <= 0:
        raise DataSourceError(f"Occupancy record for {record.location or 'location'} has no capacity")
    return record.count / record.max_occ * 100


class OccupancyClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.occupancy_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

    def get_occupancy_percentage(self, mdo_id: int) -> float:
        """Current occupancy of one location, 0-100 (can exceed 100 if over capacity)."""
        with httpx.Client(base_url=self._base_url, timeout=self._timeout, transport=self._transport) as c:
            payload = get_json(c, OCCUPANCY_PATH, {"mdo": mdo_id})
        if not isinstance(payload, list) or not payload:
            raise DataSourceError(f"No occupancy data for mdo={mdo_id}")
        try:
            record = RawOccupancy.model_validate(payload[0])
        except ValidationError as e:
            raise DataSourceError(f"Could not decode occupancy for mdo={mdo_id}: {e}") from e
        pct = occupancy_percentage(record)
        logger.debug("Occupancy mdo=%s count=%d max=%d pct=%.1f", mdo_id, record.count, record.max_occ, pct)
        return pct
