"""TigerCenter dining API client: lowest level, sends the request and decodes the wire types."""
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from dining.config import settings
from dining.core.errors import DataSourceError
from dining.services.providers.types import RawLocation, parse_locations

logger = logging.getLogger(__name__)

ALL_LOCATIONS_PATH = "/dining-all"
SINGLE_LOCATION_PATH = "/dining-single"
_SNIPPET_CHARS = 300


def body_snippet(response: httpx.Response) -> str | None:
    return (response.text or "")[:_SNIPPET_CHARS] if response.content else None


def get_json(client: httpx.Client, path: str, params: dict[str, Any]) -> Any:
    """GET and decode JSON. Every failure is raised as DataSourceError."""
    try:
        r = client.get(path, params=params)
    except httpx.HTTPError as e:
        logger.warning("GET %s params=%s failed: %r", path, params, e)
        raise DataSourceError(f"GET {path} failed: {e}") from e
    if not r.is_success:
        snippet = body_snippet(r)
        logger.warning("GET %s params=%s returned HTTP %d body_snippet=%r", path, params, r.status_code, snippet)
        raise DataSourceError(f"GET {path} returned HTTP {r.status_code}", status_code=r.status_code, detail=snippet)
    try:
        return r.json()
    except ValueError as e:
        snippet = body_snippet(r)
        logger.warning("GET %s params=%s returned a non-JSON body: %r", path, params, snippet)
        raise DataSourceError(f"GET {path} returned a non-JSON body", status_code=r.status_code, detail=snippet) from e


class TigerCenterClient:
    """All-locations and single-location lookups for one date."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.tigercenter_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    def get_all_locations(self, date_str: str) -> list[RawLocation]:
        """Every location's record for date_str (YYYY-MM-DD)."""
        with self._client() as c:
            payload = get_json(c, ALL_LOCATIONS_PATH, {"date": date_str})
        try:
            locations = parse_locations(payload)
        except (ValidationError, ValueError) as e:
            raise DataSourceError(f"Could not decode locations for {date_str}: {e}") from e
        logger.debug("Fetched %d locations for %s", len(locations), date_str)
        return locations

    def get_location(self, date_str: str, location_id: int) -> RawLocation:
        """One location's record for date_str."""
        with self._client() as c:
            payload = get_json(c, SINGLE_LOCATION_PATH, {"date": date_str, "locId": location_id})
        try:
            return RawLocation.model_validate(payload)
        except ValidationError as e:
            raise DataSourceError(f"Could not decode location {location_id} for {date_str}: {e}") from e
