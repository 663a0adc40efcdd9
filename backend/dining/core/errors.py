"""
Centralized error types and HTTP mapping.
Routes catch DiningError subclasses and hand them to dining_error_to_http so they stay thin.
"""
from __future__ import annotations

from typing import Callable

from fastapi import HTTPException

# HTTP status codes for known error categories
STATUS_BAD_GATEWAY = 502  # upstream dining/occupancy API failed
STATUS_SERVICE_UNAVAILABLE = 503  # schedule not loaded yet
STATUS_INTERNAL_ERROR = 500

MSG_NOT_READY = "Schedule has not been loaded yet. Try again shortly."


class DiningError(Exception):
    """Base class for errors raised by the dining schedule service."""


class DataSourceError(DiningError):
    """
    Upstream fetch failed: transport error, non-2xx response or undecodable body.
    status_code is the upstream HTTP status when there was one.
    """

    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ScheduleNotReadyError(DiningError):
    """No successful refresh has happened yet."""


# List of (exception type, status_code, detail builder). First match wins.
ERROR_RULES: list[tuple[type[Exception], int, Callable[[Exception], str]]] = [
    (DataSourceError, STATUS_BAD_GATEWAY, lambda e: f"Dining data source failed: {e}"),
    (ScheduleNotReadyError, STATUS_SERVICE_UNAVAILABLE, lambda e: MSG_NOT_READY),
]


def dining_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from the engine or data source into an HTTPException.
    Uses ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code, detail in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=detail(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
