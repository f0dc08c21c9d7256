"""API Pydantic models."""

from .responses import (
    ErrorCodes,
    ErrorResponse,
    EventResponse,
    EventsResponse,
    HealthResponse,
)

__all__ = [
    "HealthResponse",
    "EventResponse",
    "EventsResponse",
    "ErrorResponse",
    "ErrorCodes",
]
