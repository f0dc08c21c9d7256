"""Pydantic response models for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from models.events import Event


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class EventResponse(BaseModel):
    """Event as the API consumer expects it, using the stored field names."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field(alias="Id_Evento")
    name: str = Field(alias="Nombre")
    start: datetime = Field(alias="Fecha_Inicio")
    end: datetime = Field(alias="Fecha_Conclusion")

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            event_id=event["event_id"],
            name=event["name"],
            start=event["start"],
            end=event["end"],
        )


class EventsResponse(BaseModel):
    """Successful events search, including the empty result."""

    success: bool = True
    message: str
    data: list[EventResponse]
    total: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    message: str
    errorType: str
    details: Any = None


class ErrorCodes:
    """Error code constants."""

    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    UNAUTHORIZED = "UNAUTHORIZED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
