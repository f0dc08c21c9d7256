"""
Data models for events.

Using TypedDict for type hints on event dictionaries, matching what the
query service hands to the API layer.
"""

from datetime import datetime
from typing import TypedDict


class Event(TypedDict):
    """Normalized event read from the events collection."""
    event_id: str
    name: str
    start: datetime
    end: datetime


class EventPage(TypedDict):
    """One page of events plus the total number of matches."""
    events: list[Event]
    total: int
