"""
Event queries against the events collection.

Every query builds a date-range filter, counts and/or finds through a
DocumentExecutor, and returns a QueryResult. Identifiers are normalized to
strings by normalize_event, whatever query produced the document.
"""

import logging
from datetime import datetime
from typing import Callable, TypeVar

from bson import ObjectId
from pymongo.errors import PyMongoError

from core.config import (
    EVENT_END_FIELD,
    EVENT_ID_FIELD,
    EVENT_NAME_FIELD,
    EVENT_START_FIELD,
    EVENTS_COLLECTION,
    MAX_EVENTS_PER_PAGE,
)
from core.database import DocumentExecutor, InsufficientRoleError, OperationOptions
from models.events import Event, EventPage
from models.results import InvalidQueryError, QueryErrorKind, QueryResult
from models.roles import SystemRole
from services.filters import (
    as_utc,
    build_event_filter,
    explicit_range,
    month_range,
    overlap_filter,
    ranges_overlap,
    year_range,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

EVENT_PROJECTION = {
    "_id": 1,
    EVENT_ID_FIELD: 1,
    EVENT_NAME_FIELD: 1,
    EVENT_START_FIELD: 1,
    EVENT_END_FIELD: 1,
}


# =============================================================================
# HELPERS
# =============================================================================


def normalize_event(document: dict) -> Event:
    """Map a stored document to an Event with a string identifier and UTC dates."""
    raw_id = document.get(EVENT_ID_FIELD)
    if raw_id is None:
        raw_id = document["_id"]
    return {
        "event_id": str(raw_id),
        "name": document.get(EVENT_NAME_FIELD, ""),
        "start": as_utc(document[EVENT_START_FIELD]),
        "end": as_utc(document[EVENT_END_FIELD]),
    }


def _classify(error: Exception) -> QueryErrorKind:
    if isinstance(error, InsufficientRoleError):
        return QueryErrorKind.PERMISSION_DENIED
    if isinstance(error, InvalidQueryError):
        return QueryErrorKind.INVALID_PARAMETERS
    if isinstance(error, PyMongoError):
        return QueryErrorKind.DATABASE_ERROR
    return QueryErrorKind.UNKNOWN


def _run(description: str, query: Callable[[], T]) -> QueryResult[T]:
    try:
        return QueryResult.success(query())
    except Exception as e:
        kind = _classify(e)
        if kind in (QueryErrorKind.INVALID_PARAMETERS, QueryErrorKind.PERMISSION_DENIED):
            logger.warning("Rejected %s: %s", description, e)
        else:
            logger.exception("Error %s", description)
        return QueryResult.failure(kind, e)


def _count_events(
    executor: DocumentExecutor,
    query_filter: dict,
    instance: str | None,
    required_role: SystemRole,
) -> int:
    count = executor.execute(
        instance,
        {
            "operation": "countDocuments",
            "collection": EVENTS_COLLECTION,
            "filter": query_filter,
        },
        required_role,
    )
    return count or 0


def _find_events(
    executor: DocumentExecutor,
    query_filter: dict,
    instance: str | None,
    required_role: SystemRole,
    skip: int | None = None,
    limit: int | None = None,
) -> list[Event]:
    options: OperationOptions = {
        "sort": {EVENT_START_FIELD: 1},
        "projection": EVENT_PROJECTION,
    }
    if skip is not None:
        options["skip"] = skip
    if limit is not None:
        options["limit"] = limit

    documents = executor.execute(
        instance,
        {
            "operation": "find",
            "collection": EVENTS_COLLECTION,
            "filter": query_filter,
            "options": options,
        },
        required_role,
    )
    return [normalize_event(document) for document in documents or []]


def _id_filter(event_id: str) -> dict:
    """Match the external id as stored (string or int) or the raw ObjectId."""
    clauses: list[dict] = [{EVENT_ID_FIELD: event_id}]
    if event_id.isdigit():
        clauses.append({EVENT_ID_FIELD: int(event_id)})
    if ObjectId.is_valid(event_id):
        clauses.append({"_id": ObjectId(event_id)})
    if len(clauses) == 1:
        return clauses[0]
    return {"$or": clauses}


# =============================================================================
# QUERIES
# =============================================================================


def search_events(
    executor: DocumentExecutor,
    month: int | None = None,
    year: int | None = None,
    limit: int = MAX_EVENTS_PER_PAGE,
    offset: int = 0,
    instance: str | None = None,
) -> QueryResult[EventPage]:
    """
    Search events with an optional month filter and pagination.

    Without a month every event matches (oldest first). The year only
    applies together with a month and defaults to the current year.

    Returns:
        QueryResult wrapping {"events": [...], "total": N}, where total counts
        every match, not just the returned page.
    """

    def query() -> EventPage:
        if limit < 1:
            raise InvalidQueryError("Limit must be at least 1")
        if offset < 0:
            raise InvalidQueryError("Offset must not be negative")

        query_filter = build_event_filter(month, year)
        total = _count_events(executor, query_filter, instance, SystemRole.RESPONSIBLE)
        events = _find_events(
            executor,
            query_filter,
            instance,
            SystemRole.RESPONSIBLE,
            skip=offset,
            limit=limit,
        )
        return {"events": events, "total": total}

    return _run("searching events", query)


def search_events_by_month(
    executor: DocumentExecutor,
    month: int,
    year: int | None = None,
    instance: str | None = None,
    limit: int = MAX_EVENTS_PER_PAGE,
    offset: int = 0,
) -> QueryResult[EventPage]:
    """Paginated search for a single month."""
    return search_events(
        executor, month=month, year=year, limit=limit, offset=offset, instance=instance
    )


def search_events_by_year(
    executor: DocumentExecutor, year: int, instance: str | None = None
) -> QueryResult[list[Event]]:
    """All events overlapping a calendar year. Directive role only."""
    return _run(
        "searching events by year",
        lambda: _find_events(
            executor, overlap_filter(year_range(year)), instance, SystemRole.DIRECTIVE
        ),
    )


def search_events_by_range(
    executor: DocumentExecutor,
    start: datetime,
    end: datetime,
    instance: str | None = None,
) -> QueryResult[list[Event]]:
    """All events overlapping [start, end]. Directive role only."""
    return _run(
        "searching events by range",
        lambda: _find_events(
            executor,
            overlap_filter(explicit_range(start, end)),
            instance,
            SystemRole.DIRECTIVE,
        ),
    )


def find_event_by_id(
    executor: DocumentExecutor, event_id: str | int, instance: str | None = None
) -> QueryResult[Event | None]:
    """Look up one event. The value is None when no event matches."""

    def query() -> Event | None:
        key = str(event_id).strip()
        if not key:
            raise InvalidQueryError("Event id must not be empty")
        document = executor.execute(
            instance,
            {
                "operation": "findOne",
                "collection": EVENTS_COLLECTION,
                "filter": _id_filter(key),
                "options": {"projection": EVENT_PROJECTION},
            },
            SystemRole.RESPONSIBLE,
        )
        return normalize_event(document) if document else None

    return _run("finding event by id", query)


def count_events_by_month(
    executor: DocumentExecutor,
    month: int,
    year: int | None = None,
    instance: str | None = None,
) -> QueryResult[int]:
    """Number of events overlapping a month."""
    return _run(
        "counting events by month",
        lambda: _count_events(
            executor,
            overlap_filter(month_range(month, year)),
            instance,
            SystemRole.RESPONSIBLE,
        ),
    )


# =============================================================================
# CONFLICTS
# =============================================================================


def find_conflicting_events(
    start: datetime, end: datetime, events: list[Event]
) -> list[Event]:
    """Events whose interval overlaps [start, end], boundaries included."""
    return [
        event
        for event in events
        if ranges_overlap(event["start"], event["end"], start, end)
    ]
