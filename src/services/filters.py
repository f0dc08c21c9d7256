"""
Date-range boundaries and overlap filters for event queries.

Boundaries are UTC-aware datetimes. Stored event dates are UTC too.
"""

import calendar
from datetime import date, datetime, timezone
from typing import NamedTuple

from core.config import EVENT_END_FIELD, EVENT_START_FIELD
from models.results import InvalidQueryError


class DateRange(NamedTuple):
    """Inclusive [start, end] pair."""
    start: datetime
    end: datetime


def as_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _stored_utc(value: datetime) -> datetime:
    # BSON dates carry no zone
    return as_utc(value).replace(tzinfo=None)


def _end_of_day(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999000, tzinfo=timezone.utc)


def month_range(month: int, year: int | None = None, today: date | None = None) -> DateRange:
    """
    First and last instant of a month.

    Year defaults to the current year. The end is the last day of the month
    at 23:59:59.999.

    Raises:
        InvalidQueryError: if month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise InvalidQueryError(f"Month must be between 1 and 12, got {month}")

    query_year = year or (today or date.today()).year
    _, last_day = calendar.monthrange(query_year, month)
    return DateRange(
        start=datetime(query_year, month, 1, tzinfo=timezone.utc),
        end=_end_of_day(date(query_year, month, last_day)),
    )


def year_range(year: int) -> DateRange:
    """January 1st 00:00 to December 31st 23:59:59.999."""
    return DateRange(
        start=datetime(year, 1, 1, tzinfo=timezone.utc),
        end=_end_of_day(date(year, 12, 31)),
    )


def explicit_range(start: datetime, end: datetime) -> DateRange:
    """Use caller-supplied instants, converted to UTC."""
    start, end = as_utc(start), as_utc(end)
    if start > end:
        raise InvalidQueryError("Range start must not be after range end")
    return DateRange(start=start, end=end)


def overlap_filter(date_range: DateRange) -> dict:
    """
    Match events whose [start, end] interval intersects the range.

    Three cases: the event starts inside the range, ends inside it, or
    spans the whole range. All bounds are inclusive.
    """
    range_start, range_end = (_stored_utc(value) for value in date_range)
    return {
        "$or": [
            # Starts in range
            {
                "$and": [
                    {EVENT_START_FIELD: {"$gte": range_start}},
                    {EVENT_START_FIELD: {"$lte": range_end}},
                ]
            },
            # Ends in range
            {
                "$and": [
                    {EVENT_END_FIELD: {"$gte": range_start}},
                    {EVENT_END_FIELD: {"$lte": range_end}},
                ]
            },
            # Spans the whole range
            {
                "$and": [
                    {EVENT_START_FIELD: {"$lte": range_start}},
                    {EVENT_END_FIELD: {"$gte": range_end}},
                ]
            },
        ]
    }


def build_event_filter(
    month: int | None = None, year: int | None = None, today: date | None = None
) -> dict:
    """Filter for the unified search. No month means every event matches."""
    if month is None:
        return {}
    return overlap_filter(month_range(month, year, today))


def ranges_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Inclusive overlap: neither interval ends before the other starts."""
    return as_utc(a_start) <= as_utc(b_end) and as_utc(a_end) >= as_utc(b_start)
