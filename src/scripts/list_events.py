#!/usr/bin/env python3
"""
List events from the events collection, and check a slot for conflicts.

Usage:
    uv run python src/scripts/list_events.py --month 2025-11
    uv run python src/scripts/list_events.py --year 2025
    uv run python src/scripts/list_events.py --from 2025-11-03 --to 2025-11-07
    uv run python src/scripts/list_events.py --month 2025-11 --check "2025-11-04T10:00" "2025-11-04T12:00"
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import MONGO_DEFAULT_INSTANCE
from core.database import DocumentExecutor, MongoExecutor
from models.events import Event
from models.results import QueryResult
from models.roles import SystemRole
from services.events import (
    find_conflicting_events,
    search_events_by_month,
    search_events_by_range,
    search_events_by_year,
)
from services.filters import as_utc


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    try:
        year, month = map(int, month_str.split("-"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid month '{month_str}', expected YYYY-MM")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"invalid month '{month_str}', month must be 01-12")
    return year, month


def parse_datetime(value: str) -> datetime:
    """Parse an ISO date/time. Values without an offset are taken as UTC."""
    try:
        return as_utc(datetime.fromisoformat(value))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date/time '{value}', expected ISO format")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List school events")
    period = parser.add_mutually_exclusive_group(required=True)
    period.add_argument("--month", type=parse_month, help="Month to list (YYYY-MM)")
    period.add_argument("--year", type=int, help="Year to list")
    period.add_argument(
        "--from", dest="range_from", type=parse_datetime, help="Range start (ISO date/time)"
    )
    parser.add_argument(
        "--to", dest="range_to", type=parse_datetime, help="Range end (ISO date/time)"
    )
    parser.add_argument("--instance", default=MONGO_DEFAULT_INSTANCE, help="Database instance")
    parser.add_argument(
        "--role",
        choices=[role.value for role in SystemRole],
        default=SystemRole.DIRECTIVE.value,
        help="Role to query as",
    )
    parser.add_argument(
        "--check",
        nargs=2,
        type=parse_datetime,
        metavar=("START", "END"),
        help="Report listed events overlapping this slot",
    )
    args = parser.parse_args(argv)
    if args.range_from and not args.range_to:
        parser.error("--from requires --to")
    return args


def fetch_month(
    executor: DocumentExecutor, year: int, month: int, instance: str
) -> QueryResult[list[Event]]:
    """Every event of a month, reading page by page until the total is reached."""
    events: list[Event] = []
    while True:
        result = search_events_by_month(
            executor, month, year, instance=instance, offset=len(events)
        )
        if not result.ok:
            return QueryResult.failure(result.error_kind, result.error)
        page = result.value["events"]
        events.extend(page)
        if not page or len(events) >= result.value["total"]:
            return QueryResult.success(events)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    role = SystemRole(args.role)
    executor = MongoExecutor(authorize=role.satisfies)

    if args.month:
        year, month = args.month
        result = fetch_month(executor, year, month, args.instance)
    elif args.year:
        result = search_events_by_year(executor, args.year, instance=args.instance)
    else:
        result = search_events_by_range(
            executor, args.range_from, args.range_to, instance=args.instance
        )

    if not result.ok:
        print(f"Query failed ({result.error_kind.value}): {result.error}")
        return 1

    events = result.value
    print(f"Found {len(events)} event(s)\n")
    print("=" * 80)
    for event in events:
        print(f"{event['event_id']:>26}  {event['start']:%Y-%m-%d %H:%M} -> "
              f"{event['end']:%Y-%m-%d %H:%M}  {event['name']}")

    if args.check:
        start, end = args.check
        conflicts = find_conflicting_events(start, end, events)
        print("-" * 80)
        if conflicts:
            print(f"{len(conflicts)} conflict(s) with {start} - {end}:")
            for event in conflicts:
                print(f"  - {event['name']} ({event['event_id']})")
        else:
            print(f"No conflicts with {start} - {end}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
