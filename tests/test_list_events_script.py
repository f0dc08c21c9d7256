"""
Tests for the list_events script.
"""

import argparse
from datetime import datetime, timezone

import pytest

from core.database import MongoExecutor
from scripts import list_events


@pytest.fixture(autouse=True)
def mongomock_executor(monkeypatch, mongo_client):
    monkeypatch.setattr(
        list_events,
        "MongoExecutor",
        lambda authorize: MongoExecutor(authorize, client_factory=lambda instance: mongo_client),
    )


@pytest.fixture
def school_week(events_collection):
    events_collection.insert_many(
        [
            {
                "Id_Evento": 1,
                "Nombre": "Science fair",
                "Fecha_Inicio": datetime(2025, 11, 4, 9),
                "Fecha_Conclusion": datetime(2025, 11, 4, 11),
            },
            {
                "Id_Evento": 2,
                "Nombre": "Board meeting",
                "Fecha_Inicio": datetime(2025, 11, 4, 12),
                "Fecha_Conclusion": datetime(2025, 11, 4, 13),
            },
            {
                "Id_Evento": 3,
                "Nombre": "Winter concert",
                "Fecha_Inicio": datetime(2025, 12, 18, 18),
                "Fecha_Conclusion": datetime(2025, 12, 18, 20),
            },
        ]
    )


def test_parse_month():
    assert list_events.parse_month("2025-11") == (2025, 11)


def test_month_listing_with_conflict_check(school_week, capsys):
    exit_code = list_events.main(
        ["--month", "2025-11", "--check", "2025-11-04T10:00", "2025-11-04T12:00"]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Found 2 event(s)" in output
    assert "2 conflict(s)" in output
    assert "Winter concert" not in output


def test_year_listing(school_week, capsys):
    assert list_events.main(["--year", "2025"]) == 0
    assert "Found 3 event(s)" in capsys.readouterr().out


def test_range_listing(school_week, capsys):
    assert list_events.main(["--from", "2025-12-01", "--to", "2025-12-31"]) == 0
    assert "Winter concert" in capsys.readouterr().out


def test_year_listing_denied_for_responsible(school_week, capsys):
    exit_code = list_events.main(["--year", "2025", "--role", "RESPONSIBLE"])

    assert exit_code == 1
    assert "PERMISSION_DENIED" in capsys.readouterr().out


def test_from_requires_to():
    with pytest.raises(SystemExit):
        list_events.main(["--from", "2025-12-01"])


@pytest.mark.parametrize("value", ["2025-13", "2025-00", "2025-11-01", "november"])
def test_parse_month_rejects_malformed(value):
    with pytest.raises(argparse.ArgumentTypeError):
        list_events.parse_month(value)


def test_parse_datetime_without_offset_is_utc():
    assert list_events.parse_datetime("2025-11-04T10:00") == datetime(
        2025, 11, 4, 10, tzinfo=timezone.utc
    )


@pytest.mark.parametrize(
    "argv",
    [
        ["--month", "2025-11-01"],
        ["--month", "2025-13"],
        ["--from", "notadate", "--to", "2025-12-31"],
        ["--month", "2025-11", "--check", "bad", "2025-11-04T12:00"],
    ],
)
def test_malformed_values_exit_with_usage_error(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        list_events.main(argv)

    assert exc_info.value.code == 2
    assert "invalid" in capsys.readouterr().err


@pytest.fixture
def busy_november(events_collection):
    """150 one-hour events, five per day across November 2025."""
    events_collection.insert_many(
        [
            {
                "Id_Evento": (day - 1) * 5 + slot + 1,
                "Nombre": f"Event {(day - 1) * 5 + slot + 1}",
                "Fecha_Inicio": datetime(2025, 11, day, 8 + 2 * slot),
                "Fecha_Conclusion": datetime(2025, 11, day, 9 + 2 * slot),
            }
            for day in range(1, 31)
            for slot in range(5)
        ]
    )


def test_month_listing_reads_past_one_page(busy_november, capsys):
    exit_code = list_events.main(
        ["--month", "2025-11", "--check", "2025-11-30T16:30", "2025-11-30T17:30"]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Found 150 event(s)" in output
    assert "1 conflict(s)" in output
    assert "Event 150 (150)" in output
