"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import mongomock
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import EVENTS_COLLECTION, MONGO_DATABASE  # noqa: E402
from core.database import InsufficientRoleError, MongoExecutor  # noqa: E402
from models.roles import SystemRole  # noqa: E402


class RecordingExecutor:
    """Executor double that records operations and returns canned results."""

    def __init__(self, results=None, error=None, role=SystemRole.DIRECTIVE):
        self.results = dict(results or {})
        self.error = error
        self.role = role
        self.calls = []

    def execute(self, instance, operation, required_role):
        self.calls.append((instance, operation, required_role))
        if not self.role.satisfies(required_role):
            raise InsufficientRoleError(required_role)
        if self.error is not None:
            raise self.error
        return self.results.get(operation["operation"])


@pytest.fixture
def sample_event():
    """Sample stored event document for testing."""
    return {
        "Id_Evento": 7,
        "Nombre": "Parent-teacher meeting",
        "Fecha_Inicio": datetime(2024, 2, 10, 9, 0),
        "Fecha_Conclusion": datetime(2024, 2, 10, 11, 0),
    }


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def events_collection(mongo_client):
    return mongo_client[MONGO_DATABASE][EVENTS_COLLECTION]


@pytest.fixture
def make_executor(mongo_client):
    """Build a MongoExecutor over mongomock acting as the given role."""

    def _make(role=SystemRole.DIRECTIVE):
        return MongoExecutor(
            authorize=role.satisfies,
            client_factory=lambda instance: mongo_client,
        )

    return _make


@pytest.fixture
def executor(make_executor):
    return make_executor()


@pytest.fixture
def thirty_five_events(events_collection):
    """35 one-hour events on consecutive days starting 2024-03-01 08:00."""
    first = datetime(2024, 3, 1, 8, 0)
    events_collection.insert_many(
        [
            {
                "Id_Evento": number,
                "Nombre": f"Event {number}",
                "Fecha_Inicio": first + timedelta(days=number - 1),
                "Fecha_Conclusion": first + timedelta(days=number - 1, hours=1),
            }
            for number in range(1, 36)
        ]
    )
    return events_collection
