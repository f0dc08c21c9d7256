"""
Document store access: MongoDB clients per instance and the operation executor
used by the query services.
"""

from typing import Any, Callable, Literal, Protocol, TypedDict

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from core.config import (
    MONGO_DATABASE,
    MONGO_DEFAULT_INSTANCE,
    MONGO_INSTANCES,
    MONGO_TIMEOUT_MS,
)
from models.roles import SystemRole

OperationName = Literal["countDocuments", "find", "findOne"]


class OperationOptions(TypedDict, total=False):
    sort: dict[str, int]
    skip: int
    limit: int
    projection: dict[str, int]


class DocumentOperation(TypedDict, total=False):
    """A single read against one collection."""
    operation: OperationName
    collection: str
    filter: dict
    options: OperationOptions


class InsufficientRoleError(PermissionError):
    """Raised when the caller does not hold the role an operation requires."""

    def __init__(self, required_role: SystemRole):
        self.required_role = required_role
        super().__init__(f"Operation requires role {required_role.value}")


class DocumentExecutor(Protocol):
    def execute(
        self,
        instance: str | None,
        operation: DocumentOperation,
        required_role: SystemRole,
    ) -> Any: ...


_mongo_clients: dict[str, MongoClient] = {}


def get_mongo_client(instance: str) -> MongoClient:
    """Get or create the MongoClient for a configured instance (lazy initialization)."""
    if instance not in MONGO_INSTANCES:
        raise ValueError(f"Unknown database instance '{instance}'")
    if instance not in _mongo_clients:
        _mongo_clients[instance] = MongoClient(
            MONGO_INSTANCES[instance],
            serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
            tz_aware=True,
        )
    return _mongo_clients[instance]


def close_mongo_clients() -> None:
    """Close every cached client."""
    for client in _mongo_clients.values():
        client.close()
    _mongo_clients.clear()


class MongoExecutor:
    """
    Runs DocumentOperations against MongoDB after an authorization check.

    `authorize` receives the minimum role an operation declares and returns
    whether the current caller may run it.
    """

    def __init__(
        self,
        authorize: Callable[[SystemRole], bool],
        client_factory: Callable[[str], MongoClient] = get_mongo_client,
        database: str = MONGO_DATABASE,
    ):
        self._authorize = authorize
        self._client_factory = client_factory
        self._database = database

    def execute(
        self,
        instance: str | None,
        operation: DocumentOperation,
        required_role: SystemRole,
    ) -> Any:
        if not self._authorize(required_role):
            raise InsufficientRoleError(required_role)

        client = self._client_factory(instance or MONGO_DEFAULT_INSTANCE)
        collection = client[self._database][operation["collection"]]
        query_filter = operation.get("filter") or {}
        options = operation.get("options") or {}
        name = operation["operation"]

        if name == "countDocuments":
            return collection.count_documents(query_filter)

        if name == "findOne":
            return collection.find_one(query_filter, projection=options.get("projection"))

        if name == "find":
            cursor = collection.find(query_filter, projection=options.get("projection"))
            if options.get("sort"):
                cursor = cursor.sort(
                    [
                        (field, ASCENDING if direction >= 0 else DESCENDING)
                        for field, direction in options["sort"].items()
                    ]
                )
            if options.get("skip"):
                cursor = cursor.skip(options["skip"])
            if options.get("limit"):
                cursor = cursor.limit(options["limit"])
            return list(cursor)

        raise ValueError(f"Unsupported operation '{name}'")


def ping(instance: str | None = None) -> bool:
    """Check that an instance answers a ping."""
    try:
        client = get_mongo_client(instance or MONGO_DEFAULT_INSTANCE)
        client.admin.command("ping")
        return True
    except (PyMongoError, ValueError):
        return False
