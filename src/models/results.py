"""Typed result returned by the event query service.

Query functions never raise for data-layer failures. They return a
QueryResult carrying either the value or the error together with its kind,
so the API layer can tell bad parameters apart from infrastructure problems.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class InvalidQueryError(ValueError):
    """Raised for query parameters the caller got wrong."""


class QueryErrorKind(str, Enum):
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a query.

    Example:
        >>> result = QueryResult.success(3)
        >>> result.ok, result.value
        (True, 3)
        >>> failed = QueryResult.failure(QueryErrorKind.UNKNOWN, RuntimeError("boom"))
        >>> failed.ok
        False

    Attributes:
        value: The query value. None on failure.
        error_kind: Category of the failure. None on success.
        error: The original exception. None on success.
    """

    value: T | None = None
    error_kind: QueryErrorKind | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> QueryResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: QueryErrorKind, error: BaseException) -> QueryResult[T]:
        return cls(error_kind=kind, error=error)

    def unwrap(self) -> T:
        """Return the value, re-raising the original exception on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
