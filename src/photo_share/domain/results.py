"""Tagged results for operations whose public contract is boolean or absent."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


class StorageFailureStage(StrEnum):
    """Step of an object-storage operation that failed."""

    SESSION = "session"
    CREATE = "create"
    CONFIGURE = "configure"
    RETRIEVE = "retrieve"
    STORE = "store"


class QueryFailure(StrEnum):
    """Reason a single-document read produced no record."""

    REQUEST_FAILED = "request_failed"
    MALFORMED = "malformed"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a failure kind and optional detail."""

    kind: E
    detail: str | None = None
