"""
Error taxonomy for the blog core.
Each error carries a stable machine-readable code; the API layer maps codes to HTTP status values.
Store errors are kept separate so services decide how a persistence fault is reported.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class BlogError(Exception):
    """Base class for errors the core reports to its callers."""

    error_code = "BLOG_ERROR"

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(BlogError):
    """A required field is missing or a supplied field is malformed."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message, details={"field": field} if field else None)


class BadRequest(BlogError):
    error_code = "BAD_REQUEST"


class InvalidReference(BlogError):
    """A BlogPost names an Author id that does not exist."""

    error_code = "INVALID_REFERENCE"

    def __init__(self, author_id: str) -> None:
        self.author_id = author_id
        super().__init__(f"There's no author with the id: {author_id}.")


class Conflict(BlogError):
    """A uniqueness rule would be broken by the write."""

    error_code = "CONFLICT"

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"The {field} `{value}` is already in use.", details={"field": field})


class NotFound(BlogError):
    error_code = "NOT_FOUND"

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"No {kind} found with id `{entity_id}`.")


class InternalError(BlogError):
    error_code = "INTERNAL_SERVER_ERROR"


class StoreError(Exception):
    """Generic persistence failure raised by a blog store."""


class UniqueViolation(StoreError):
    """The store rejected a write because a unique constraint would be violated."""

    def __init__(self, message: str, *, column: str | None = None) -> None:
        self.column = column
        super().__init__(message)


@contextmanager
def store_faults_as_internal(operation: str) -> Iterator[None]:
    """Report persistence faults as InternalError without exposing their details."""

    try:
        yield
    except UniqueViolation:
        raise
    except StoreError as exc:
        raise InternalError(f"Internal server error while trying to {operation}.") from exc
