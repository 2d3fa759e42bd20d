"""Error taxonomy and the result contract of the persistence gateway.

Gateway operations never raise. They return a `Result` that is either
`Result.ok(data)` or `Result.fail(error)` where `error` is one of the
`DomainError` subclasses below, and callers branch on `result.success`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    STORAGE = "STORAGE"
    RENDER = "RENDER"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when a draft fails required-field or shape checks."""

    code = ErrorCode.VALIDATION


class NotFoundError(DomainError):
    """Raised when no event matches an identifier."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class StorageError(DomainError):
    """Raised when the underlying store fails. Keeps the original exception."""

    code = ErrorCode.STORAGE

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RenderError(DomainError):
    """Raised when an event cannot be turned into a preview."""

    code = ErrorCode.RENDER


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success-with-data or failure-with-error."""

    success: bool
    data: T | None = None
    error: DomainError | None = None

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: DomainError) -> "Result[T]":
        return cls(success=False, error=error)
