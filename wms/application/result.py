"""Outcome type returned by application services for expected failures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorType(str, Enum):
    """Failure category; the presentation layer maps each to an HTTP status"""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    DOMAIN = "domain"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Success with an optional value, or failure with a message.

    Services return a Result for business rule violations (duplicate code,
    wrong password, ...) and raise only for programming or infrastructure
    errors.
    """

    success: bool
    value: T | None = None
    error: str | None = None
    errors: list[str] = field(default_factory=list)
    error_type: ErrorType | None = None

    @property
    def is_failure(self) -> bool:
        return not self.success

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls,
        error: str,
        error_type: ErrorType = ErrorType.VALIDATION,
        errors: list[str] | None = None,
    ) -> "Result[T]":
        return cls(
            success=False,
            error=error,
            errors=errors if errors is not None else [error],
            error_type=error_type,
        )

    @classmethod
    def not_found(cls, resource: str) -> "Result[T]":
        return cls.fail(f"{resource} not found", ErrorType.NOT_FOUND)

    def forward(self) -> "Result[Any]":
        """Pass a failure up to a caller that returns a different value type"""
        return Result(
            success=False,
            error=self.error,
            errors=list(self.errors),
            error_type=self.error_type,
        )
