"""Monadic Error Handling Types

Result/Either types for composable error propagation at the edges of the
validation engine. Validation failures are data; these types carry the
configuration and boundary errors that surround them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, Iterator, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")
F = TypeVar("F", bound="AppError")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation errors
    E7xxx: Configuration errors
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2005_CONSTRAINT_VIOLATION = 2005
    E2010_INVALID_EMAIL = 2010
    E2030_NESTED_INVALID = 2030

    # Configuration (E7xxx)
    E7000_CONFIGURATION_GENERIC = 7000
    E7001_INVALID_RULE_KEY = 7001
    E7002_UNDEFINED_VALUE = 7002
    E7003_INVALID_RULE_ARGUMENT = 7003
    E7004_TEMPLATE_ERROR = 7004
    E7005_CATALOG_ERROR = 7005

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 7000 <= code < 8000:
            return "configuration"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Immutable context for error tracing and debugging."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""

    def with_origin(self, origin: str) -> ErrorContext:
        return ErrorContext(correlation_id=self.correlation_id, timestamp=self.timestamp, origin=origin)


@dataclass(frozen=True, slots=True)
class AppError:
    """Base application error with full context.

    All errors carry:
    - Typed error code from taxonomy
    - Human-readable message
    - Structured metadata for debugging
    - Tracing context
    - Optional cause for error chaining
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_origin(self, origin: str) -> AppError:
        return AppError(code=self.code, message=self.message, context=self.context.with_origin(origin),
            metadata=self.metadata, cause=self.cause)

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(code=self.code, message=self.message, context=self.context,
            metadata={**self.metadata, **kwargs}, cause=self.cause)

    def to_dict(self) -> dict:
        """Serialize error for reporting."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result monad."""
    value: T

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, AppError]:
        """Transform the success value."""
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]:
        """Chain operations that may fail."""
        return f(self.value)

    def match(self, ok: Callable[[T], U], err: Callable[[AppError], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return ok(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result monad."""
    error: E

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    def __iter__(self) -> Iterator:
        return iter([])


# Type alias for Result monad
Result = Union[Ok[T], Err[E]]

