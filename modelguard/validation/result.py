"""Validation Results

Path-addressed outcome of a validation run:

{
    "is_valid": false,
    "invalid_values": [
        {
            "attr": "name",
            "path": "customer.name",
            "errors": [{"message": "At least 2", "key": "string-length"}]
        }
    ]
}

ResultBuilder merges invalid values from many validators so that each path
appears once, with failures accumulating in evaluation order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from modelguard.errors import AppError, ErrorCode


@dataclass(frozen=True, slots=True)
class ErrorEntry:
    """One failed rule: its rendered message and the rule kind that produced it."""
    message: str
    key: str

    def to_dict(self) -> dict[str, str]: return {"message": self.message, "key": self.key}


@dataclass(frozen=True, slots=True)
class InvalidValue:
    """All failures recorded against one path."""
    attr: str
    path: str
    errors: tuple[ErrorEntry, ...] = ()

    @property
    def messages(self) -> list[str]: return [e.message for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {"attr": self.attr, "path": self.path, "errors": [e.to_dict() for e in self.errors]}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Immutable snapshot of one validation run."""
    invalid_values: tuple[InvalidValue, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool: return len(self.invalid_values) == 0

    @property
    def paths(self) -> list[str]: return [v.path for v in self.invalid_values]

    def errors_for(self, path: str) -> tuple[ErrorEntry, ...]:
        """Errors recorded at an exact path (empty when the path is valid)."""
        for value in self.invalid_values:
            if value.path == path: return value.errors
        return ()

    def summary(self) -> str:
        """Summary of result suitable for logging / diagnostics."""
        lines: list[str] = []
        for value in self.invalid_values:
            lines.append(f"{value.attr}:")
            lines.extend(f"- {error.message}" for error in value.errors)
            lines.append("")
        return "\n".join(lines) + ("\n" if lines else "")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {"is_valid": self.is_valid, "invalid_values": [v.to_dict() for v in self.invalid_values]}

    def to_app_error(self, message: str = "Validation failed") -> AppError:
        """Convert an invalid result to AppError for the error handling system."""
        if len(self.invalid_values) == 1:
            value = self.invalid_values[0]
            return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"{value.path}: {'; '.join(value.messages)}",
                metadata={"attr": value.attr, "path": value.path, "errors": [e.to_dict() for e in value.errors]})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC,
            message=f"{message}: {len(self.invalid_values)} invalid values",
            metadata={"error_count": len(self.invalid_values), "invalid_values": [v.to_dict() for v in self.invalid_values]})

    def raise_if_invalid(self, message: str = "Validation failed") -> None:
        """Raise ValidationError if any value is invalid."""
        from .errors import ValidationError

        if not self.is_valid: raise ValidationError(message=message, result=self)


class ResultBuilder:
    """Combines invalid values from different validators into one ValidationResult.

    Entries are keyed by path; a repeated path appends its errors to the
    first entry instead of creating a second one.
    """

    __slots__ = ("_attrs", "_errors")

    def __init__(self) -> None:
        self._attrs: dict[str, str] = {}
        self._errors: dict[str, list[ErrorEntry]] = {}

    def add(self, items: Iterable[InvalidValue]) -> ResultBuilder:
        for item in items:
            if item.path in self._errors:
                self._errors[item.path].extend(item.errors)
            else:
                self._attrs[item.path] = item.attr
                self._errors[item.path] = list(item.errors)
        return self

    def __len__(self) -> int: return len(self._errors)

    def build(self) -> ValidationResult:
        return ValidationResult(tuple(InvalidValue(attr=self._attrs[path], path=path, errors=tuple(errors))
            for path, errors in self._errors.items()))
