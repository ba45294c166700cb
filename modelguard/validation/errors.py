"""Validation Error

Exception form of a failed ValidationResult for callers that prefer to raise
at a boundary instead of branching on `is_valid`. The core itself never
raises for a failed rule.

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "error_count": 1,
        "errors": [
            {
                "attr": "email",
                "path": "user.email",
                "errors": [{"message": "Please supply a valid email address", "key": "email"}]
            }
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from modelguard.errors import AppError

from .result import InvalidValue, ValidationResult


@dataclass(eq=False)
class ValidationError(Exception):
    """Validation error carrying the structured result that caused it."""
    message: str
    result: ValidationResult

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        values = self.result.invalid_values
        if not values: return self.message
        if len(values) == 1: return f"{(v := values[0]).path}: {'; '.join(v.messages)}"
        return f"{self.message} ({len(values)} invalid values)"

    @property
    def invalid_values(self) -> tuple[InvalidValue, ...]: return self.result.invalid_values

    @property
    def first_error(self) -> InvalidValue | None: return self.invalid_values[0] if self.invalid_values else None

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Messages grouped by path."""
        return {v.path: v.messages for v in self.invalid_values}

    def to_app_error(self) -> AppError:
        """Convert to AppError for error handling system."""
        return self.result.to_app_error(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(self.invalid_values), "errors": [v.to_dict() for v in self.invalid_values]}}
