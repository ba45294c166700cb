"""Rule System

Each rule is a frozen dataclass with a fixed kind and an `is_valid`
predicate over the candidate value(s) and the validation context.
Composite rules (AnyOf, Combine) nest whole rule chains; NestedValid
descends into values that validate themselves.

Features:
- Immutable rules, safe to share between builders and validators
- Compiled regex constants
- `options` view used by message templates
- Kind vocabulary mapped to the error code taxonomy
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping, Sequence
import re

from modelguard.errors import ErrorCode, raise_config_error, undefined_value

from .context import UNDEFINED, Validatable, ValidationContext, is_null_or_undefined
from .result import InvalidValue

_EMPTY: Mapping[str, Any] = MappingProxyType({})

DIGITS_PATTERN = re.compile(r"[0-9]*")
NON_WHITESPACE_PATTERN = re.compile(r"\S")
EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@(?:[A-Z0-9-]+\.)+(?:[A-Z]{2,4}|museum)", re.IGNORECASE)


class RuleKind(str, Enum):
    """Rule kinds; each kind selects a message template."""
    NOT_NULL = "not-null"
    NUMERIC = "numeric"
    RANGE = "range"
    NOT_BLANK = "string-not-blank"
    LENGTH = "string-length"
    EMAIL = "email"
    CHECK = "check"
    CHILD_VALID = "child-valid"
    ANY = "any"
    COMBINE = "combine"

    @property
    def error_code(self) -> ErrorCode:
        return _ERROR_CODES.get(self, ErrorCode.E2005_CONSTRAINT_VIOLATION)


_ERROR_CODES = {
    RuleKind.NOT_NULL: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    RuleKind.NOT_BLANK: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    RuleKind.NUMERIC: ErrorCode.E2002_INVALID_FORMAT,
    RuleKind.LENGTH: ErrorCode.E2003_OUT_OF_RANGE,
    RuleKind.EMAIL: ErrorCode.E2010_INVALID_EMAIL,
    RuleKind.CHILD_VALID: ErrorCode.E2030_NESTED_INVALID,
}


# ============================================================================
# String helpers
# ============================================================================

def as_string(value: Any) -> str:
    """String form of a defined value. None/UNDEFINED is a configuration error."""
    if is_null_or_undefined(value): raise_config_error(undefined_value(origin="rules"))
    return str(value)


def trim_string(value: Any) -> str:
    return as_string(value).strip()


def are_equal_ignore_case(value1: Any, value2: Any) -> bool:
    if is_null_or_undefined(value1) or is_null_or_undefined(value2): return False
    return is_same_value(value1, value2) or as_string(value1).lower() == as_string(value2).lower()


def is_same_value(value1: Any, value2: Any) -> bool:
    """Equal and of the same type, so True is not 1 and 1.0 is not 1."""
    return value1 is value2 or (type(value1) is type(value2) and value1 == value2)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ============================================================================
# Base
# ============================================================================

@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """Result of testing one rule: pass/fail plus invalid values found in nested records."""
    passed: bool
    nested: tuple[InvalidValue, ...] = ()


PASSED = RuleOutcome(True)
FAILED = RuleOutcome(False)


@dataclass(frozen=True, slots=True, kw_only=True)
class Rule(ABC):
    """Base class for rules.

    `message` overrides the templated failure message. `extra` carries
    additional options for templates (and for custom rule kinds).
    """
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, metadata={"option": False})

    KIND: ClassVar[str] = ""

    @property
    def kind(self) -> str: return self.KIND

    @property
    def options(self) -> Mapping[str, Any]:
        """Rule parameters as seen by message templates."""
        params = {f.name: getattr(self, f.name) for f in fields(self) if f.metadata.get("option", True)}
        return MappingProxyType({**self.extra, **params})

    @abstractmethod
    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        """Test the value(s) resolved for a key. Truthy means valid."""

    def test(self, values: Sequence[Any], context: ValidationContext) -> RuleOutcome:
        return PASSED if self.is_valid(values, context) else FAILED


# ============================================================================
# Object Rules
# ============================================================================

@dataclass(frozen=True, slots=True, kw_only=True)
class NotNull(Rule):
    """Value cannot be None or UNDEFINED."""
    KIND: ClassVar[str] = RuleKind.NOT_NULL.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        return not is_null_or_undefined(values[0])


@dataclass(frozen=True, slots=True, kw_only=True)
class Range(Rule):
    """Value must be one of the allowed values."""
    values: tuple[Any, ...] = ()
    ignore_case: bool = False
    KIND: ClassVar[str] = RuleKind.RANGE.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        value = values[0]
        if is_null_or_undefined(value): return False
        if self.ignore_case: return any(are_equal_ignore_case(value, item) for item in self.values)
        return any(is_same_value(value, item) for item in self.values)


@dataclass(frozen=True, slots=True, kw_only=True)
class Check(Rule):
    """Custom predicate called with the value(s) followed by the context."""
    predicate: Callable[..., Any] = field(default=lambda *args: True, metadata={"option": False})
    KIND: ClassVar[str] = RuleKind.CHECK.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        return bool(self.predicate(*values, context))


@dataclass(frozen=True, slots=True, kw_only=True)
class SimpleRule(Rule):
    """Rule of a caller-chosen kind wrapping a plain predicate."""
    predicate: Callable[..., Any] = field(default=lambda *args: True, metadata={"option": False})
    rule_kind: str = field(default="", metadata={"option": False})

    @property
    def kind(self) -> str: return self.rule_kind

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        return bool(self.predicate(*values, context))


# ============================================================================
# String Rules
# ============================================================================

@dataclass(frozen=True, slots=True, kw_only=True)
class Numeric(Rule):
    """All characters must be digits. Absent or empty values are not a format violation."""
    KIND: ClassVar[str] = RuleKind.NUMERIC.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        value = values[0]
        if is_null_or_undefined(value) or value == "": return True
        return DIGITS_PATTERN.fullmatch(str(value)) is not None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotBlank(Rule):
    """Value must contain at least one non-whitespace character."""
    KIND: ClassVar[str] = RuleKind.NOT_BLANK.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        value = values[0]
        return not is_null_or_undefined(value) and NON_WHITESPACE_PATTERN.search(str(value)) is not None


@dataclass(frozen=True, slots=True, kw_only=True)
class Length(Rule):
    """String length constraints. A numeric `exact` overrides `min` and `max`."""
    min: int | None = None
    max: int | None = None
    exact: int | None = None
    trim: bool = False
    KIND: ClassVar[str] = RuleKind.LENGTH.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        value = values[0]
        if is_null_or_undefined(value): return False
        length = len(trim_string(value) if self.trim else as_string(value))
        if is_number(self.exact):
            return length == self.exact
        return (self.min is None or length >= self.min) and (self.max is None or length <= self.max)


@dataclass(frozen=True, slots=True, kw_only=True)
class Email(Rule):
    """String value in email format."""
    trim: bool = False
    KIND: ClassVar[str] = RuleKind.EMAIL.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        value = values[0]
        if not isinstance(value, str): return False
        if self.trim: value = value.strip()
        return EMAIL_PATTERN.fullmatch(value) is not None


# ============================================================================
# Composite Rules
# ============================================================================

def _chain_passes(rules: Sequence[Rule], values: Sequence[Any], context: ValidationContext) -> bool:
    return all(rule.is_valid(values, context) for rule in rules)


@dataclass(frozen=True, slots=True, kw_only=True)
class AnyOf(Rule):
    """At least one rule chain must pass; every rule within that chain must pass."""
    rule_sets: tuple[tuple[Rule, ...], ...] = field(default=(), metadata={"option": False})
    KIND: ClassVar[str] = RuleKind.ANY.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        return any(_chain_passes(rules, values, context) for rules in self.rule_sets)


@dataclass(frozen=True, slots=True, kw_only=True)
class Combine(Rule):
    """All rule chains must pass; reported as a single error."""
    rule_sets: tuple[tuple[Rule, ...], ...] = field(default=(), metadata={"option": False})
    KIND: ClassVar[str] = RuleKind.COMBINE.value

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        return all(_chain_passes(rules, values, context) for rules in self.rule_sets)


# ============================================================================
# Nested Rule
# ============================================================================

@dataclass(frozen=True, slots=True, kw_only=True)
class NestedValid(Rule):
    """Requires a nested record or collection to be valid.

    Invalid values found in the nested value are propagated as-is; their paths
    already start with the current path because the nested run inherits the
    context.
    """
    KIND: ClassVar[str] = RuleKind.CHILD_VALID.value

    def _validate_nested(self, values: Sequence[Any], context: ValidationContext):
        target = values[0]
        if not isinstance(target, Validatable): return None
        return target.validate(None, context.options, context)

    def is_valid(self, values: Sequence[Any], context: ValidationContext) -> bool:
        result = self._validate_nested(values, context)
        return result is None or result.is_valid

    def test(self, values: Sequence[Any], context: ValidationContext) -> RuleOutcome:
        if (result := self._validate_nested(values, context)) is None: return PASSED
        return RuleOutcome(True, nested=result.invalid_values)


__all__ = [
    "UNDEFINED",
    "RuleKind",
    "RuleOutcome",
    "Rule",
    "NotNull",
    "Range",
    "Check",
    "SimpleRule",
    "Numeric",
    "NotBlank",
    "Length",
    "Email",
    "AnyOf",
    "Combine",
    "NestedValid",
    "as_string",
    "trim_string",
    "are_equal_ignore_case",
    "is_same_value",
    "is_number",
]
