"""Validation at System Boundaries

Helpers for code that receives data from outside (request payloads, imports,
message queues) and prefers the Result monad or an exception over branching
on ValidationResult directly.

Usage:
    match check_attributes(customer, payload):
        case Ok(attrs):
            customer.set(attrs, silent=True)
        case Err(error):
            return error.to_dict()
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from modelguard.errors import AppError, AppErrorException, Err, Ok, Result
from modelguard.logging import validation_logger

from .context import Validatable

T = TypeVar("T", bound=Validatable)

log = validation_logger()


def check_attributes(target: Validatable, attributes: Mapping[str, Any]) -> Result[dict[str, Any], AppError]:
    """Validate candidate attributes for `target`. Ok carries the attributes."""
    if (result := target.validate(attributes)) is None: return Ok(dict(attributes))
    return Err(result.to_app_error().with_origin("attributes"))


def check_record(target: T) -> Result[T, AppError]:
    """Validate everything currently held by `target`. Ok carries the target."""
    if (result := target.validate()) is None: return Ok(target)
    return Err(result.to_app_error().with_origin("record"))


def check_batch(targets: Iterable[Validatable], *, max_errors: int = 50) -> Result[list[Validatable], list[tuple[int, AppError]]]:
    """Validate a batch of records.

    Returns Ok with all records or Err with (index, error) pairs.
    """
    valid: list[Validatable] = []
    errors: list[tuple[int, AppError]] = []
    for idx, target in enumerate(targets):
        if len(errors) >= max_errors: break
        match check_record(target):
            case Ok(record): valid.append(record)
            case Err(error): errors.append((idx, error.with_metadata(batch_index=idx)))
    if errors:
        log.info("batch_validation_failed", failed=len(errors), passed=len(valid))
        return Err(errors)
    return Ok(valid)


def ensure_valid(target: Validatable, attributes: Mapping[str, Any] | None = None) -> None:
    """Raise AppErrorException unless `target` (or the given attributes) is valid."""
    result = check_record(target) if attributes is None else check_attributes(target, attributes)
    if result.is_err(): raise AppErrorException(result.unwrap_err())
