"""Monadic Error Handling System

Type-safe error handling around the validation core.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- ConfigurationError: raised for malformed rule setup
- Builder functions: Ergonomic error construction

Usage:
    from modelguard.errors import Ok, Err, AppError, invalid_rule_key

    match check_attributes(record, data):
        case Ok(attrs):
            record.set(attrs)
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    # Validation (E2xxx)
    validation_error,
    # Configuration (E7xxx)
    configuration_error,
    invalid_rule_key,
    undefined_value,
    invalid_rule_argument,
    template_error,
    catalog_error,
)

from .handlers import (
    AppErrorException,
    ConfigurationError,
    raise_error,
    raise_config_error,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Validation (E2xxx)
    "validation_error",
    # Configuration (E7xxx)
    "configuration_error",
    "invalid_rule_key",
    "undefined_value",
    "invalid_rule_argument",
    "template_error",
    "catalog_error",
    # Exceptions
    "AppErrorException",
    "ConfigurationError",
    "raise_error",
    "raise_config_error",
    "raise_result",
]
