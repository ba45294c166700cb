"""Domain-Specific Error Builders

Ergonomic constructors for typed errors. Each builder creates an AppError
wrapped in Err with the appropriate code and context.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


def _app_error(message: str, code: ErrorCode, origin: str, cause: Exception | None = None, **metadata) -> AppError:
    return AppError(code=code, message=message, context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None}, cause=cause)


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    return Err(_app_error(message, code, origin, field=field, **metadata))


# =============================================================================
# Configuration Errors (E7xxx)
# =============================================================================

def configuration_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E7000_CONFIGURATION_GENERIC,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create configuration error."""
    return Err(_app_error(message, code, origin, cause, **metadata))


def invalid_rule_key(key: str, self_reference_key: str, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Invalid key {key}. Only the self-reference key ({self_reference_key}) can be used "
        "to specify validation rules for a collection",
        code=ErrorCode.E7001_INVALID_RULE_KEY,
        origin=origin,
        key=key,
        self_reference_key=self_reference_key,
    )


def undefined_value(origin: str = "") -> Err[AppError]:
    return configuration_error(
        "Expected a defined non null value",
        code=ErrorCode.E7002_UNDEFINED_VALUE,
        origin=origin,
    )


def invalid_rule_argument(message: str, argument: Any = None, origin: str = "") -> Err[AppError]:
    return configuration_error(
        message,
        code=ErrorCode.E7003_INVALID_RULE_ARGUMENT,
        origin=origin,
        argument=repr(argument) if argument is not None else None,
    )


def template_error(template: str, cause: Exception, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Message template could not be rendered: {cause}",
        code=ErrorCode.E7004_TEMPLATE_ERROR,
        origin=origin,
        cause=cause,
        template=template,
    )


def catalog_error(source: str, reason: str, cause: Exception | None = None, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Message catalog '{source}' could not be loaded: {reason}",
        code=ErrorCode.E7005_CATALOG_ERROR,
        origin=origin,
        cause=cause,
        source=source,
    )
