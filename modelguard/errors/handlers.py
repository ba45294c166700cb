"""Exception Bridges

Converts AppErrors into raised exceptions for code paths that fail fast
instead of returning the Result monad (rule configuration, message setup).
"""
from __future__ import annotations

from modelguard.logging import get_logger

from .types import AppError, Err

log = get_logger("modelguard.errors")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self):
        return self.error.code


class ConfigurationError(AppErrorException):
    """Raised when rules, keys, templates or settings are malformed.

    Always raised during setup or message rendering, never for a value that
    merely fails a rule.
    """


def raise_error(error: AppError) -> None:
    """Raise AppError as exception.

    Usage:
        if not ok_so_far:
            raise_error(validation_error("...").error)
    """
    raise AppErrorException(error)


def raise_config_error(result: Err[AppError]) -> None:
    """Log and raise the error carried by a configuration builder result.

    Usage:
        raise_config_error(invalid_rule_key(key, "self"))
    """
    error = result.unwrap_err()
    log.warning(
        "configuration_error",
        error_code=error.code.name,
        message=error.message,
        origin=error.context.origin,
        metadata=error.metadata,
    )
    raise ConfigurationError(error) from error.cause


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return.

    Usage:
        result = check_attributes(record, data)
        raise_result(result)  # Raises if Err
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
