"""Structured Logging for modelguard

- Colored, human-readable dev output
- JSON structured production output
- Context propagation via contextvars
- Domain loggers for rules, validation runs and message rendering
"""
import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from modelguard.config import Settings, get_settings


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("service", "modelguard")
    return event_dict


def _truncate_values(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that shortens candidate values so large payloads don't flood logs."""
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > 200:
            event_dict[key] = value[:200] + "..."
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
        _truncate_values,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON format (for production). If False, colored console output.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger("modelguard")
    library_logger.handlers = [handler]
    library_logger.setLevel(log_level)
    library_logger.propagate = False


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


class LoggerRegistry:
    """Registry of pre-configured loggers for the library's domains."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given domain."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"modelguard.{name}")
        return cls._loggers[name]


def rules_logger() -> structlog.stdlib.BoundLogger:
    """Logger for rule configuration events."""
    return LoggerRegistry.get("rules")


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validation runs."""
    return LoggerRegistry.get("validation")


def messages_logger() -> structlog.stdlib.BoundLogger:
    """Logger for message templating."""
    return LoggerRegistry.get("messages")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logging from MODELGUARD_LOG_LEVEL / MODELGUARD_LOG_JSON."""
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
