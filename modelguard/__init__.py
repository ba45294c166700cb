# Package exports
from modelguard.config import Settings, get_settings
from modelguard.logging import (
    configure_logging,
    setup_logging,
    get_logger,
    bind_context,
    clear_context,
    unbind_context,
    rules_logger,
    validation_logger,
    messages_logger,
)
from modelguard.errors import AppError, AppErrorException, ConfigurationError, Err, ErrorCode, Ok, Result
from modelguard.validation import (
    UNDEFINED,
    CollectionValidator,
    InvalidValue,
    MessageBuilder,
    ModelValidator,
    RuleBuilder,
    ValidationConfig,
    ValidationContext,
    ValidationError,
    ValidationResult,
    check_attributes,
    check_record,
    configure_messages,
    ensure_valid,
    load_message_config,
    reset_messages,
    rules,
)
from modelguard.records import CollectionValidation, ModelValidation, Record, RecordCollection

__version__ = "0.1.0"
