"""Declarative Validation System

Rules are declared per attribute, per composite of attributes ("start,end")
or for the record itself ("self"), and evaluated into a path-addressed
ValidationResult. Failures are data; only malformed configuration raises.

Key Features:
- Immutable, shareable RuleBuilder chains
- Single, composite and self-reference keys
- Nested records and collections with dotted or bracketed paths
- Deferred, cached message templates
- Result monad and exception forms at boundaries

Usage:
    from modelguard.validation import rules, ModelValidator, ValidationContext

    validator = ModelValidator({
        "code": rules.not_null().length(min=2, max=5),
        "email": rules.email(trim=True),
    })
    result = validator.validate({"code": "x", "email": "nope"})
    if not result.is_valid:
        print(result.summary())
"""

from .accessors import Accessor, MultiAccessor, SelfAccessor, SingleAccessor, accessor_for
from .builder import RuleBuilder, rules
from .context import (
    UNDEFINED,
    BracketPathFormatter,
    DotPathFormatter,
    PATH_FORMATTERS,
    PathFormatter,
    RecordLike,
    Validatable,
    ValidationConfig,
    ValidationContext,
    default_config,
    get_path_formatter,
    is_null_or_undefined,
)
from .messages import (
    DEFAULT_TEMPLATES,
    MessageBuilder,
    MessageConfig,
    configure_messages,
    get_message_builder,
    join,
    load_message_config,
    reset_messages,
    singular_or_plural,
)
from .result import ErrorEntry, InvalidValue, ResultBuilder, ValidationResult
from .rules import Rule, RuleKind, RuleOutcome
from .validator import Validator
from .model import CollectionValidator, ModelValidator
from .errors import ValidationError
from .boundaries import check_attributes, check_batch, check_record, ensure_valid

__all__ = [
    # Rules
    "rules",
    "RuleBuilder",
    "Rule",
    "RuleKind",
    "RuleOutcome",
    # Accessors
    "Accessor",
    "SingleAccessor",
    "MultiAccessor",
    "SelfAccessor",
    "accessor_for",
    # Context and configuration
    "UNDEFINED",
    "is_null_or_undefined",
    "ValidationContext",
    "ValidationConfig",
    "default_config",
    "PathFormatter",
    "DotPathFormatter",
    "BracketPathFormatter",
    "PATH_FORMATTERS",
    "get_path_formatter",
    "RecordLike",
    "Validatable",
    # Messages
    "MessageBuilder",
    "MessageConfig",
    "DEFAULT_TEMPLATES",
    "configure_messages",
    "get_message_builder",
    "reset_messages",
    "load_message_config",
    "singular_or_plural",
    "join",
    # Evaluation
    "Validator",
    "ModelValidator",
    "CollectionValidator",
    # Results
    "ErrorEntry",
    "InvalidValue",
    "ValidationResult",
    "ResultBuilder",
    "ValidationError",
    # Boundaries
    "check_attributes",
    "check_record",
    "check_batch",
    "ensure_valid",
]
