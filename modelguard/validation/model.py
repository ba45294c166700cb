"""Model and Collection Validators

A ModelValidator owns one Validator per rules-map key and merges their
invalid values into a single ValidationResult, one entry per path.

Usage:
    validator = ModelValidator({
        "name": rules.not_blank().length(max=40),
        "start,end": rules.check(lambda start, end, ctx: start <= end),
        "self": rules.check(lambda record, ctx: record.get("kind") != "draft"),
    })
    result = validator.validate({"name": ""}, ValidationContext.root(record))

A CollectionValidator accepts only the self-reference key and also descends
into each contained record, extending the path with "[index]".
"""
from __future__ import annotations

from typing import Any, Mapping

from modelguard.errors import invalid_rule_argument, invalid_rule_key, raise_config_error
from modelguard.logging import validation_logger

from .builder import RuleBuilder
from .context import Validatable, ValidationConfig, ValidationContext, default_config
from .messages import MessageBuilder
from .result import ResultBuilder, ValidationResult
from .validator import Validator

log = validation_logger()


class ModelValidator:
    """Validates candidate attributes of one record against a rules map."""

    __slots__ = ("config", "validators", "_messages")

    def __init__(self, rules: Mapping[str, RuleBuilder], config: ValidationConfig | None = None,
                 messages: MessageBuilder | None = None):
        self.config = config or default_config()
        self._messages = messages
        self.validators: tuple[Validator, ...] = tuple(self._create_validators(rules))

    def _check_entry(self, key: Any, builder: Any) -> None:
        if not isinstance(key, str) or not key.strip():
            raise_config_error(invalid_rule_argument("Rule keys must be non-empty strings", key, origin="model"))
        if not isinstance(builder, RuleBuilder):
            raise_config_error(invalid_rule_argument(f"Rules for '{key}' must be a RuleBuilder", builder,
                origin="model"))

    def _create_validators(self, rules: Mapping[str, RuleBuilder]) -> list[Validator]:
        if not isinstance(rules, Mapping):
            raise_config_error(invalid_rule_argument("Rules must be a mapping of key to RuleBuilder", rules,
                origin="model"))
        validators = []
        for key, builder in rules.items():
            self._check_entry(key, builder)
            validators.append(Validator(key, builder.rules, self.config))
        return validators

    @property
    def messages(self) -> MessageBuilder | None:
        """Injected MessageBuilder; None defers to the process-wide builder at message time."""
        return self._messages

    def _run(self, validators: tuple[Validator, ...] | list[Validator], attributes: Mapping[str, Any],
             context: ValidationContext) -> ResultBuilder:
        builder = ResultBuilder()
        for validator in validators:
            builder.add(validator.validate(attributes, context, self._messages))
        return builder

    def validate(self, attributes: Mapping[str, Any] | None = None,
                 context: ValidationContext | None = None) -> ValidationResult:
        """Run every validator whose key is present in `attributes`."""
        context = context or ValidationContext.root()
        result = self._run(self.validators, attributes or {}, context).build()
        log.debug("validation_completed", path=context.path, validators=len(self.validators),
            invalid=len(result.invalid_values))
        return result

    def validate_attrs(self, attributes: Mapping[str, Any], target: Any = None) -> ValidationResult:
        """Run only validators whose keys are all supplied; self validators are skipped."""
        selected = [v for v in self.validators if not v.is_self and all(key in attributes for key in v.keys)]
        context = ValidationContext.root(target)
        result = self._run(selected, attributes, context).build()
        log.debug("validation_completed", path=context.path, validators=len(selected),
            invalid=len(result.invalid_values), partial=True)
        return result

    def __repr__(self) -> str: return f"{type(self).__name__}({[v.name for v in self.validators]})"


class CollectionValidator(ModelValidator):
    """Self-reference rules for a collection plus validation of every contained record."""

    __slots__ = ()

    def _check_entry(self, key: Any, builder: Any) -> None:
        super()._check_entry(key, builder)
        if not self.config.is_self_key(key):
            raise_config_error(invalid_rule_key(key, self.config.self_reference_key, origin="collection"))

    def validate(self, attributes: Mapping[str, Any] | None = None,
                 context: ValidationContext | None = None) -> ValidationResult:
        context = context or ValidationContext.root()
        builder = self._run(self.validators, attributes or {}, context)
        models = context.target.models if context.target is not None else ()
        formatter = self.config.path_formatter
        for i, model in enumerate(models):
            if not isinstance(model, Validatable): continue
            item_context = context.with_target(model).with_path(formatter.append_collection_item(context.path, i))
            if (nested := model.validate(None, context.options, item_context)) is not None:
                builder.add(nested.invalid_values)
        result = builder.build()
        log.debug("validation_completed", path=context.path, validators=len(self.validators), records=len(models),
            invalid=len(result.invalid_values))
        return result
