"""Validation Mixins

Plug the validation engine into any record or collection class.

Usage:
    class Customer(ModelValidation):
        rules = {
            "name": rules.not_blank(),
            "address": rules.valid(),
        }

        def __init__(self, **attributes):
            self.attributes = attributes

        def get(self, key): return self.attributes.get(key)
        def has(self, key): return self.attributes.get(key) is not None

    Customer(name="").validate()   # ValidationResult with "name" invalid
"""
from __future__ import annotations

from functools import cached_property
from typing import Any, ClassVar, Mapping

from modelguard.validation.builder import RuleBuilder
from modelguard.validation.context import Validatable, ValidationConfig, ValidationContext
from modelguard.validation.messages import MessageBuilder
from modelguard.validation.model import CollectionValidator, ModelValidator
from modelguard.validation.result import ValidationResult


def _context_for(target: Any, options: Mapping[str, Any] | None,
                 context: ValidationContext | None) -> ValidationContext:
    if context is None: return ValidationContext.root(target, options)
    return context.with_options(options).with_target(target)


class ModelValidation(Validatable):
    """Validation for classes exposing `attributes`, `get(key)` and `has(key)`.

    Class attributes:
        rules: rules map, keyed by attribute, composite key or "self"
        validation_config: overrides the process-wide ValidationConfig
        messages: overrides the process-wide MessageBuilder
    """
    rules: ClassVar[Mapping[str, RuleBuilder]] = {}
    validation_config: ClassVar[ValidationConfig | None] = None
    messages: ClassVar[MessageBuilder | None] = None

    @cached_property
    def validator(self) -> ModelValidator:
        cls = type(self)
        return ModelValidator(cls.rules, cls.validation_config, cls.messages)

    def validate(
        self,
        attributes: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        context: ValidationContext | None = None,
    ) -> ValidationResult | None:
        """Validate candidate attributes, or all current attributes when none are given.

        Returns None when valid.
        """
        candidates = self.attributes if attributes is None else attributes
        result = self.validator.validate(candidates, _context_for(self, options, context))
        return None if result.is_valid else result

    def validate_attrs(self, attributes: Mapping[str, Any]) -> ValidationResult | None:
        """Validate only rules whose attributes are all supplied. Returns None when valid."""
        result = self.validator.validate_attrs(attributes, self)
        return None if result.is_valid else result

    def is_valid(self) -> bool:
        return self.validate() is None


class CollectionValidation(Validatable):
    """Validation for classes exposing `models`; only "self" rules are accepted."""
    rules: ClassVar[Mapping[str, RuleBuilder]] = {}
    validation_config: ClassVar[ValidationConfig | None] = None
    messages: ClassVar[MessageBuilder | None] = None

    @cached_property
    def validator(self) -> CollectionValidator:
        cls = type(self)
        return CollectionValidator(cls.rules, cls.validation_config, cls.messages)

    def validate(
        self,
        attributes: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        context: ValidationContext | None = None,
    ) -> ValidationResult | None:
        """Validate the collection's own rules and every contained record. Returns None when valid."""
        result = self.validator.validate(attributes or {}, _context_for(self, options, context))
        return None if result.is_valid else result

    def is_valid(self) -> bool:
        return self.validate() is None
