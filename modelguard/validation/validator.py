"""Validator

Binds one rules-map key to its accessor and rule chain. A validator is
stateless across calls: everything a run needs arrives as arguments.
"""
from __future__ import annotations

from typing import Any, Mapping

from .accessors import Accessor, accessor_for
from .context import ValidationConfig, ValidationContext
from .messages import MessageBuilder, get_message_builder
from .result import ErrorEntry, InvalidValue
from .rules import Rule


class Validator:
    """Rules for a single key, composite key or the self-reference key."""

    __slots__ = ("name", "keys", "accessor", "rules", "config")

    def __init__(self, key: str, rules: tuple[Rule, ...], config: ValidationConfig):
        self.name = key
        self.config = config
        self.accessor: Accessor = accessor_for(key, config)
        self.keys = self.accessor.keys
        self.rules = rules

    @property
    def is_self(self) -> bool: return self.config.is_self_key(self.name)

    def _key_path(self, path: str, key: str) -> str:
        segment = "" if self.config.is_self_key(key) else key
        return self.config.path_formatter.append_attribute(path, segment)

    def validate(self, attributes: Mapping[str, Any], context: ValidationContext,
                 messages: MessageBuilder | None = None) -> list[InvalidValue]:
        """Run the rule chain if the key is present; return the invalid values found."""
        target = context.target
        if not self.accessor.has(attributes, target): return []

        values = self.accessor.get(attributes, target)
        rule_context = context.with_path(
            self.config.path_formatter.append_attribute(context.path, self.accessor.path_segment), self.name)

        invalid_values: list[InvalidValue] = []
        errors: list[ErrorEntry] = []
        for rule in self.rules:
            outcome = rule.test(values, rule_context)
            invalid_values.extend(outcome.nested)
            if outcome.passed: continue
            if (message := rule.message) is None:
                message = (messages or get_message_builder()).create_message(rule, rule_context)
            errors.append(ErrorEntry(message=message, key=rule.kind))

        if errors:
            entries = tuple(errors)
            invalid_values.extend(InvalidValue(attr=key, path=self._key_path(context.path, key), errors=entries)
                for key in self.keys)
        return invalid_values

    def __repr__(self) -> str: return f"Validator({self.name!r}, rules={len(self.rules)})"
