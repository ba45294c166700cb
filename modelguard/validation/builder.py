"""Rule Builder

RuleBuilders are immutable. Each rule method returns a new instance with the
additional rule, so a base builder can be shared as a prefix of many
specialized builders:

    required = rules.not_null()
    code = required.length(min=2, max=5)
    name = required.not_blank()     # `required` still holds one rule
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping

from modelguard.errors import invalid_rule_argument, raise_config_error
from modelguard.logging import rules_logger

from .rules import (
    AnyOf,
    Check,
    Combine,
    Email,
    Length,
    NestedValid,
    NotBlank,
    NotNull,
    Numeric,
    Range,
    Rule,
    SimpleRule,
)

log = rules_logger()


def _extra(options: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(options)) if options else MappingProxyType({})


@dataclass(frozen=True, slots=True)
class RuleBuilder:
    """Immutable accumulator of rules exposing fluent factory methods."""
    rules: tuple[Rule, ...] = ()

    def __len__(self) -> int: return len(self.rules)

    def __iter__(self) -> Iterator[Rule]: return iter(self.rules)

    def add_rule(self, rule: Rule) -> RuleBuilder:
        if not isinstance(rule, Rule):
            raise_config_error(invalid_rule_argument("add_rule expects a Rule instance", rule, origin="rules"))
        return RuleBuilder(self.rules + (rule,))

    def add_simple_rule(self, predicate: Callable[..., Any], kind: str = "", *, message: str | None = None,
                        **options: Any) -> RuleBuilder:
        """Add a rule of a custom kind; templates registered for `kind` render its message."""
        return self.add_rule(SimpleRule(predicate=predicate, rule_kind=kind, message=message, extra=_extra(options)))

    # ------------------------------------------------------------------
    # Object rules
    # ------------------------------------------------------------------

    def not_null(self, *, message: str | None = None) -> RuleBuilder:
        """Value cannot be None or UNDEFINED."""
        return self.add_rule(NotNull(message=message))

    def range(self, values: Iterable[Any], *, ignore_case: bool = False, message: str | None = None) -> RuleBuilder:
        """Value must equal one of `values` (case-insensitively with `ignore_case`)."""
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            raise_config_error(invalid_rule_argument("range expects a collection of allowed values", values,
                origin="rules"))
        return self.add_rule(Range(values=tuple(values), ignore_case=ignore_case, message=message))

    def check(self, predicate: Callable[..., Any], *, message: str | None = None, **options: Any) -> RuleBuilder:
        """Custom check invoked with the value(s) followed by the validation context."""
        if not callable(predicate):
            raise_config_error(invalid_rule_argument("check expects a callable predicate", predicate, origin="rules"))
        return self.add_rule(Check(predicate=predicate, message=message, extra=_extra(options)))

    def valid(self, *, message: str | None = None) -> RuleBuilder:
        """Nested record or collection must be valid; its invalid values are included in the result."""
        return self.add_rule(NestedValid(message=message))

    # ------------------------------------------------------------------
    # String rules
    # ------------------------------------------------------------------

    def numeric(self, *, message: str | None = None) -> RuleBuilder:
        """All characters in value must be digits."""
        return self.add_rule(Numeric(message=message))

    def not_blank(self, *, message: str | None = None) -> RuleBuilder:
        """Not None, not empty and not whitespace only."""
        return self.add_rule(NotBlank(message=message))

    def length(self, *, min: int | None = None, max: int | None = None, exact: int | None = None,
               trim: bool = False, message: str | None = None) -> RuleBuilder:
        """String value of specified length.

        exact: exact string length
        min: minimum string length (inclusive)
        max: maximum string length (inclusive)
        trim: trim whitespace from start and end of value before testing length
        """
        return self.add_rule(Length(min=min, max=max, exact=exact, trim=trim, message=message))

    def email(self, *, trim: bool = False, message: str | None = None) -> RuleBuilder:
        """String value in valid email format."""
        return self.add_rule(Email(trim=trim, message=message))

    # ------------------------------------------------------------------
    # Composite rules
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_composite_args(name: str, args: tuple[Any, ...],
                              options: dict[str, Any]) -> tuple[tuple[tuple[Rule, ...], ...], dict[str, Any]]:
        """Split RuleBuilders from a trailing options mapping."""
        rule_sets: list[tuple[Rule, ...]] = []
        merged: dict[str, Any] = {}
        for i, arg in enumerate(args):
            if isinstance(arg, RuleBuilder):
                rule_sets.append(arg.rules)
            elif i == len(args) - 1 and isinstance(arg, Mapping):
                merged.update(arg)
            else:
                raise_config_error(invalid_rule_argument(
                    f"{name} expects RuleBuilder arguments with an optional trailing options mapping", arg,
                    origin="rules"))
        merged.update(options)
        if not rule_sets:
            log.warning("composite_rule_without_rule_sets", rule=name)
        return tuple(rule_sets), merged

    def any(self, *args: RuleBuilder | Mapping[str, Any], **options: Any) -> RuleBuilder:
        """All rules in at least one of the given builders must pass."""
        rule_sets, merged = self._parse_composite_args("any", args, options)
        message = merged.pop("message", None)
        return self.add_rule(AnyOf(rule_sets=rule_sets, message=message, extra=_extra(merged)))

    def combine(self, *args: RuleBuilder | Mapping[str, Any], **options: Any) -> RuleBuilder:
        """All rules in all of the given builders must pass, reported as one error."""
        rule_sets, merged = self._parse_composite_args("combine", args, options)
        message = merged.pop("message", None)
        return self.add_rule(Combine(rule_sets=rule_sets, message=message, extra=_extra(merged)))


rules = RuleBuilder()
