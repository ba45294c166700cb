"""Message Templating

Failure messages are built lazily, only for rules that fail and carry no
explicit `message`. Templates are looked up by rule kind with a fallback to
the "default" template. A template is either static text or a function of the
rule's options returning text.

Template syntax:
  <%= expr %>    - expression rendered into the message (None renders empty)

Expressions are parsed once and interpreted, never evaluated as Python. They
may use names, public attribute lookups (no leading underscore), subscripts
with a constant index, literals and calls to the helpers below. Anything else
is rejected when the template is compiled.

Names available to expressions:
  options            - rule options (options.min, options.values, ...)
  context            - validation context (context.path, context.attr, context.target)
  singular_or_plural - singular_or_plural(n, "character") -> "character" / "characters"
  join               - join(values, ", ", " or ") -> "a, b or c"

Compiled templates are cached by template text, so every message sharing the
same text reuses one compiled template.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence, Union
import ast
import re

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from modelguard.config import get_settings
from modelguard.errors import catalog_error, raise_config_error, template_error
from modelguard.logging import messages_logger

from .context import ValidationContext
from .rules import Rule, RuleKind, is_number

log = messages_logger()

TemplateSource = Union[str, Callable[[Mapping[str, Any]], str]]

DEFAULT_MESSAGE = "Please supply a valid value"

# <%= expr %>
INTERPOLATE_PATTERN = re.compile(r"<%=([\s\S]+?)%>")

TEMPLATE_HELPERS = frozenset({"singular_or_plural", "join"})
TEMPLATE_NAMES = frozenset({"options", "context"}) | TEMPLATE_HELPERS


# ============================================================================
# Formatting helpers
# ============================================================================

def singular_or_plural(value: Any, singular: str, plural: str | None = None) -> str:
    return singular if value == 1 else (plural or singular + "s")


def join(values: Sequence[Any], separator: str, last_separator: str) -> str:
    """Join all but the last value with `separator`, the last with `last_separator`."""
    items = [str(v) for v in values]
    if len(items) <= 1: return "".join(items)
    return separator.join(items[:-1]) + last_separator + items[-1]


class TemplateOptions:
    """Attribute-style read-only view of rule options; unknown names read as None."""

    __slots__ = ("_options",)

    def __init__(self, options: Mapping[str, Any]):
        self._options = options

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"): raise AttributeError(name)
        return self._options.get(name)

    def __getitem__(self, name: str) -> Any: return self._options[name]

    def __repr__(self) -> str: return f"TemplateOptions({dict(self._options)!r})"


# ============================================================================
# Compilation
# ============================================================================

def _check_expression(node: ast.expr) -> ast.expr:
    """Accept names, public attribute lookups, constant subscripts, constants and helper calls."""
    if isinstance(node, ast.Constant):
        return node
    if isinstance(node, ast.Name) and node.id in TEMPLATE_NAMES:
        return node
    if isinstance(node, ast.Attribute) and not node.attr.startswith("_"):
        _check_expression(node.value)
        return node
    if isinstance(node, ast.Subscript) and isinstance(node.slice, ast.Constant):
        _check_expression(node.value)
        return node
    if (isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id in TEMPLATE_HELPERS
            and not node.keywords):
        for arg in node.args: _check_expression(arg)
        return node
    raise ValueError(f"unsupported template expression '{ast.unparse(node)}'")


def _evaluate(node: ast.expr, data: Mapping[str, Any]) -> Any:
    if isinstance(node, ast.Constant): return node.value
    if isinstance(node, ast.Name): return data[node.id]
    if isinstance(node, ast.Attribute): return getattr(_evaluate(node.value, data), node.attr)
    if isinstance(node, ast.Subscript): return _evaluate(node.value, data)[node.slice.value]
    return data[node.func.id](*(_evaluate(arg, data) for arg in node.args))


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Template text split into literal segments and checked expression trees."""
    source: str
    segments: tuple[str | ast.expr, ...]

    def render(self, data: Mapping[str, Any]) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            try:
                value = _evaluate(segment, data)
            except Exception as e:
                raise_config_error(template_error(self.source, e, origin="messages"))
            parts.append("" if value is None else str(value))
        return "".join(parts)


def compile_template(source: str) -> CompiledTemplate:
    """Parse `<%= expr %>` template text into a reusable renderer."""
    segments: list[str | ast.expr] = []
    position = 0
    for match in INTERPOLATE_PATTERN.finditer(source):
        if match.start() > position: segments.append(source[position:match.start()])
        try:
            segments.append(_check_expression(ast.parse(match.group(1).strip(), mode="eval").body))
        except (SyntaxError, ValueError) as e:
            raise_config_error(template_error(source, e, origin="messages"))
        position = match.end()
    if position < len(source): segments.append(source[position:])
    return CompiledTemplate(source=source, segments=tuple(segments))


# ============================================================================
# Default templates
# ============================================================================

def _length_template(options: Mapping[str, Any]) -> str:
    template = "Please supply a value"
    minimum, maximum, exact = options.get("min"), options.get("max"), options.get("exact")
    if is_number(exact):
        template += " of exactly <%= options.exact %> <%= singular_or_plural(options.exact, 'character') %>"
    elif minimum is not None and maximum is not None:
        template += " between <%= options.min %> and <%= options.max %> characters"
    elif minimum is not None:
        template += " of more than <%= options.min %> <%= singular_or_plural(options.min, 'character') %>"
    elif maximum is not None:
        template += " of less than <%= options.max %> <%= singular_or_plural(options.max, 'character') %>"
    if options.get("trim") is True:
        template += " excluding whitespace at the start or end"
    return template


def _range_template(options: Mapping[str, Any]) -> str:
    template = "Please supply a valid value (<%= join(options['values'], ', ', ' or ') %>)"
    if options.get("ignore_case") is True:
        template += ", lower or upper case"
    return template


DEFAULT_TEMPLATES: Mapping[str, TemplateSource] = {
    RuleKind.NOT_NULL.value: "Please supply a value",
    RuleKind.NOT_BLANK.value: "Please supply a value",
    RuleKind.NUMERIC.value: "Please supply a numeric value",
    RuleKind.LENGTH.value: _length_template,
    RuleKind.EMAIL.value: "Please supply a valid email address",
    RuleKind.RANGE.value: _range_template,
    "default": DEFAULT_MESSAGE,
}


# ============================================================================
# Message Builder
# ============================================================================

class MessageBuilder:
    """Resolves a failed rule into a human-readable message.

    Usage:
        builder = MessageBuilder({"not-null": "<%= context.attr %> is required"})
        builder.create_message(rule, context)
    """

    def __init__(self, templates: Mapping[str, TemplateSource] | None = None):
        self.templates: dict[str, TemplateSource] = dict(templates or {})
        self.templates.setdefault("default", DEFAULT_MESSAGE)
        self.template_cache: dict[str, CompiledTemplate] = {}

    def get_template(self, source: str) -> CompiledTemplate:
        if (template := self.template_cache.get(source)) is None:
            template = self.template_cache[source] = compile_template(source)
            log.debug("message_template_compiled", length=len(source), cached=len(self.template_cache))
        return template

    def template_source(self, rule: Rule) -> str:
        item = self.templates.get(rule.kind or "") or self.templates["default"]
        return item(rule.options) if callable(item) else item

    def create_message(self, rule: Rule, context: ValidationContext) -> str:
        template = self.get_template(self.template_source(rule))
        data = {"options": TemplateOptions(rule.options), "context": context,
            "singular_or_plural": singular_or_plural, "join": join}
        return template.render(data)


class MessageConfig(BaseModel):
    """Message catalog file schema.

    templates:
      not-null: "<%= context.attr %> is required"
      email: "Not an email address"
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    templates: dict[str, str] = Field(default_factory=dict)
    extend_defaults: bool = False

    def to_builder(self) -> MessageBuilder:
        templates: dict[str, TemplateSource] = dict(DEFAULT_TEMPLATES) if self.extend_defaults else {}
        templates.update(self.templates)
        return MessageBuilder(templates)


def load_message_config(path: str | Path) -> MessageConfig:
    """Read and validate a YAML message catalog."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise_config_error(catalog_error(str(path), str(e), cause=e, origin="messages"))
    try:
        return MessageConfig.model_validate(data)
    except PydanticValidationError as e:
        raise_config_error(catalog_error(str(path), f"{e.error_count()} invalid entries", cause=e, origin="messages"))


# ============================================================================
# Process-wide default
# ============================================================================

_message_builder: MessageBuilder | None = None


def get_message_builder() -> MessageBuilder:
    """Active process-wide MessageBuilder, created on first use."""
    global _message_builder
    if _message_builder is None:
        settings = get_settings()
        _message_builder = (load_message_config(settings.MESSAGES_FILE).to_builder() if settings.MESSAGES_FILE
            else MessageBuilder(DEFAULT_TEMPLATES))
    return _message_builder


def configure_messages(templates: Mapping[str, TemplateSource] | None = None, *,
                       builder: MessageBuilder | None = None) -> MessageBuilder:
    """Replace the process-wide MessageBuilder wholesale.

    Only `templates["default"]` is filled in when missing; other kinds not
    given fall back to it.
    """
    global _message_builder
    _message_builder = builder or MessageBuilder(templates)
    log.info("messages_configured", templates=sorted(_message_builder.templates))
    return _message_builder


def reset_messages() -> None:
    """Restore the default templates on next use."""
    global _message_builder
    _message_builder = None
