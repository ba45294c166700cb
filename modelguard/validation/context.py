"""Validation Context and Configuration

Immutable values threaded through a validation run:
- ValidationContext: current path, target record and host options
- ValidationConfig: reserved keys and path formatting, injected into validators
- PathFormatter: dotted ("customer.name") or bracketed ("customer[name]") paths
- Validatable: capability contract for records that validate themselves
- UNDEFINED: sentinel for "no value", treated like None by every rule
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Protocol

from modelguard.config import Settings, get_settings
from modelguard.errors import invalid_rule_argument, configuration_error, raise_config_error

if TYPE_CHECKING:
    from .result import ValidationResult

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class _Undefined:
    """Singleton marker for a value that was never supplied."""
    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None: cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "UNDEFINED"

    def __bool__(self) -> bool: return False

    def __reduce__(self) -> str: return "UNDEFINED"


UNDEFINED = _Undefined()


def is_null_or_undefined(value: Any) -> bool:
    return value is None or value is UNDEFINED


# ============================================================================
# Path Formatting
# ============================================================================

class PathFormatter(ABC):
    """Builds invalid-value paths as validation descends into records and collections."""
    name: str = ""

    @abstractmethod
    def append_attribute(self, path: str, key: str) -> str:
        """Append an attribute segment. An empty key adds nothing."""

    def append_collection_item(self, path: str, index: int) -> str:
        return f"{path}[{index}]"

    def __repr__(self) -> str: return f"{type(self).__name__}({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PathFormatter) and other.name == self.name

    def __hash__(self) -> int: return hash(self.name)


class DotPathFormatter(PathFormatter):
    """customer.address.line1, items[0].name"""
    name = "default"

    def append_attribute(self, path: str, key: str) -> str:
        if not key: return path
        return f"{path}.{key}" if path else key


class BracketPathFormatter(PathFormatter):
    """customer[address][line1], items[0][name]"""
    name = "ruby-on-rails"

    def append_attribute(self, path: str, key: str) -> str:
        if not key: return path
        return f"{path}[{key}]" if path else key


PATH_FORMATTERS: dict[str, PathFormatter] = {
    DotPathFormatter.name: DotPathFormatter(),
    BracketPathFormatter.name: BracketPathFormatter(),
}


def get_path_formatter(name: str) -> PathFormatter:
    """Look up a registered path formatter by convention name."""
    if (formatter := PATH_FORMATTERS.get(name)) is None:
        raise_config_error(configuration_error(
            f"Unknown path format '{name}'", origin="config", available=sorted(PATH_FORMATTERS)))
    return formatter


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Configuration shared by every validator built for a rules map."""
    self_reference_key: str = "self"
    multi_attribute_key_separator: str = ","
    path_formatter: PathFormatter = field(default_factory=DotPathFormatter)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ValidationConfig:
        settings = settings or get_settings()
        return cls(self_reference_key=settings.SELF_REFERENCE_KEY,
            multi_attribute_key_separator=settings.MULTI_ATTRIBUTE_KEY_SEPARATOR,
            path_formatter=get_path_formatter(settings.PATH_FORMAT))

    def is_self_key(self, key: str) -> bool:
        return key == self.self_reference_key

    def split_key(self, key: str) -> tuple[str, ...]:
        """Split a composite rule key ("start,end") into attribute names."""
        if self.multi_attribute_key_separator not in key: return (key,)
        parts = tuple(part.strip() for part in key.split(self.multi_attribute_key_separator))
        if not all(parts):
            raise_config_error(invalid_rule_argument(f"Composite rule key '{key}' contains an empty attribute name",
                key, origin="config"))
        return parts


@lru_cache(maxsize=1)
def default_config() -> ValidationConfig:
    """Process-wide configuration used when a validator is built without one."""
    return ValidationConfig.from_settings()


# ============================================================================
# Context
# ============================================================================

@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Immutable per-level context: each level derives a new one with an extended path."""
    path: str = ""
    target: Any = None
    options: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    attr: str | None = None

    @classmethod
    def root(cls, target: Any = None, options: Mapping[str, Any] | None = None) -> ValidationContext:
        return cls(path="", target=target, options=MappingProxyType(dict(options)) if options else _EMPTY)

    def with_path(self, path: str, attr: str | None = None) -> ValidationContext:
        return replace(self, path=path, attr=attr)

    def with_attr(self, attr: str | None) -> ValidationContext:
        return replace(self, attr=attr)

    def with_target(self, target: Any) -> ValidationContext:
        return replace(self, target=target)

    def with_options(self, options: Mapping[str, Any] | None) -> ValidationContext:
        if options is None: return self
        return replace(self, options=MappingProxyType(dict(options)))


class RecordLike(Protocol):
    """Read access a validator needs on the record being validated."""

    def get(self, key: str) -> Any: ...

    def has(self, key: str) -> bool: ...


class Validatable(ABC):
    """Capability contract for values the nested rule and collections descend into."""

    @abstractmethod
    def validate(
        self,
        attributes: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        context: ValidationContext | None = None,
    ) -> ValidationResult | None:
        """Validate candidate attributes. Returns None when valid."""
