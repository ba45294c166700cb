"""Value Accessors

Decide whether a rule key is present in a validation run and fetch the
value(s) its rules receive. `has` must be checked before `get`.

- SingleAccessor: one attribute, present iff supplied
- MultiAccessor: composite key ("start,end"), present iff one key is supplied
  and every key can be resolved from the candidates or the record
- SelfAccessor: the record or collection itself, always present
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .context import ValidationConfig

Attributes = Mapping[str, Any]


def _target_has(target: Any, key: str) -> bool:
    return target is not None and bool(target.has(key))


class Accessor(ABC):
    """Strategy for presence and retrieval of a validator's value(s)."""

    __slots__ = ("keys",)

    def __init__(self, keys: tuple[str, ...]):
        self.keys = keys

    @abstractmethod
    def has(self, attributes: Attributes, target: Any) -> bool:
        """Whether the rules for these keys should run at all."""

    @abstractmethod
    def get(self, attributes: Attributes, target: Any) -> tuple[Any, ...]:
        """Values in key order. Only valid when `has` returned True."""

    @property
    def path_segment(self) -> str:
        """Segment this accessor adds to the context path while rules run."""
        return self.keys[0]

    def __repr__(self) -> str: return f"{type(self).__name__}({', '.join(self.keys)})"


class SingleAccessor(Accessor):
    __slots__ = ()

    def __init__(self, key: str):
        super().__init__((key,))

    def has(self, attributes: Attributes, target: Any) -> bool:
        return self.keys[0] in attributes

    def get(self, attributes: Attributes, target: Any) -> tuple[Any, ...]:
        return (attributes[self.keys[0]],)


class SelfAccessor(Accessor):
    __slots__ = ()

    def __init__(self, key: str):
        super().__init__((key,))

    @property
    def path_segment(self) -> str: return ""

    def has(self, attributes: Attributes, target: Any) -> bool:
        return True

    def get(self, attributes: Attributes, target: Any) -> tuple[Any, ...]:
        return (target,)


class MultiAccessor(Accessor):
    """Composite key; candidate values win over values already on the record."""

    __slots__ = ("name", "self_reference_key")

    def __init__(self, name: str, keys: tuple[str, ...], self_reference_key: str):
        super().__init__(keys)
        self.name, self.self_reference_key = name, self_reference_key

    @property
    def path_segment(self) -> str: return self.name

    def _supplied(self, key: str, attributes: Attributes) -> bool:
        return key == self.self_reference_key or key in attributes

    def has(self, attributes: Attributes, target: Any) -> bool:
        if not any(self._supplied(key, attributes) for key in self.keys): return False
        return all(self._supplied(key, attributes) or _target_has(target, key) for key in self.keys)

    def get(self, attributes: Attributes, target: Any) -> tuple[Any, ...]:
        values = []
        for key in self.keys:
            if key == self.self_reference_key: values.append(target)
            elif key in attributes: values.append(attributes[key])
            else: values.append(target.get(key))
        return tuple(values)


def accessor_for(key: str, config: ValidationConfig) -> Accessor:
    """Pick the accessor for a rules-map key."""
    if config.is_self_key(key): return SelfAccessor(key)
    keys = config.split_key(key)
    if len(keys) == 1: return SingleAccessor(keys[0])
    return MultiAccessor(key, keys, config.self_reference_key)
