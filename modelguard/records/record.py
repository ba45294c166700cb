"""Reference Records

Minimal attribute store and ordered collection wired to the validation
mixins, with change/error events.

Usage:
    class Person(Record):
        rules = {"name": rules.not_blank()}

    person = Person(name="Ada")
    person.on("error", lambda record, result: print(result.summary()))
    person.set(name="  ")   # False, "error" fired, name still "Ada"
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Iterable, Iterator, Mapping

from modelguard.logging import validation_logger
from modelguard.validation.context import UNDEFINED

from .mixins import CollectionValidation, ModelValidation

log = validation_logger()

Listener = Callable[..., Any]


class Events:
    """Named event listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, callback: Listener) -> Events:
        self._listeners[event].append(callback)
        return self

    def off(self, event: str | None = None, callback: Listener | None = None) -> Events:
        """Remove one listener, all listeners of an event, or every listener."""
        if event is None: self._listeners.clear()
        elif callback is None: self._listeners.pop(event, None)
        elif callback in self._listeners.get(event, ()): self._listeners[event].remove(callback)
        return self

    def trigger(self, event: str, *args: Any) -> Events:
        for callback in list(self._listeners.get(event, ())):
            callback(*args)
        return self


class Record(Events, ModelValidation):
    """Attribute store validated on every non-silent mutation."""

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any):
        super().__init__()
        self.attributes: dict[str, Any] = {**(attributes or {}), **kwargs}

    def get(self, key: str) -> Any:
        return self.attributes.get(key)

    def has(self, key: str) -> bool:
        """True when the attribute holds a value other than None."""
        return self.attributes.get(key) is not None

    def _apply(self, changes: Mapping[str, Any], silent: bool) -> bool:
        if not silent and (result := self.validate(changes)) is not None:
            log.debug("record_change_rejected", record=type(self).__name__, paths=result.paths)
            self.trigger("error", self, result)
            return False
        for key, value in changes.items():
            if value is UNDEFINED: self.attributes.pop(key, None)
            else: self.attributes[key] = value
        if not silent: self.trigger("change", self, dict(changes))
        return True

    def set(self, attrs: Mapping[str, Any] | None = None, *, silent: bool = False, **kwargs: Any) -> bool:
        """Validate and apply changes. Returns False and fires "error" when invalid."""
        return self._apply({**(attrs or {}), **kwargs}, silent)

    def unset(self, key: str, *, silent: bool = False) -> bool:
        """Remove an attribute; rules for it see UNDEFINED."""
        return self._apply({key: UNDEFINED}, silent)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.attributes)

    def __repr__(self) -> str: return f"{type(self).__name__}({self.attributes!r})"


class RecordCollection(Events, CollectionValidation):
    """Ordered records. `record_class` builds records from plain mappings passed to `add`."""
    record_class: type[Record] = Record

    def __init__(self, models: Iterable[Record | Mapping[str, Any]] = ()):
        super().__init__()
        self.models: list[Record] = []
        for model in models: self.add(model)

    def _prepare(self, model: Record | Mapping[str, Any]) -> Record:
        return model if isinstance(model, Record) else self.record_class(model)

    def add(self, model: Record | Mapping[str, Any]) -> Record:
        record = self._prepare(model)
        self.models.append(record)
        self.trigger("add", record, self)
        return record

    def remove(self, model: Record) -> Record:
        self.models.remove(model)
        self.trigger("remove", model, self)
        return model

    def __iter__(self) -> Iterator[Record]: return iter(self.models)

    def __len__(self) -> int: return len(self.models)

    def __getitem__(self, index: int) -> Record: return self.models[index]

    def __repr__(self) -> str: return f"{type(self).__name__}({len(self.models)} records)"
