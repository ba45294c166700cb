"""Tests for value accessors."""

import pytest

from modelguard.errors import ConfigurationError
from modelguard.records import Record
from modelguard.validation import (
    MultiAccessor,
    SelfAccessor,
    SingleAccessor,
    ValidationConfig,
    accessor_for,
)

CONFIG = ValidationConfig()


class TestAccessorSelection:
    def test_single(self):
        assert isinstance(accessor_for("name", CONFIG), SingleAccessor)

    def test_self(self):
        assert isinstance(accessor_for("self", CONFIG), SelfAccessor)

    def test_multi(self):
        accessor = accessor_for("start, end", CONFIG)
        assert isinstance(accessor, MultiAccessor)
        assert accessor.keys == ("start", "end")
        assert accessor.path_segment == "start, end"

    def test_custom_separator(self):
        config = ValidationConfig(multi_attribute_key_separator="|")
        assert accessor_for("start|end", config).keys == ("start", "end")
        assert isinstance(accessor_for("start,end", config), SingleAccessor)

    def test_empty_part_rejected(self):
        with pytest.raises(ConfigurationError):
            accessor_for("start,,end", CONFIG)


class TestSingleAccessor:
    def test_present_only_when_supplied(self):
        accessor = SingleAccessor("name")
        record = Record(name="Ada")
        assert accessor.has({"name": None}, record)
        assert not accessor.has({}, record)

    def test_get(self):
        assert SingleAccessor("name").get({"name": "Ada"}, None) == ("Ada",)


class TestSelfAccessor:
    def test_always_present(self):
        record = Record()
        accessor = SelfAccessor("self")
        assert accessor.has({}, record)
        assert accessor.get({}, record) == (record,)
        assert accessor.path_segment == ""


class TestMultiAccessor:
    accessor = MultiAccessor("start,end", ("start", "end"), "self")

    def test_needs_one_supplied_key(self):
        assert not self.accessor.has({}, Record(start=1, end=2))

    def test_resolves_missing_keys_from_record(self):
        record = Record(end=5)
        assert self.accessor.has({"start": 1}, record)
        assert self.accessor.get({"start": 1}, record) == (1, 5)

    def test_candidates_win(self):
        record = Record(start=0, end=5)
        assert self.accessor.get({"start": 1, "end": 2}, record) == (1, 2)

    def test_unresolvable_key(self):
        assert not self.accessor.has({"start": 1}, Record())
        assert not self.accessor.has({"start": 1}, Record(end=None))
        assert not self.accessor.has({"start": 1}, None)

    def test_self_key_inside_composite(self):
        """The self key resolves to the record and counts as supplied."""
        accessor = accessor_for("self,end", CONFIG)
        record = Record(end=3)
        assert accessor.has({}, record)
        assert accessor.get({}, record) == (record, 3)
