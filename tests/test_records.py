"""Tests for the reference Record and the validation mixins."""

from conftest import Customer, Item, Items
from modelguard.records import ModelValidation, Record
from modelguard.validation import UNDEFINED, ValidationResult, rules


class Person(Record):
    rules = {
        "name": rules.not_blank(),
        "nickname": rules.length(max=10),
    }


class Period(Record):
    rules = {"start,end": rules.check(lambda start, end, ctx: start <= end, message="Start must not be after end")}


class TestRecordSet:
    def test_invalid_set_rejected(self):
        person = Person(name="Ada")
        errors = []
        person.on("error", lambda record, result: errors.append((record, result)))

        assert person.set(name="  ") is False
        assert person.get("name") == "Ada"
        [(record, result)] = errors
        assert record is person
        assert isinstance(result, ValidationResult)
        assert result.paths == ["name"]

    def test_valid_set_applied(self):
        person = Person(name="Ada")
        changes = []
        person.on("change", lambda record, changed: changes.append(changed))

        assert person.set({"name": "Grace"}, nickname="G") is True
        assert person.attributes == {"name": "Grace", "nickname": "G"}
        assert changes == [{"name": "Grace", "nickname": "G"}]

    def test_only_changed_attributes_validated(self):
        """Existing invalid attributes do not block unrelated changes."""
        person = Person(name="")
        assert person.set(nickname="Al") is True

    def test_silent_skips_validation_and_events(self):
        person = Person(name="Ada")
        fired = []
        person.on("error", lambda *args: fired.append("error")).on("change", lambda *args: fired.append("change"))
        assert person.set(name="", silent=True) is True
        assert person.get("name") == ""
        assert fired == []

    def test_composite_key_uses_current_values(self):
        period = Period(start=1, end=5)
        assert period.set(start=10) is False
        assert period.set(start=2) is True
        assert period.set(start=7, end=9) is True

    def test_unset(self):
        person = Person(name="Ada", nickname="A")
        assert person.unset("name") is False
        assert person.has("name")
        assert person.unset("nickname") is False  # length of UNDEFINED fails
        assert person.unset("nickname", silent=True) is True
        assert not person.has("nickname")


class TestEvents:
    def test_off(self):
        person = Person(name="Ada")
        calls = []

        def listener(*args):
            calls.append(args)

        person.on("change", listener)
        person.off("change", listener)
        person.set(name="Grace")
        assert calls == []

    def test_off_all(self):
        person = Person(name="Ada")
        calls = []
        person.on("change", lambda *a: calls.append(1)).on("error", lambda *a: calls.append(2))
        person.off()
        person.set(name="")
        person.set(name="Grace")
        assert calls == []


class TestModelValidation:
    def test_validate_all_attributes(self):
        assert Person(name="Ada").validate() is None
        assert Person(name="", nickname="x" * 11).validate().paths == ["name", "nickname"]

    def test_validate_candidates(self):
        person = Person(name="Ada")
        assert person.validate({"name": ""}).paths == ["name"]
        assert person.is_valid()

    def test_validate_attrs(self):
        period = Period(start=1, end=5)
        assert period.validate_attrs({"start": 9}) is None
        assert period.validate_attrs({"start": 9, "end": 1}).paths == ["start", "end"]

    def test_validator_cached_per_instance(self):
        first, second = Person(name="a"), Person(name="b")
        assert first.validator is first.validator
        assert first.validator is not second.validator

    def test_custom_host_class(self):
        """Any class exposing attributes, get and has can use the mixin."""

        class Settings(ModelValidation):
            rules = {"port": rules.numeric().length(max=5)}

            def __init__(self, **attributes):
                self.attributes = attributes

            def get(self, key):
                return self.attributes.get(key)

            def has(self, key):
                return key in self.attributes

        assert Settings(port="8080").validate() is None
        assert Settings(port="http").validate().paths == ["port"]


class TestRecordCollection:
    def test_add_builds_records(self):
        items = Items()
        added = []
        items.on("add", lambda record, collection: added.append(record))
        record = items.add({"name": "pen"})
        assert isinstance(record, Item)
        assert added == [record]
        assert len(items) == 1
        assert items[0] is record

    def test_remove(self):
        items = Items([{"name": "pen"}, {"name": "ink"}])
        pen = items[0]
        assert items.remove(pen) is pen
        assert [i.get("name") for i in items] == ["ink"]

    def test_existing_records_kept(self):
        customer = Customer(name="Ada")
        items = Items([customer])
        assert items[0] is customer

    def test_undefined_removed_on_silent_set(self):
        record = Record(a=1)
        record.set(a=UNDEFINED, silent=True)
        assert record.attributes == {}
