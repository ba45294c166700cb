"""Tests for single-key validators."""

from modelguard.records import Record
from modelguard.validation import (
    DEFAULT_TEMPLATES,
    ErrorEntry,
    MessageBuilder,
    ValidationConfig,
    ValidationContext,
    Validator,
    configure_messages,
    rules,
)

CONFIG = ValidationConfig()
MESSAGES = MessageBuilder(DEFAULT_TEMPLATES)


def run(key, builder, attributes, context=None, messages=MESSAGES):
    return Validator(key, builder.rules, CONFIG).validate(attributes, context or ValidationContext.root(), messages)


class TestSingleKey:
    def test_absent_key_skips_rules(self):
        called = []
        builder = rules.check(lambda v, ctx: called.append(v))
        assert run("name", builder, {}) == []
        assert called == []

    def test_failures_accumulate_in_order(self):
        builder = rules.not_blank().length(min=2).email()
        [invalid] = run("name", builder, {"name": " "})
        assert invalid.attr == "name"
        assert invalid.path == "name"
        assert invalid.errors == (
            ErrorEntry("Please supply a value", "string-not-blank"),
            ErrorEntry("Please supply a value of more than 2 characters", "string-length"),
            ErrorEntry("Please supply a valid email address", "email"),
        )

    def test_valid_value(self):
        assert run("name", rules.not_blank(), {"name": "Ada"}) == []

    def test_explicit_message_wins(self):
        [invalid] = run("code", rules.length(exact=3, message="Three letters"), {"code": "ab"})
        assert invalid.messages == ["Three letters"]
        assert invalid.errors[0].key == "string-length"

    def test_path_extends_parent(self):
        context = ValidationContext(path="customer")
        [invalid] = run("name", rules.not_null(), {"name": None}, context)
        assert invalid.path == "customer.name"
        assert invalid.attr == "name"

    def test_rule_context(self):
        seen = []
        run("name", rules.check(lambda v, ctx: seen.append(ctx)), {"name": 1}, ValidationContext(path="a"))
        assert seen[0].path == "a.name"
        assert seen[0].attr == "name"


class TestCompositeKey:
    def check_order(self):
        return rules.check(lambda start, end, ctx: start <= end, message="Start after end")

    def test_one_invalid_value_per_key(self):
        invalid = run("start,end", self.check_order(), {"start": 5, "end": 1})
        assert [(v.attr, v.path) for v in invalid] == [("start", "start"), ("end", "end")]
        assert invalid[0].errors == invalid[1].errors == (ErrorEntry("Start after end", "check"),)

    def test_missing_key_read_from_record(self):
        context = ValidationContext.root(Record(end=1))
        assert [v.path for v in run("start,end", self.check_order(), {"start": 5}, context)] == ["start", "end"]
        assert run("start,end", self.check_order(), {"start": 0}, context) == []

    def test_rule_context_uses_composite_name(self):
        seen = []
        run("start,end", rules.check(lambda s, e, ctx: seen.append(ctx)), {"start": 1, "end": 2})
        assert seen[0].path == "start,end"
        assert seen[0].attr == "start,end"


class TestSelfKey:
    def test_self_adds_no_path_segment(self):
        record = Record(kind="draft")
        builder = rules.check(lambda r, ctx: r.get("kind") != "draft")
        [invalid] = run("self", builder, {}, ValidationContext.root(record))
        assert invalid.attr == "self"
        assert invalid.path == ""
        assert invalid.messages == ["Please supply a valid value"]

    def test_self_under_parent_path(self):
        context = ValidationContext(path="customer", target=Record())
        [invalid] = run("self", rules.check(lambda r, ctx: False), {}, context)
        assert invalid.path == "customer"


class TestMessageResolution:
    def test_process_wide_builder_used_when_none_injected(self):
        configure_messages({"default": "Nope"})
        [invalid] = run("name", rules.check(lambda v, ctx: False), {"name": 1}, messages=None)
        assert invalid.messages == ["Nope"]

    def test_injected_builder(self):
        messages = MessageBuilder({"not-null": "<%= context.attr %> is required"})
        [invalid] = run("name", rules.not_null(), {"name": None}, messages=messages)
        assert invalid.messages == ["name is required"]


class TestCompositeInvocation:
    def test_predicate_arguments(self):
        calls = []

        def before(start, end, context):
            calls.append((start, end, context))
            return start < end

        assert run("start,end", rules.check(before), {"start": 1, "end": 2}, ValidationContext.root(Record())) == []
        [(start, end, context)] = calls
        assert (start, end) == (1, 2)
        assert isinstance(context, ValidationContext)

    def test_not_invoked_without_all_keys(self):
        calls = []
        builder = rules.check(lambda s, e, ctx: calls.append((s, e)))
        assert run("start,end", builder, {"start": 1}, ValidationContext.root(Record())) == []
        assert calls == []
