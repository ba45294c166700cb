"""Tests for settings, validation configuration and path formatting."""

import pytest

from modelguard.config import Settings, get_settings
from modelguard.errors import ConfigurationError
from modelguard.records import Record
from modelguard.validation import (
    BracketPathFormatter,
    DotPathFormatter,
    ModelValidator,
    ValidationConfig,
    ValidationContext,
    default_config,
    get_path_formatter,
    rules,
)


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SELF_REFERENCE_KEY", "MULTI_ATTRIBUTE_KEY_SEPARATOR", "PATH_FORMAT", "MESSAGES_FILE"):
            monkeypatch.delenv(f"MODELGUARD_{name}", raising=False)
        settings = Settings()
        assert settings.SELF_REFERENCE_KEY == "self"
        assert settings.MULTI_ATTRIBUTE_KEY_SEPARATOR == ","
        assert settings.PATH_FORMAT == "default"
        assert settings.MESSAGES_FILE is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MODELGUARD_PATH_FORMAT", "ruby-on-rails")
        monkeypatch.setenv("MODELGUARD_SELF_REFERENCE_KEY", "this")
        config = ValidationConfig.from_settings(Settings())
        assert isinstance(config.path_formatter, BracketPathFormatter)
        assert config.self_reference_key == "this"

    def test_unknown_path_format(self, monkeypatch):
        monkeypatch.setenv("MODELGUARD_PATH_FORMAT", "xml")
        with pytest.raises(ConfigurationError):
            ValidationConfig.from_settings(Settings())


class TestPathFormatters:
    def test_dotted(self):
        formatter = DotPathFormatter()
        assert formatter.append_attribute("", "customer") == "customer"
        assert formatter.append_attribute("customer", "name") == "customer.name"
        assert formatter.append_attribute("customer", "") == "customer"
        assert formatter.append_collection_item("items", 2) == "items[2]"
        assert formatter.append_collection_item("", 0) == "[0]"

    def test_bracketed(self):
        formatter = BracketPathFormatter()
        assert formatter.append_attribute("", "customer") == "customer"
        assert formatter.append_attribute("customer", "name") == "customer[name]"
        assert formatter.append_attribute("items[0]", "name") == "items[0][name]"

    def test_lookup(self):
        assert get_path_formatter("default") == DotPathFormatter()
        assert get_path_formatter("ruby-on-rails") == BracketPathFormatter()
        with pytest.raises(ConfigurationError):
            get_path_formatter("unknown")


class TestCustomKeys:
    def test_custom_self_key_and_separator(self):
        config = ValidationConfig(self_reference_key="this", multi_attribute_key_separator="|")
        validator = ModelValidator({
            "this": rules.check(lambda record, ctx: False, message="Record invalid"),
            "start|end": rules.check(lambda s, e, ctx: s <= e, message="Order"),
        }, config)
        result = validator.validate({"start": 2, "end": 1}, ValidationContext.root(Record()))
        assert result.paths == ["", "start", "end"]
        assert result.invalid_values[0].attr == "this"

    def test_self_is_plain_key_when_renamed(self):
        config = ValidationConfig(self_reference_key="this")
        validator = ModelValidator({"self": rules.not_null()}, config)
        assert validator.validate({}, ValidationContext.root(Record())).is_valid
        assert validator.validate({"self": None}).paths == ["self"]


class TestDefaultConfig:
    def test_follows_environment(self, monkeypatch):
        monkeypatch.setenv("MODELGUARD_PATH_FORMAT", "ruby-on-rails")
        get_settings.cache_clear()
        default_config.cache_clear()
        validator = ModelValidator({"name": rules.not_null()})
        assert validator.validate({"name": None}, ValidationContext(path="customer")).paths == ["customer[name]"]

    def test_override_does_not_carry_over(self):
        """Each test starts from the settings of its own environment."""
        assert default_config().path_formatter == DotPathFormatter()
        assert ModelValidator({"name": rules.not_null()}).config.path_formatter == DotPathFormatter()
