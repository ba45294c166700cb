"""Shared fixtures and sample records."""

import pytest

from modelguard.config import get_settings
from modelguard.logging import configure_logging
from modelguard.records import Record, RecordCollection
from modelguard.validation import default_config, rules, reset_messages

configure_logging(level="WARNING")


class Address(Record):
    rules = {"line1": rules.not_blank()}


class Customer(Record):
    rules = {
        "name": rules.not_blank(),
        "address": rules.valid(),
    }


class Order(Record):
    rules = {
        "customer": rules.not_null().valid(),
        "items": rules.valid(),
    }


class Item(Record):
    rules = {"name": rules.not_blank()}


class Items(RecordCollection):
    record_class = Item


@pytest.fixture(autouse=True)
def default_messages():
    """Every test starts and ends with the default message templates, settings and validation config."""
    reset_messages()
    yield
    reset_messages()
    get_settings.cache_clear()
    default_config.cache_clear()


@pytest.fixture
def invalid_order():
    return Order(customer=Customer(name=" ", address=Address(line1="")))
