"""Tests for results, validation errors and boundary helpers."""

import pytest

from conftest import Item, Order
from modelguard.errors import AppErrorException, ErrorCode, Err, Ok
from modelguard.validation import (
    ErrorEntry,
    InvalidValue,
    ResultBuilder,
    ValidationError,
    ValidationResult,
    check_attributes,
    check_batch,
    check_record,
    ensure_valid,
)


def invalid(path, *messages, attr=None):
    return InvalidValue(attr=attr or path, path=path, errors=tuple(ErrorEntry(m, "check") for m in messages))


class TestResultBuilder:
    def test_merges_by_path(self):
        builder = ResultBuilder()
        builder.add([invalid("name", "a")]).add([invalid("code", "b"), invalid("name", "c")])
        result = builder.build()
        assert len(builder) == 2
        assert result.paths == ["name", "code"]
        assert result.invalid_values[0].messages == ["a", "c"]

    def test_empty(self):
        result = ResultBuilder().build()
        assert result.is_valid
        assert result.summary() == ""


class TestValidationResult:
    result = ValidationResult((invalid("customer.name", "Required", "Too short", attr="name"), invalid("code", "Bad")))

    def test_summary(self):
        assert self.result.summary() == "name:\n- Required\n- Too short\n\ncode:\n- Bad\n\n"

    def test_errors_for(self):
        assert [e.message for e in self.result.errors_for("customer.name")] == ["Required", "Too short"]
        assert self.result.errors_for("missing") == ()

    def test_to_dict(self):
        data = self.result.to_dict()
        assert data["is_valid"] is False
        assert data["invalid_values"][0] == {
            "attr": "name",
            "path": "customer.name",
            "errors": [{"message": "Required", "key": "check"}, {"message": "Too short", "key": "check"}],
        }

    def test_to_app_error(self):
        error = self.result.to_app_error()
        assert error.code == ErrorCode.E2000_VALIDATION_GENERIC
        assert error.metadata["error_count"] == 2

    def test_raise_if_invalid(self):
        with pytest.raises(ValidationError) as exc:
            self.result.raise_if_invalid()
        assert exc.value.field_errors == {"customer.name": ["Required", "Too short"], "code": ["Bad"]}
        assert exc.value.first_error.path == "customer.name"
        assert str(exc.value) == "Validation failed (2 invalid values)"
        ValidationResult().raise_if_invalid()


class TestValidationError:
    def test_single_value_message(self):
        error = ValidationError("Validation failed", ValidationResult((invalid("code", "Bad", "Worse"),)))
        assert str(error) == "code: Bad; Worse"
        assert error.to_app_error().metadata["path"] == "code"
        assert error.to_dict()["error"]["error_count"] == 1


class TestBoundaries:
    def test_check_attributes(self):
        item = Item(name="pen")
        assert check_attributes(item, {"name": "ink"}) == Ok({"name": "ink"})

        result = check_attributes(item, {"name": ""})
        assert isinstance(result, Err)
        assert result.error.context.origin == "attributes"
        assert result.error.metadata["path"] == "name"

    def test_check_record(self, invalid_order):
        item = Item(name="pen")
        assert check_record(item).unwrap() is item

        match check_record(invalid_order):
            case Err(error):
                assert error.metadata["error_count"] == 2
            case Ok(_):
                pytest.fail("expected an error")

    def test_check_batch(self):
        good, bad = Item(name="pen"), Item(name="")
        assert check_batch([good]).unwrap() == [good]

        errors = check_batch([good, bad, bad]).unwrap_err()
        assert [idx for idx, _ in errors] == [1, 2]
        assert errors[0][1].metadata["batch_index"] == 1

    def test_check_batch_max_errors(self):
        bad = Item(name="")
        assert len(check_batch([bad] * 5, max_errors=2).unwrap_err()) == 2

    def test_ensure_valid(self, invalid_order):
        ensure_valid(Order(customer=None), {"items": None})
        with pytest.raises(AppErrorException) as exc:
            ensure_valid(invalid_order)
        assert exc.value.code == ErrorCode.E2000_VALIDATION_GENERIC
        with pytest.raises(AppErrorException):
            ensure_valid(Order(), {"customer": None})
