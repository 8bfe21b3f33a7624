"""Tests for request presence checks."""

import pytest

from app.engine.errors import InvalidRequestError
from app.engine.validation import (
    CONFIRM_PAYMENT_MESSAGE,
    INVALID_BODY_MESSAGE,
    check_required,
    message_for_path,
    require,
)


class TestCheckRequired:
    def test_all_present(self):
        result = check_required({"a": "x", "b": {"k": 1}}, "missing")
        assert result.valid is True
        assert result.missing == []

    def test_none_is_missing(self):
        result = check_required({"a": "x", "b": None}, "missing")
        assert not result.valid
        assert result.missing == ["b"]
        assert result.message == "missing"

    def test_empty_string_is_missing(self):
        result = check_required({"a": ""}, "missing")
        assert result.missing == ["a"]

    def test_empty_dict_passes_through(self):
        result = check_required({"mandateData": {}}, "missing")
        assert result.valid is True
        assert result.missing == []

    @pytest.mark.parametrize("value", [0, 0.0, False])
    def test_zero_and_false_are_missing(self, value):
        result = check_required({"amount": value}, "missing")
        assert result.missing == ["amount"]

    def test_reports_every_missing_field_in_order(self):
        result = check_required({"a": None, "b": "ok", "c": None}, "missing")
        assert result.missing == ["a", "c"]


class TestRequire:
    def test_raises_with_fixed_message(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            require({"paymentIntentId": "pi_1", "paymentMethodId": None}, CONFIRM_PAYMENT_MESSAGE)
        assert exc_info.value.message == CONFIRM_PAYMENT_MESSAGE
        assert exc_info.value.status_code == 400

    def test_passes_silently(self):
        assert require({"paymentIntentId": "pi_1"}, CONFIRM_PAYMENT_MESSAGE) is None


class TestMessageForPath:
    def test_known_route(self):
        assert message_for_path("/confirm-payment") == CONFIRM_PAYMENT_MESSAGE

    def test_unknown_route_falls_back(self):
        assert message_for_path("/create-payment-intent") == INVALID_BODY_MESSAGE
