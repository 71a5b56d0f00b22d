"""Tests for amount parsing at the operation boundary."""

import pytest
from pydantic import BaseModel, ValidationError

from exchange.errors import InvalidAmount
from exchange.models.types import Amount, parse_amount, parse_positive_amount, validate_amount


class _Holder(BaseModel):
    amount: Amount


class TestValidateAmount:
    """Tests for the Amount validator."""

    def test_accepts_decimal_string(self):
        assert validate_amount("12345") == 12345

    def test_accepts_int(self):
        assert validate_amount(7) == 7

    def test_accepts_unbounded_length(self):
        digits = "9" * 200
        assert validate_amount(digits) == int(digits)

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "1e3", " 5", "5\n", "+5", "0x10", "1_000", "٣"])
    def test_rejects_non_decimal(self, raw):
        with pytest.raises(ValueError):
            validate_amount(raw)

    def test_rejects_negative_int(self):
        with pytest.raises(ValueError):
            validate_amount(-1)

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            validate_amount(1.0)
        with pytest.raises(ValueError):
            validate_amount(True)


class TestAmountField:
    """Tests for Amount inside pydantic models."""

    def test_holds_int_serializes_string(self):
        holder = _Holder(amount="10")

        assert holder.amount == 10
        assert holder.model_dump(mode="json") == {"amount": "10"}

    def test_invalid_raises_validation_error(self):
        with pytest.raises(ValidationError):
            _Holder(amount="-10")


class TestParseAmount:
    """Tests for caller-facing parsers."""

    def test_parse_amount_allows_zero(self):
        assert parse_amount("0") == 0

    def test_parse_amount_invalid(self):
        with pytest.raises(InvalidAmount, match="invalid minimum"):
            parse_amount("x", "minimum")

    def test_positive_accepts(self):
        assert parse_positive_amount("1") == 1

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", "", 0, -3])
    def test_positive_rejects(self, raw):
        with pytest.raises(InvalidAmount):
            parse_positive_amount(raw)
