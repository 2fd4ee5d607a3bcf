"""Tests for pools.quantity — lenient and strict quantity policies."""

import pytest

from poolforge_engine.common.exceptions import BadRequestError
from poolforge_engine.pools.quantity import get_quantity_policy, lenient_quantity, strict_quantity


class TestLenientQuantity:
    @pytest.mark.parametrize("value", ["unlimited", "UNLIMITED", "Unlimited"])
    def test_unlimited(self, value):
        assert lenient_quantity(value) == -1

    def test_integer_text(self):
        assert lenient_quantity("5") == 5

    def test_integer_value(self):
        assert lenient_quantity(12) == 12

    def test_zero(self):
        assert lenient_quantity("0") == 0

    def test_minus_one_is_unlimited(self):
        assert lenient_quantity("-1") == -1

    @pytest.mark.parametrize(
        "value", ["abc", "", "1.5", "-5", None, "1_000", "\u0661\u0662", " 1 2 "],
    )
    def test_invalid_coerced_to_zero(self, value):
        assert lenient_quantity(value) == 0

    def test_plus_sign_accepted(self):
        assert lenient_quantity("+5") == 5

    def test_logs_coercion(self, caplog):
        with caplog.at_level("WARNING", logger="poolforge_engine.pools.quantity"):
            lenient_quantity("abc")
        assert "coerced to 0" in caplog.text

    def test_custom_unlimited_token(self):
        assert lenient_quantity("infinite", unlimited_token="infinite") == -1
        assert lenient_quantity("unlimited", unlimited_token="infinite") == 0


class TestStrictQuantity:
    def test_valid_values(self):
        assert strict_quantity("unlimited") == -1
        assert strict_quantity("7") == 7

    @pytest.mark.parametrize("value", ["abc", "", "-5", None, "1_000"])
    def test_invalid_raises(self, value):
        with pytest.raises(BadRequestError) as exc:
            strict_quantity(value)
        assert exc.value.code == "BAD_REQUEST"


class TestPolicyLookup:
    def test_lenient_by_name(self):
        assert get_quantity_policy("lenient")("abc") == 0

    def test_strict_by_name(self):
        with pytest.raises(BadRequestError):
            get_quantity_policy("strict")("abc")

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            get_quantity_policy("yolo")
