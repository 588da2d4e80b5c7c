"""Tests for arbagent.units: amount parsing and conversion."""

from decimal import Decimal

import pytest

from arbagent.units import (
    WEI_PER_ETHER,
    ether_to_wei,
    format_decimal,
    parse_positive_amount,
    MAX_UINT256,
    scale_from_integer,
    scale_to_integer,
    wei_to_ether,
    wei_to_gwei,
)


class TestParsePositiveAmount:
    @pytest.mark.parametrize("text,expected", [
        ("1", Decimal("1")),
        ("0.5", Decimal("0.5")),
        (" 10 ", Decimal("10")),
        (2, Decimal("2")),
        ("1e2", Decimal("100")),
    ])
    def test_valid(self, text, expected):
        assert parse_positive_amount(text) == expected

    @pytest.mark.parametrize("text", ["0", "-1", "abc", "", "NaN", "Infinity", "0x10"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_positive_amount(text)


class TestScaling:
    def test_ether_to_wei(self):
        assert ether_to_wei(Decimal("1")) == WEI_PER_ETHER
        assert ether_to_wei(Decimal("0.01")) == 10 ** 16

    def test_ether_to_wei_rejects_sub_wei(self):
        with pytest.raises(ValueError):
            ether_to_wei(Decimal("0.0000000000000000001"))

    def test_zero_decimals_requires_whole_units(self):
        assert scale_to_integer(Decimal("10"), 0) == 10
        with pytest.raises(ValueError):
            scale_to_integer(Decimal("1.5"), 0)

    def test_decimals_scale_amount(self):
        assert scale_to_integer(Decimal("1.5"), 2) == 150

    def test_wei_to_ether_and_gwei(self):
        assert wei_to_ether(10 ** 18) == Decimal(1)
        assert wei_to_gwei(10 ** 8) == Decimal("0.1")

    def test_many_significant_digits_are_exact(self):
        assert scale_to_integer(Decimal("12345678901234567890123456789"), 0) \
            == 12345678901234567890123456789
        assert ether_to_wei(Decimal("1234567890.123456789012345678")) \
            == 1234567890123456789012345678

    def test_excess_precision_beyond_context_rejected(self):
        with pytest.raises(ValueError, match="more than 18 decimal places"):
            ether_to_wei(Decimal("0.1000000000000000000000000000001"))

    def test_trailing_zeros_are_not_precision(self):
        assert scale_to_integer(Decimal("1.500"), 1) == 15
        assert scale_to_integer(Decimal("2E+3"), 0) == 2000

    @pytest.mark.parametrize("text", ["1e999999", "1e78", "1e-999999"])
    def test_huge_exponents_are_value_errors(self, text):
        with pytest.raises(ValueError):
            ether_to_wei(parse_positive_amount(text))

    def test_uint256_bound(self):
        assert scale_to_integer(Decimal(MAX_UINT256), 0) == MAX_UINT256
        with pytest.raises(ValueError, match="too large"):
            scale_to_integer(Decimal(MAX_UINT256 + 1), 0)

    def test_scale_from_integer_is_exact(self):
        raw = 123456789012345678901234567890123
        assert scale_from_integer(raw, 18) == Decimal("123456789012345.678901234567890123")
        assert scale_to_integer(scale_from_integer(raw, 18), 18) == raw


@pytest.mark.parametrize("value,expected", [
    (Decimal("1.500"), "1.5"),
    (Decimal("1E+2"), "100"),
    (Decimal("0"), "0"),
    (Decimal("0.000000000000000001"), "0.000000000000000001"),
])
def test_format_decimal(value, expected):
    assert format_decimal(value) == expected
