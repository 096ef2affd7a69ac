"""
Unit tests for raw on-chain value conversion.

Credited amounts are truncated to 6 decimal places, never rounded.
"""

from decimal import Decimal

import pytest

from boostx.services.deposit.amounts import to_token_amount
from boostx.utils.exceptions import ValidationError


class TestToTokenAmount:
    """Test to_token_amount conversion."""

    def test_one_and_a_half(self):
        assert to_token_amount("1500000000000000000") == Decimal("1.5")

    def test_truncates_instead_of_rounding(self):
        """1.234567999... must become 1.234567."""
        assert to_token_amount("1234567999999999999") == Decimal("1.234567")

    def test_large_deposit(self):
        assert to_token_amount(500 * 10**18) == Decimal("500")

    def test_below_precision_is_zero(self):
        assert to_token_amount(999_999_999_999) == Decimal("0")

    def test_zero(self):
        assert to_token_amount(0) == Decimal("0")

    def test_custom_decimals(self):
        """USDT on some chains uses 6 decimals."""
        assert to_token_amount(2_500_000, decimals=6) == Decimal("2.5")

    def test_result_has_six_places(self):
        result = to_token_amount("1500000000000000000")
        assert result.as_tuple().exponent == -6

    @pytest.mark.parametrize("raw", ["-1", "abc", "1.5", ""])
    def test_invalid_raw_rejected(self, raw):
        with pytest.raises(ValidationError):
            to_token_amount(raw)

    def test_uint256_sized_value_rejected(self):
        with pytest.raises(ValidationError):
            to_token_amount(10**40)

    def test_max_uint256_rejected(self):
        with pytest.raises(ValidationError):
            to_token_amount(2**256 - 1)

    def test_largest_balance_accepted(self):
        assert to_token_amount(9_999_999_999 * 10**18) == Decimal("9999999999")
