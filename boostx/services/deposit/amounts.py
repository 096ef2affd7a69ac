"""
Token amount conversion.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from boostx.config.constants import DEPOSIT_AMOUNT_PRECISION, MAX_TOKEN_AMOUNT
from boostx.utils.exceptions import ValidationError


def to_token_amount(raw: int | str, decimals: int = 18) -> Decimal:
    """
    Convert a raw on-chain integer value to whole tokens.

    The result is truncated (never rounded) to 6 decimal places.

    Args:
        raw: Value in smallest units
        decimals: Token decimals

    Returns:
        Token amount

    Raises:
        ValidationError: If raw is not a non-negative integer or the amount
            does not fit the balance columns

    Examples:
        >>> to_token_amount("1500000000000000000")
        Decimal('1.500000')
        >>> to_token_amount(1234567999999999999)
        Decimal('1.234567')
    """
    try:
        value = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Raw amount is not numeric: {raw!r}") from e

    if not value.is_finite() or value < 0 or value != value.to_integral_value():
        raise ValidationError(f"Raw amount must be a non-negative integer: {raw!r}")

    with localcontext() as ctx:
        # uint256 raw values need more than the default 28 digits
        ctx.prec = 100
        amount = value.scaleb(-decimals)
        if amount > MAX_TOKEN_AMOUNT:
            raise ValidationError(f"Raw amount exceeds balance range: {raw!r}")
        return amount.quantize(DEPOSIT_AMOUNT_PRECISION, rounding=ROUND_DOWN)
