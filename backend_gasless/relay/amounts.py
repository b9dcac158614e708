"""
Conversion of whole-unit amounts to integer base units (lamports, token atoms).

Uses Decimal end to end; the result is floor(amount * 10**decimals). Precision
is widened to the operand's digit count so scaling never rounds.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from backend_gasless.core.exceptions import ValidationError

NATIVE_DECIMALS = 9
MAX_TOKEN_DECIMALS = 255  # mint decimals are a u8
U64_MAX = 2**64 - 1


def to_decimal(amount: Decimal | int | float | str) -> Decimal:
    """Coerce an amount to Decimal. Floats go through str() so 0.1 stays 0.1."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number")
    if isinstance(amount, float):
        return Decimal(str(amount))
    try:
        return Decimal(amount)
    except decimal.InvalidOperation as e:
        raise ValidationError("Amount must be a number") from e


def to_base_units(amount: Decimal | int | float | str, decimals: int) -> int:
    """
    floor(amount * 10**decimals) as an int.

    Raises ValidationError when the result is zero (amount below one base unit)
    or does not fit in a u64.
    """
    value = to_decimal(amount)
    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than 0")
    if decimals < 0 or decimals > MAX_TOKEN_DECIMALS:
        raise ValidationError(f"Decimals must be between 0 and {MAX_TOKEN_DECIMALS}")

    # u64 max has 20 digits; anything with a larger integer part cannot fit
    if value.adjusted() + decimals >= 20:
        raise ValidationError("Amount exceeds the maximum transferable value")

    digits = len(value.as_tuple().digits)
    with decimal.localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits + decimals + abs(value.as_tuple().exponent) + 2)
        scaled = value.scaleb(decimals)
        units = int(scaled.to_integral_value(rounding=decimal.ROUND_FLOOR))

    if units == 0:
        raise ValidationError("Amount is below the smallest transferable unit")
    if units > U64_MAX:
        raise ValidationError("Amount exceeds the maximum transferable value")
    return units


def sol_to_lamports(amount: Decimal | int | float | str) -> int:
    return to_base_units(amount, NATIVE_DECIMALS)
