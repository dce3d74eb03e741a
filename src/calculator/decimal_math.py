"""
Decimal Math Utilities for Cent-Based Tax Calculations.

Every amount in the engine is integer cents. Rates (bracket percentages,
credit phase-out rates, apportionment ratios) are the only fractional
quantities, and multiplying cents by a rate goes through Decimal so the
same inputs always produce the same cents.

Why Decimal?
- Float: 0.1 + 0.2 = 0.30000000000000004
- Decimal: 0.1 + 0.2 = 0.3

This matters for:
- Bracket math where 22% of $1,234.57 must round the same way every run
- Apportionment ratios applied to whole-year tax
- Audit trails where $0.01 discrepancy can flag issues
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

# Type alias for values that can be converted to Decimal
Numeric = Union[int, float, str, Decimal]

CENT = Decimal("1")
RATE_PLACES = Decimal("0.0001")  # 4 decimal places for ratios


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Args:
        value: Value to convert (int, float, str, or Decimal)

    Returns:
        Decimal representation

    Examples:
        >>> to_decimal(0.22)
        Decimal('0.22')
        >>> to_decimal("0.0307")
        Decimal('0.0307')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Convert float to string first to preserve representation
        return Decimal(str(value))
    return Decimal(value)


def to_cents(value: Numeric) -> int:
    """
    Round a Decimal-able amount (already in cents) to whole cents, half up.

    Examples:
        >>> to_cents(Decimal("123.5"))
        124
        >>> to_cents(Decimal("-123.5"))
        -124
    """
    return int(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def apply_rate(amount: int, rate: Numeric) -> int:
    """
    Multiply cents by a rate, rounding half up to whole cents.

    Args:
        amount: Amount in cents
        rate: Rate as a fraction (0.22 for 22%)

    Returns:
        Rounded product in cents

    Examples:
        >>> apply_rate(123457, 0.22)
        27161
    """
    return to_cents(Decimal(amount) * to_decimal(rate))


def ratio(numerator: Numeric, denominator: Numeric) -> Decimal:
    """
    Safe ratio to 4 decimal places. Returns 0 when denominator is 0.

    Examples:
        >>> ratio(181, 365)
        Decimal('0.4959')
        >>> ratio(10, 0)
        Decimal('0')
    """
    d = to_decimal(denominator)
    if d == 0:
        return Decimal("0")
    return (to_decimal(numerator) / d).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def clamp_ratio(value: Decimal) -> Decimal:
    """Clamp a ratio into 0..1."""
    if value < 0:
        return Decimal("0")
    if value > 1:
        return Decimal("1")
    return value


def non_negative(amount: int) -> int:
    return amount if amount > 0 else 0


def format_cents(amount: int) -> str:
    """
    Format integer cents for display.

    Examples:
        >>> format_cents(123456)
        '$1,234.56'
        >>> format_cents(-5000)
        '-$50.00'
    """
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 100)
    return f"{sign}${whole:,}.{frac:02d}"
