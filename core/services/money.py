"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
import re
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
    getcontext,
    localcontext,
)
from typing import Iterable, Union

Numeric = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Prices past float range behave like parseFloat overflow (Infinity) and count as 0
MAX_PRICE_EXPONENT = 308

# Optional leading currency sign(s), then the longest numeric prefix
_PRICE_TEXT_RE = re.compile(
    r"^\s*(?:[^\w\s.+\-]+)?\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")

    try:
        # Go through str so 0.1 stays 0.1
        if isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def parse_price_text(text: Union[Numeric, None]) -> Decimal:
    """
    Parse a display price such as "$12.50" into a Decimal.

    A leading currency sign is stripped and the longest numeric prefix is
    used, so "$12.50 each" parses as 12.50. Anything unparseable
    ("See options", "", None) is Decimal("0").
    """
    if not isinstance(text, str):
        return to_decimal(text)

    match = _PRICE_TEXT_RE.match(text)
    if not match:
        return Decimal("0")
    value = to_decimal(match.group(1))
    if value and value.adjusted() > MAX_PRICE_EXPONENT:
        return Decimal("0")
    return value


def _wide_context(digits: int):
    """Local context holding `digits` significant digits, exponent unbounded."""
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, digits)
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN
    return localcontext(ctx)


def from_cents(cents: int) -> Decimal:
    """Convert minor units (cents) to a decimal amount."""
    return to_decimal(cents) / Decimal(100)


def round_money(value: Numeric) -> Decimal:
    """Round a monetary value to cents (ROUND_HALF_UP)."""
    amount = to_decimal(value)
    with _wide_context(max(amount.adjusted(), 0) + 3):
        return amount.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_amount(value: Numeric) -> str:
    """Format as a plain amount with exactly two decimals: "20.00"."""
    return str(round_money(value))


def format_price_text(value: Numeric, symbol: str = "$") -> str:
    """Format as a display price: "$20.00"."""
    return f"{symbol}{format_amount(value)}"


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    a, b = to_decimal(value), to_decimal(factor)
    with _wide_context(len(a.as_tuple().digits) + len(b.as_tuple().digits)):
        return a * b


def sum_amounts(values: Iterable[Numeric]) -> Decimal:
    """Exact sum of monetary values, however many digits they carry."""
    amounts = [to_decimal(v) for v in values]
    if not amounts:
        return Decimal("0")
    int_digits = max(max(a.adjusted(), 0) for a in amounts) + 1
    frac_digits = max(max(-a.as_tuple().exponent, 0) for a in amounts)
    with _wide_context(int_digits + frac_digits + len(str(len(amounts)))):
        return sum(amounts, Decimal("0"))
