"""Monetary parsing, rounding and currency conversion helpers."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from errors import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

AmountLike = Union[Decimal, int, float, str, None]


def quantize(value: Decimal) -> Decimal:
    """Round a Decimal to 2 places, half up."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_amount(value: AmountLike, field: str = "amount") -> Decimal:
    """Parse user or extracted input into a non-negative 2-place Decimal.

    Blank input (None or an empty string) parses as zero. Strings may use a
    comma as the decimal separator ("1200,50").

    Args:
        value: Raw amount.
        field: Field name used in error messages.

    Returns:
        The amount rounded to cents.

    Raises:
        ValidationError: If the value is not a finite, non-negative number.
    """
    if value is None:
        return ZERO

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}", field)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        value = text

    try:
        # str() keeps floats at their shortest repr (0.1 -> "0.1")
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} is not a number: {value!r}", field)

    if not amount.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}", field)
    if amount < 0:
        raise ValidationError(f"{field} must not be negative, got {amount}", field)

    return quantize(amount)


def parse_rate(value: AmountLike, field: str = "exchange_rate") -> Decimal:
    """Parse an exchange rate, keeping its full precision.

    Raises:
        ValidationError: If the rate is missing, not finite, or not positive.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field)
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} is not a number: {value!r}", field)
    if not rate.is_finite() or rate <= 0:
        raise ValidationError(f"{field} must be positive, got {value!r}", field)
    return rate


def convert(amount: Decimal, rate: Decimal) -> Decimal:
    """Convert an amount with the given exchange rate.

    Pure function: the caller always supplies the rate.
    """
    return quantize(Decimal(amount) * parse_rate(rate))


def format_money(amount: Optional[Decimal], currency: str = "") -> str:
    """Format an amount for display, e.g. ``BRL 1,200.00``."""
    if amount is None:
        return "-"
    text = f"{quantize(amount):,.2f}"
    return f"{currency} {text}" if currency else text
