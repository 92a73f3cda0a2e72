"""Fixed-decimal money primitives for the billing engine.

Money is carried as ``Decimal`` and rounded half-up (not banker's rounding)
at every externally observable boundary:

    >>> round_to_decimals(10.555)
    Decimal('10.56')
    >>> round_to_decimals(10.554)
    Decimal('10.55')

Floats are converted through ``str()`` so ``10.555`` means the decimal
literal the caller typed, not its nearest binary approximation.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from apps.billing.exceptions import InvalidAmountError, InvalidQuantityError

Numeric = Union[int, float, str, Decimal]

# Honduran ISV, applied to tax-exclusive subtotals
TAX_RATE = Decimal("0.15")
DECIMAL_PLACES = 2
MIN_PRICE = Decimal("0")
MAX_QUANTITY = 999999
# Payment splits are typed in by hand, one cent of slack
SPLIT_TOLERANCE = Decimal("0.01")

ZERO = Decimal("0.00")


def to_decimal(value: Numeric) -> Decimal:
    """Convert a numeric value to Decimal without rounding it."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidAmountError(f"Expected a number, got boolean {value!r}")
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidAmountError(f"Not a valid number: {value!r}") from e


def round_to_decimals(value: Numeric, decimals: int = DECIMAL_PLACES) -> Decimal:
    """
    Round a value to ``decimals`` places using round-half-up.

    Args:
        value: Value to round (int, float, str or Decimal)
        decimals: Number of decimal places (default: 2)

    Returns:
        Decimal with exactly ``decimals`` places

    Raises:
        InvalidAmountError: If the value is not a finite number, or too
            large to carry the requested places
    """
    dec = to_decimal(value)
    if not dec.is_finite():
        raise InvalidAmountError(f"Cannot round a non-finite value: {value!r}")
    try:
        return dec.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Amount is too large to round to {decimals} places: {value}") from e


def money(value: Numeric) -> Decimal:
    """Round a value to cents."""
    return round_to_decimals(value, DECIMAL_PLACES)


def validate_price(price: Numeric) -> Decimal:
    """
    Validate a unit price and return it as Decimal.

    Raises:
        InvalidAmountError: If the price is not finite or is below MIN_PRICE
    """
    dec = to_decimal(price)
    if not dec.is_finite():
        raise InvalidAmountError(f"Price must be a finite number: {price!r}")
    if dec < MIN_PRICE:
        raise InvalidAmountError(f"Price cannot be negative: {price}")
    return dec


def validate_quantity(quantity: Numeric) -> int:
    """
    Validate a quantity and return it as int.

    Integral floats and Decimals (``2.0``) are accepted, booleans are not.

    Raises:
        InvalidQuantityError: If the quantity is not finite, not an integer,
            negative, or above MAX_QUANTITY
    """
    if isinstance(quantity, bool):
        raise InvalidQuantityError(f"Quantity must be a number, got {quantity!r}")
    try:
        dec = to_decimal(quantity)
    except InvalidAmountError as e:
        raise InvalidQuantityError(f"Quantity must be a number: {quantity!r}") from e

    if not dec.is_finite():
        raise InvalidQuantityError(f"Quantity must be a finite number: {quantity!r}")
    if dec < 0:
        raise InvalidQuantityError(f"Quantity cannot be negative: {quantity}")
    if dec > MAX_QUANTITY:
        raise InvalidQuantityError(f"Quantity exceeds the maximum allowed ({MAX_QUANTITY}): {quantity}")
    if dec != dec.to_integral_value():
        raise InvalidQuantityError(f"Quantity must be a whole number: {quantity}")
    return int(dec)
