"""Line-item pricing: price x quantity with an optional line discount."""
from decimal import Decimal

from apps.billing.exceptions import (
    DiscountExceedsBoundError,
    InvalidAmountError,
    InvalidInputError,
    NegativeAmountError,
)
from apps.billing.money import Numeric, money, to_decimal, validate_price, validate_quantity
from apps.billing.types import DEFAULT_DISCOUNT_KIND, DiscountKind, LineItem


def item_total(unit_price: Numeric, quantity: Numeric) -> Decimal:
    """
    Calculate the total of a line item: unit_price * quantity.

    The product is rounded once, not each factor, so
    ``item_total(10.555, 3)`` is 31.67.

    Raises:
        InvalidAmountError: If the price is negative or not finite
        InvalidQuantityError: If the quantity is invalid
    """
    price = validate_price(unit_price)
    qty = validate_quantity(quantity)
    return money(price * qty)


def discount_amount(
    base: Numeric,
    discount: Numeric,
    kind: DiscountKind = DEFAULT_DISCOUNT_KIND,
) -> Decimal:
    """
    Calculate the discount to subtract from ``base``.

    Args:
        base: Amount the discount applies to
        discount: Percentage (0-100) or absolute amount, depending on kind
        kind: How ``discount`` is interpreted (default: absolute)

    Returns:
        Discount amount rounded to cents

    Raises:
        NegativeAmountError: If base or discount is negative
        DiscountExceedsBoundError: If a percentage is above 100 or an
            absolute discount is larger than the base
    """
    base_dec = to_decimal(base)
    discount_dec = to_decimal(discount)

    if not (base_dec.is_finite() and discount_dec.is_finite()):
        raise InvalidAmountError(f"Discount values must be finite numbers: {base!r}, {discount!r}")

    if base_dec < 0:
        raise NegativeAmountError(f"Discount base cannot be negative: {base}")
    if discount_dec < 0:
        raise NegativeAmountError(f"Discount cannot be negative: {discount}")

    try:
        kind = DiscountKind(kind)
    except ValueError as e:
        raise InvalidInputError(f"Unknown discount kind: {kind!r}") from e

    if kind is DiscountKind.PERCENTAGE:
        if discount_dec > 100:
            raise DiscountExceedsBoundError(f"Percentage discount cannot exceed 100%: {discount}")
        return money(base_dec * discount_dec / 100)

    if discount_dec > base_dec:
        raise DiscountExceedsBoundError(
            f"Absolute discount ({discount}) cannot exceed the amount it applies to ({base})"
        )
    return money(discount_dec)


def item_total_with_discount(item: LineItem) -> Decimal:
    """Total of a line item after its own discount, if any."""
    subtotal = item_total(item.unit_price, item.quantity)

    # A zero discount is the same as no discount
    if item.discount is None or to_decimal(item.discount) == 0:
        return subtotal

    reduction = discount_amount(subtotal, item.discount, item.effective_discount_kind)
    return money(subtotal - reduction)
