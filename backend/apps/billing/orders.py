"""Order aggregation: line items -> subtotal, discounts, tax and total."""
from collections.abc import Iterable, Mapping
from decimal import Decimal

from apps.billing.exceptions import InvalidAmountError, InvalidInputError
from apps.billing.money import ZERO, Numeric, money, to_decimal
from apps.billing.pricing import discount_amount, item_total_with_discount
from apps.billing.tax import calculate_tax
from apps.billing.types import DEFAULT_DISCOUNT_KIND, DiscountKind, LineItem, OrderBreakdown


def sum_item_totals(items: Iterable[LineItem]) -> Decimal:
    """
    Sum the discounted totals of all line items.

    Only the final sum is rounded; each item total is already in cents.
    Mappings are accepted and converted with ``LineItem.from_dict``.

    Raises:
        InvalidInputError: If ``items`` is not a sequence of line items
    """
    if items is None or isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
        raise InvalidInputError(f"Items must be a list of line items, got {type(items).__name__}")

    total = Decimal("0")
    for item in items:
        if isinstance(item, Mapping):
            item = LineItem.from_dict(item)
        elif not isinstance(item, LineItem):
            raise InvalidInputError(f"Not a line item: {item!r}")
        total += item_total_with_discount(item)

    return money(total)


def order_total(
    items: Iterable[LineItem],
    apply_tax: bool = False,
    global_discount: Numeric = 0,
    global_discount_kind: DiscountKind = DEFAULT_DISCOUNT_KIND,
) -> OrderBreakdown:
    """
    Calculate the full breakdown of an order.

    The order-level discount is taken from the item subtotal, and tax is
    computed on what remains after that discount.

    Args:
        items: Line items of the order
        apply_tax: Whether to add ISV to the discounted subtotal
        global_discount: Order-level discount (0 = none)
        global_discount_kind: How ``global_discount`` is interpreted

    Returns:
        OrderBreakdown with subtotal, discounts, tax and total

    Example:
        Two units at 100.00 with a 10% order discount and tax give
        subtotal 200.00, discounts 20.00, tax 27.00 (15% of 180.00)
        and total 207.00.
    """
    subtotal = sum_item_totals(items)

    discount_value = to_decimal(global_discount)
    if not discount_value.is_finite():
        raise InvalidAmountError(f"Order discount must be a finite number: {global_discount!r}")

    discounts = ZERO
    if discount_value > 0:
        discounts = discount_amount(subtotal, global_discount, global_discount_kind)

    net_subtotal = money(subtotal - discounts)
    tax = calculate_tax(net_subtotal) if apply_tax else ZERO
    total = money(net_subtotal + tax)

    return OrderBreakdown(
        subtotal=subtotal,
        discounts=discounts,
        tax=tax,
        total=total,
    )
