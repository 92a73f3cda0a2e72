"""Proration of a recurring daily charge (e.g. an ongoing hospitalization).

The number of unbilled days is resolved by the caller from the last billed
date and the current time; this module only enforces that the requested
days and any custom amount stay inside that window.
"""
import logging
from decimal import Decimal
from typing import Optional

from apps.billing.exceptions import InvalidAmountError, OutOfRangeError, OverrideExceedsCeilingError
from apps.billing.money import ZERO, Numeric, money, to_decimal, validate_price
from apps.billing.tax import extract_tax
from apps.billing.types import InvoiceAmounts, ProrationRequest, ProrationResult

logger = logging.getLogger(__name__)


def daily_rate(base_price: Optional[Numeric], variant_price: Optional[Numeric] = None) -> Decimal:
    """
    Resolve the per-day rate of a charge.

    A variant price wins when it is set and greater than zero; otherwise the
    base price applies. No base price means nothing is billable (0).
    """
    if base_price is None:
        return ZERO
    if variant_price is not None:
        variant = validate_price(variant_price)
        if variant > 0:
            return money(variant)
    return money(validate_price(base_price))


def _as_days(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise OutOfRangeError(f"{label} must be a whole number of days: {value!r}")
    return value


def prorate(request: ProrationRequest) -> ProrationResult:
    """
    Calculate the amount due for ``days_to_bill`` days at the daily rate.

    Args:
        request: Daily rate, billable window and optional custom amount

    Returns:
        ProrationResult; ``amount_due`` is the custom amount when one is
        given, otherwise ``round(days_to_bill * daily_rate)``

    Raises:
        InvalidAmountError: If the daily rate is invalid, or the custom
            amount is not a positive finite number
        OutOfRangeError: If days_to_bill is outside [1, days_available]
        OverrideExceedsCeilingError: If the custom amount is above the
            computed amount for those days
    """
    rate = validate_price(request.daily_rate)
    days_available = _as_days(request.days_available, "Days available")
    days_to_bill = _as_days(request.days_to_bill, "Days to bill")

    if days_available < 0:
        raise OutOfRangeError(f"Days available cannot be negative: {days_available}", days_available)
    if days_to_bill < 1 or days_to_bill > days_available:
        raise OutOfRangeError(
            f"Days to bill must be between 1 and {days_available}: {days_to_bill}",
            days_available,
        )

    ceiling = money(rate * days_to_bill)

    if request.override_amount is None:
        return ProrationResult(
            days_billed=days_to_bill,
            daily_rate=money(rate),
            ceiling=ceiling,
            amount_due=ceiling,
        )

    override = to_decimal(request.override_amount)
    if not override.is_finite() or override <= 0:
        raise InvalidAmountError(f"Custom amount must be a number greater than 0: {request.override_amount!r}")
    if override > rate * days_to_bill:
        raise OverrideExceedsCeilingError(f"Custom amount ({override}) cannot exceed {ceiling}")

    amount_due = money(override)
    logger.info(
        "Custom amount %s applied to %s day(s) at %s (computed %s)",
        amount_due, days_to_bill, rate, ceiling,
    )
    return ProrationResult(
        days_billed=days_to_bill,
        daily_rate=money(rate),
        ceiling=ceiling,
        amount_due=amount_due,
        is_override=True,
    )


def prorated_invoice(result: ProrationResult) -> InvoiceAmounts:
    """
    Fiscal invoice figures for a prorated charge.

    The amount due is tax inclusive, so subtotal and ISV are extracted from
    it. A custom amount below the computed one shows up as a discount.
    """
    split = extract_tax(result.amount_due)
    return InvoiceAmounts(
        subtotal=split.subtotal,
        discounts=money(result.ceiling - result.amount_due),
        tax=split.tax,
        total=split.total,
    )
