"""GraphQL schema for billing calculations.

All fields are stateless previews: nothing is read from or written to the
database. Validation failures come back as ``BillingErrorType`` results.
"""
import logging
from decimal import Decimal
from typing import Annotated, List, Optional, Union

import strawberry
from django.conf import settings

from apps.billing.exceptions import BillingError, OutOfRangeError
from apps.billing.orders import order_total
from apps.billing.payments import validate_payment_split
from apps.billing.proration import prorate, prorated_invoice
from apps.billing.tax import add_tax, extract_tax
from apps.billing.types import (
    DiscountKind,
    LineItem,
    OrderBreakdown,
    PaymentMethod,
    PaymentSplitEntry,
    ProrationRequest,
    TaxSplit,
)

logger = logging.getLogger(__name__)


DiscountKindEnum = strawberry.enum(DiscountKind, name="DiscountKind")
PaymentMethodEnum = strawberry.enum(PaymentMethod, name="PaymentMethod")


# =========================================================================
# Result types
# =========================================================================


@strawberry.type
class BillingErrorType:
    """A billing validation error."""

    code: str
    message: str
    days_available: Optional[int] = None


@strawberry.type
class OrderBreakdownType:
    """Order totals: subtotal, order-level discounts, ISV and total."""

    subtotal: Decimal
    discounts: Decimal
    tax: Decimal
    total: Decimal
    currency: str


@strawberry.type
class TaxSplitType:
    """A total split into tax-exclusive subtotal and ISV."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal
    currency: str


@strawberry.type
class ProrationType:
    """Amount due for a number of unbilled days, with its invoice figures."""

    days_billed: int
    daily_rate: Decimal
    ceiling: Decimal
    amount_due: Decimal
    is_override: bool
    invoice_subtotal: Decimal
    invoice_discounts: Decimal
    invoice_tax: Decimal
    currency: str


@strawberry.type
class PaymentSplitEntryType:
    method: PaymentMethodEnum
    amount: Decimal


@strawberry.type
class PaymentSplitType:
    """A payment split that reconciles with its target total."""

    target_total: Decimal
    entries: List[PaymentSplitEntryType]


OrderTotalResult = Annotated[
    Union[OrderBreakdownType, BillingErrorType], strawberry.union("OrderTotalResult")
]
TaxSplitResult = Annotated[Union[TaxSplitType, BillingErrorType], strawberry.union("TaxSplitResult")]
ProrationResultUnion = Annotated[
    Union[ProrationType, BillingErrorType], strawberry.union("ProrationResult")
]
PaymentSplitResult = Annotated[
    Union[PaymentSplitType, BillingErrorType], strawberry.union("PaymentSplitResult")
]


# =========================================================================
# Inputs
# =========================================================================


@strawberry.input
class LineItemInput:
    """A priced line item."""

    unit_price: Decimal
    quantity: int
    discount: Optional[Decimal] = None
    discount_kind: Optional[DiscountKindEnum] = None


@strawberry.input
class PaymentSplitInput:
    """One instrument's share of a payment."""

    method: PaymentMethodEnum
    amount: Decimal


# =========================================================================
# Converters
# =========================================================================


def _currency() -> str:
    return getattr(settings, "BILLING_CURRENCY", "HNL")


def _error(exc: BillingError) -> BillingErrorType:
    """Convert a BillingError into a GraphQL error result."""
    logger.info("Billing calculation rejected (%s): %s", exc.code, exc)
    return BillingErrorType(
        code=exc.code,
        message=str(exc),
        days_available=exc.days_available if isinstance(exc, OutOfRangeError) else None,
    )


def _convert_breakdown(breakdown: OrderBreakdown) -> OrderBreakdownType:
    return OrderBreakdownType(
        subtotal=breakdown.subtotal,
        discounts=breakdown.discounts,
        tax=breakdown.tax,
        total=breakdown.total,
        currency=_currency(),
    )


def _convert_tax_split(split: TaxSplit) -> TaxSplitType:
    return TaxSplitType(
        subtotal=split.subtotal,
        tax=split.tax,
        total=split.total,
        currency=_currency(),
    )


# =========================================================================
# Query
# =========================================================================


@strawberry.type
class BillingQuery:
    @strawberry.field
    def order_total(
        self,
        items: List[LineItemInput],
        apply_tax: bool = False,
        global_discount: Decimal = Decimal("0"),
        global_discount_kind: DiscountKindEnum = DiscountKind.ABSOLUTE,
    ) -> OrderTotalResult:
        """Calculate subtotal, discounts, ISV and total of an order."""
        line_items = [
            LineItem(
                unit_price=item.unit_price,
                quantity=item.quantity,
                discount=item.discount,
                discount_kind=item.discount_kind,
            )
            for item in items
        ]
        try:
            breakdown = order_total(
                line_items,
                apply_tax=apply_tax,
                global_discount=global_discount,
                global_discount_kind=global_discount_kind,
            )
        except BillingError as e:
            return _error(e)
        return _convert_breakdown(breakdown)

    @strawberry.field
    def extract_tax(self, total: Decimal) -> TaxSplitResult:
        """Split a tax-inclusive total into subtotal and ISV."""
        try:
            return _convert_tax_split(extract_tax(total))
        except BillingError as e:
            return _error(e)

    @strawberry.field
    def add_tax(self, subtotal: Decimal) -> TaxSplitResult:
        """Add ISV to a tax-exclusive subtotal."""
        try:
            return _convert_tax_split(add_tax(subtotal))
        except BillingError as e:
            return _error(e)

    @strawberry.field
    def prorate_charge(
        self,
        daily_rate: Decimal,
        days_available: int,
        days_to_bill: int,
        override_amount: Optional[Decimal] = None,
    ) -> ProrationResultUnion:
        """Amount due for billing some of the unbilled days of a daily charge."""
        request = ProrationRequest(
            daily_rate=daily_rate,
            days_available=days_available,
            days_to_bill=days_to_bill,
            override_amount=override_amount,
        )
        try:
            result = prorate(request)
            invoice = prorated_invoice(result)
        except BillingError as e:
            return _error(e)

        return ProrationType(
            days_billed=result.days_billed,
            daily_rate=result.daily_rate,
            ceiling=result.ceiling,
            amount_due=result.amount_due,
            is_override=result.is_override,
            invoice_subtotal=invoice.subtotal,
            invoice_discounts=invoice.discounts,
            invoice_tax=invoice.tax,
            currency=_currency(),
        )

    @strawberry.field
    def reconcile_payments(
        self,
        target_total: Decimal,
        splits: List[PaymentSplitInput],
    ) -> PaymentSplitResult:
        """Check that partial payments add up to the total."""
        entries = [PaymentSplitEntry(method=split.method, amount=split.amount) for split in splits]
        try:
            validated = validate_payment_split(target_total, entries)
        except BillingError as e:
            return _error(e)

        return PaymentSplitType(
            target_total=target_total,
            entries=[PaymentSplitEntryType(method=entry.method, amount=entry.amount) for entry in validated],
        )
