"""Billing value types.

All of these are created fresh per call and never mutated.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from apps.billing.exceptions import InvalidInputError


class DiscountKind(str, Enum):
    """How a discount value is interpreted."""

    PERCENTAGE = "percentage"
    ABSOLUTE = "absolute"


# A discount given without a kind is an absolute amount, not a percentage
DEFAULT_DISCOUNT_KIND = DiscountKind.ABSOLUTE


class PaymentMethod(str, Enum):
    """Payment instruments accepted at the cashier."""

    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class LineItem:
    """A single billed item: unit price times quantity, with an optional discount."""

    unit_price: Decimal
    quantity: int
    discount: Optional[Decimal] = None
    discount_kind: Optional[DiscountKind] = None

    @property
    def effective_discount_kind(self) -> DiscountKind:
        """Discount kind with the absolute default applied."""
        return self.discount_kind or DEFAULT_DISCOUNT_KIND

    @classmethod
    def from_dict(cls, data: Mapping) -> "LineItem":
        """
        Build a line item from an API payload.

        Expects ``unit_price`` and ``quantity``; ``discount`` and
        ``discount_kind`` are optional. Values are validated later, when the
        item is priced.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError(f"Line item must be a mapping, got {type(data).__name__}")
        missing = [key for key in ("unit_price", "quantity") if key not in data]
        if missing:
            raise InvalidInputError(f"Line item is missing required fields: {', '.join(missing)}")

        kind = data.get("discount_kind")
        if kind is not None and not isinstance(kind, DiscountKind):
            try:
                kind = DiscountKind(kind)
            except ValueError as e:
                raise InvalidInputError(f"Unknown discount kind: {kind!r}") from e

        return cls(
            unit_price=data["unit_price"],
            quantity=data["quantity"],
            discount=data.get("discount"),
            discount_kind=kind,
        )


@dataclass(frozen=True)
class OrderBreakdown:
    """Totals of an order: ``total = round(subtotal - discounts) + tax``."""

    subtotal: Decimal
    discounts: Decimal
    tax: Decimal
    total: Decimal

    @property
    def net_subtotal(self) -> Decimal:
        """Subtotal after order-level discounts, before tax."""
        return self.subtotal - self.discounts


@dataclass(frozen=True)
class TaxSplit:
    """A total split into its tax-exclusive subtotal and tax portions."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class ProrationRequest:
    """Request to bill ``days_to_bill`` of ``days_available`` unbilled days."""

    daily_rate: Decimal
    days_available: int
    days_to_bill: int
    override_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class ProrationResult:
    """Amount owed for a prorated daily charge."""

    days_billed: int
    daily_rate: Decimal
    ceiling: Decimal  # days_billed * daily_rate
    amount_due: Decimal
    is_override: bool = False


@dataclass(frozen=True)
class InvoiceAmounts:
    """Fiscal invoice figures derived from a tax-inclusive amount."""

    subtotal: Decimal
    discounts: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class PaymentSplitEntry:
    """One instrument's share of a split payment."""

    method: PaymentMethod
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.method, PaymentMethod):
            try:
                object.__setattr__(self, "method", PaymentMethod(self.method))
            except ValueError as e:
                valid = ", ".join(m.value for m in PaymentMethod)
                raise InvalidInputError(
                    f"Invalid payment method: {self.method!r}. Must be one of: {valid}"
                ) from e
