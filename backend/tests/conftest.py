"""Pytest configuration and fixtures."""
from decimal import Decimal

import pytest

from apps.billing.types import DiscountKind, LineItem, PaymentMethod, PaymentSplitEntry


@pytest.fixture
def line_item():
    """Factory for line items."""

    def _create(
        unit_price="100",
        quantity: int = 1,
        discount=None,
        discount_kind: DiscountKind | None = None,
    ) -> LineItem:
        return LineItem(
            unit_price=Decimal(str(unit_price)),
            quantity=quantity,
            discount=Decimal(str(discount)) if discount is not None else None,
            discount_kind=discount_kind,
        )

    return _create


@pytest.fixture
def split():
    """Factory for payment splits given as (method, amount) pairs."""

    def _create(*pairs) -> list[PaymentSplitEntry]:
        return [
            PaymentSplitEntry(method=PaymentMethod(method), amount=Decimal(str(amount)))
            for method, amount in pairs
        ]

    return _create
