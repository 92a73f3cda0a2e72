"""Tests for order aggregation."""
from decimal import Decimal

import pytest

from apps.billing.exceptions import (
    DiscountExceedsBoundError,
    InvalidAmountError,
    InvalidInputError,
    InvalidQuantityError,
)
from apps.billing.money import money
from apps.billing.orders import order_total, sum_item_totals
from apps.billing.types import DiscountKind, OrderBreakdown


class TestSumItemTotals:
    """Tests for sum_item_totals."""

    def test_empty_list_is_zero(self):
        """No items, nothing to pay."""
        assert sum_item_totals([]) == Decimal("0")

    def test_sums_discounted_items(self, line_item):
        """100 * 1 + 50 * 2 - 10% of 100 = 190.00"""
        items = [
            line_item(100, 1),
            line_item(50, 2, discount=10, discount_kind=DiscountKind.PERCENTAGE),
        ]
        assert sum_item_totals(items) == Decimal("190.00")

    def test_accepts_payload_mappings(self):
        """Mappings are converted into line items."""
        items = [
            {"unit_price": 100, "quantity": 1},
            {"unit_price": 50, "quantity": 2},
        ]
        assert sum_item_totals(items) == Decimal("200.00")

    def test_many_small_items_do_not_drift(self, line_item):
        """Three hundred items at 0.10 add up to exactly 30.00."""
        items = [line_item("0.10", 1) for _ in range(300)]
        assert sum_item_totals(items) == Decimal("30.00")

    def test_accepts_any_iterable(self, line_item):
        """Tuples and generators work as well as lists."""
        assert sum_item_totals((line_item(10, 1), line_item(5, 1))) == Decimal("15.00")
        assert sum_item_totals(line_item(10, 1) for _ in range(3)) == Decimal("30.00")

    @pytest.mark.parametrize("items", [None, "items", 42, {"unit_price": 1, "quantity": 1}])
    def test_non_list_rejected(self, items):
        """Anything that is not a list of items is a structural error."""
        with pytest.raises(InvalidInputError):
            sum_item_totals(items)

    def test_foreign_element_rejected(self, line_item):
        """Elements must be line items or mappings."""
        with pytest.raises(InvalidInputError):
            sum_item_totals([line_item(10, 1), 10])

    def test_item_errors_propagate(self, line_item):
        """Validation errors of a single item reach the caller unchanged."""
        with pytest.raises(InvalidQuantityError):
            sum_item_totals([line_item(10, 1), line_item(10, -1)])


class TestOrderTotal:
    """Tests for order_total."""

    def test_tax_on_discounted_subtotal(self, line_item):
        """200 - 10% = 180, + 15% ISV = 207."""
        breakdown = order_total(
            [line_item(100, 2)],
            apply_tax=True,
            global_discount=10,
            global_discount_kind=DiscountKind.PERCENTAGE,
        )

        assert breakdown == OrderBreakdown(
            subtotal=Decimal("200.00"),
            discounts=Decimal("20.00"),
            tax=Decimal("27.00"),
            total=Decimal("207.00"),
        )
        assert breakdown.net_subtotal == Decimal("180.00")

    def test_tax_without_discount(self, line_item):
        """200 + 15% ISV = 230."""
        breakdown = order_total([line_item(100, 2)], apply_tax=True)

        assert breakdown.subtotal == Decimal("200.00")
        assert breakdown.discounts == Decimal("0")
        assert breakdown.tax == Decimal("30.00")
        assert breakdown.total == Decimal("230.00")

    def test_no_tax_by_default(self, line_item):
        """Tax is zero unless requested."""
        breakdown = order_total([line_item(100, 2)])

        assert breakdown.tax == Decimal("0")
        assert breakdown.total == Decimal("200.00")

    def test_absolute_global_discount(self, line_item):
        """200 - 50 = 150, + 22.50 ISV = 172.50."""
        breakdown = order_total([line_item(100, 2)], apply_tax=True, global_discount=50)

        assert breakdown.discounts == Decimal("50.00")
        assert breakdown.tax == Decimal("22.50")
        assert breakdown.total == Decimal("172.50")

    def test_tax_rounds_half_up(self, line_item):
        """99.99 * 0.15 = 14.9985 -> 15.00."""
        breakdown = order_total([line_item("99.99", 1)], apply_tax=True)

        assert breakdown.tax == Decimal("15.00")
        assert breakdown.total == Decimal("114.99")

    def test_empty_order(self):
        """An empty order totals zero, even with tax."""
        breakdown = order_total([], apply_tax=True)

        assert breakdown.total == Decimal("0")

    @pytest.mark.parametrize("apply_tax", [True, False])
    @pytest.mark.parametrize(
        "discount,kind",
        [(0, DiscountKind.ABSOLUTE), ("33.33", DiscountKind.ABSOLUTE), (12.5, DiscountKind.PERCENTAGE)],
    )
    def test_breakdown_invariant(self, line_item, apply_tax, discount, kind):
        """total == round(subtotal - discounts) + tax, and tax is 0 unless requested."""
        items = [line_item("19.99", 3), line_item("7.25", 4, discount=5), line_item("120", 1)]

        breakdown = order_total(items, apply_tax, discount, kind)

        assert breakdown.total == money(breakdown.subtotal - breakdown.discounts) + breakdown.tax
        if not apply_tax:
            assert breakdown.tax == 0

    def test_global_discount_above_subtotal_rejected(self, line_item):
        """An order discount larger than the order fails."""
        with pytest.raises(DiscountExceedsBoundError):
            order_total([line_item(100, 1)], global_discount=150)

    def test_non_finite_global_discount_rejected(self, line_item):
        """NaN order discounts are invalid amounts."""
        with pytest.raises(InvalidAmountError):
            order_total([line_item(100, 1)], global_discount=float("nan"))

    def test_idempotent(self, line_item):
        """The same order gives the same breakdown every time."""
        items = [line_item("10.555", 3), line_item(5, 2, discount=1)]

        assert order_total(items, True, 10, DiscountKind.PERCENTAGE) == order_total(
            items, True, 10, DiscountKind.PERCENTAGE
        )
