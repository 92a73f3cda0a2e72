"""ISV (fixed-rate value-added tax) calculations.

``extract_tax`` and ``add_tax`` are not exact inverses at the cent level:
``extract_tax(add_tax(x).total).subtotal`` can differ from ``x`` by a cent.
"""
from decimal import Decimal

from apps.billing.exceptions import InvalidAmountError, NegativeAmountError
from apps.billing.money import TAX_RATE, Numeric, money, to_decimal
from apps.billing.types import TaxSplit


def _non_negative(value: Numeric, label: str) -> Decimal:
    dec = to_decimal(value)
    if not dec.is_finite():
        raise InvalidAmountError(f"{label} must be a finite number: {value!r}")
    if dec < 0:
        raise NegativeAmountError(f"{label} cannot be negative: {value}")
    return dec


def calculate_tax(subtotal: Numeric) -> Decimal:
    """
    ISV owed on a tax-exclusive subtotal.

    >>> calculate_tax(99.99)
    Decimal('15.00')
    """
    return money(_non_negative(subtotal, "Subtotal") * TAX_RATE)


def extract_tax(total_inclusive: Numeric) -> TaxSplit:
    """
    Split a total that already includes ISV into subtotal and tax.

    Used to re-derive the tax-exclusive figures of a legal invoice from a
    previously recorded amount. ``total`` is returned exactly as given,
    never rounded or recomputed from the rounded parts.

    >>> extract_tax(114.99)
    TaxSplit(subtotal=Decimal('99.99'), tax=Decimal('15.00'), total=Decimal('114.99'))
    """
    total = _non_negative(total_inclusive, "Total")
    subtotal = money(total / (1 + TAX_RATE))
    tax = money(total - subtotal)
    return TaxSplit(subtotal=subtotal, tax=tax, total=total)


def add_tax(subtotal: Numeric) -> TaxSplit:
    """
    Add ISV to a tax-exclusive subtotal.

    Tax is computed on the subtotal as given; the returned subtotal and
    total are rounded to cents.
    """
    base = _non_negative(subtotal, "Subtotal")
    tax = calculate_tax(base)
    return TaxSplit(subtotal=money(base), tax=tax, total=money(base + tax))
