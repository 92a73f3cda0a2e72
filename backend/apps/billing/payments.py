"""Reconciliation of a total split across several payment instruments."""
import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from apps.billing.exceptions import EmptySplitError, InvalidAmountError, InvalidInputError, SplitMismatchError
from apps.billing.money import SPLIT_TOLERANCE, Numeric, money, to_decimal
from apps.billing.types import PaymentMethod, PaymentSplitEntry

logger = logging.getLogger(__name__)


def parse_payment_split(raw: Iterable[Mapping]) -> list[PaymentSplitEntry]:
    """
    Convert ``[{"method": "cash", "amount": 100}, ...]`` into split entries.

    Amounts are converted but not validated here; see
    ``validate_payment_split``.

    Raises:
        InvalidInputError: If an entry is malformed or names an unknown method
    """
    if raw is None or isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise InvalidInputError(f"Payment split must be a list, got {type(raw).__name__}")

    entries = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping) or "method" not in entry or "amount" not in entry:
            raise InvalidInputError(f"Payment split entry {index} needs a method and an amount: {entry!r}")
        try:
            method = PaymentMethod(entry["method"])
        except ValueError as e:
            valid = ", ".join(m.value for m in PaymentMethod)
            raise InvalidInputError(
                f"Invalid payment method: {entry['method']!r}. Must be one of: {valid}"
            ) from e
        try:
            amount = to_decimal(entry["amount"])
        except InvalidAmountError as e:
            raise InvalidInputError(f"Payment split entry {index} has no numeric amount: {entry!r}") from e
        entries.append(PaymentSplitEntry(method=method, amount=amount))
    return entries


def validate_payment_split(
    target_total: Numeric,
    splits: Sequence[PaymentSplitEntry | Mapping],
) -> Sequence[PaymentSplitEntry | Mapping]:
    """
    Check that a split payment accounts for ``target_total``.

    Checks run in order: the split is not empty, the target and every
    amount are positive finite numbers, and the amounts add up to the
    target within one cent.
    Entries may be split entries or mappings as accepted by
    ``parse_payment_split``.

    Returns:
        The split, unchanged

    Raises:
        InvalidAmountError: If the target or any amount is not positive and finite
        EmptySplitError: If there are no entries
        InvalidInputError: If an entry is not a payment or names an unknown method
        SplitMismatchError: If the sum is more than SPLIT_TOLERANCE away from
            the target
    """
    if not splits:
        raise EmptySplitError("At least one payment is required")

    target = to_decimal(target_total)
    if not target.is_finite() or target <= 0:
        raise InvalidAmountError(f"Target total must be a number greater than 0: {target_total!r}")

    paid = Decimal("0")
    for index, entry in enumerate(splits):
        if isinstance(entry, Mapping):
            entry = parse_payment_split([entry])[0]
        elif not isinstance(entry, PaymentSplitEntry):
            raise InvalidInputError(f"Payment split entry {index} is not a payment: {entry!r}")
        amount = to_decimal(entry.amount)
        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError(
                f"Every partial payment must be a number greater than 0: {entry.method.value} {entry.amount!r}"
            )
        paid += amount

    if abs(paid - target) > SPLIT_TOLERANCE:
        logger.warning("Payment split of %s does not match total %s", money(paid), money(target))
        raise SplitMismatchError(
            f"Partial payments add up to {money(paid)} but the total is {money(target)}"
        )

    return splits
