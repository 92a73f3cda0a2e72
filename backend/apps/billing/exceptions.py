"""Billing engine errors.

Every public billing operation either returns its result or raises exactly
one of these. Callers decide how to surface them; the engine never clamps
or retries.
"""


class BillingError(Exception):
    """Base exception for billing calculation errors."""

    code = "BILLING_ERROR"


class InvalidAmountError(BillingError):
    """Raised when a monetary value is negative, non-finite or otherwise out of domain."""

    code = "INVALID_AMOUNT"


class InvalidQuantityError(BillingError):
    """Raised when a quantity is negative, fractional, non-finite or above the maximum."""

    code = "INVALID_QUANTITY"


class DiscountExceedsBoundError(BillingError):
    """Raised when a percentage discount exceeds 100 or an absolute discount exceeds its base."""

    code = "DISCOUNT_EXCEEDS_BOUND"


class NegativeAmountError(BillingError):
    """Raised when a value that must be >= 0 is negative."""

    code = "NEGATIVE_AMOUNT"


class InvalidInputError(BillingError):
    """Raised when a structural argument does not have the expected shape."""

    code = "INVALID_INPUT"


class OutOfRangeError(BillingError):
    """Raised when the number of days to bill is outside the billable window."""

    code = "OUT_OF_RANGE"

    def __init__(self, message: str, days_available: int | None = None):
        super().__init__(message)
        self.days_available = days_available


class OverrideExceedsCeilingError(BillingError):
    """Raised when a custom amount is larger than the computed maximum."""

    code = "OVERRIDE_EXCEEDS_CEILING"


class EmptySplitError(BillingError):
    """Raised when a payment split has no entries."""

    code = "EMPTY_SPLIT"


class SplitMismatchError(BillingError):
    """Raised when split amounts do not add up to the target total."""

    code = "SPLIT_MISMATCH"
