"""
Exception handling utilities.

Defines application error types and categorized exception groups for
proper error handling.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError, OperationalError

from compensation.exceptions import (
    CompensationError,
    CorruptHierarchyError,
    RateStackingError,
    UnknownAffiliateError,
)


class AffiliateNotFoundError(CompensationError):
    """Raised when an affiliate ID or referral code does not resolve."""

    def __init__(self, reference: object) -> None:
        self.reference = reference
        super().__init__(f"Affiliate {reference} not found")


class RecordNotFoundError(CompensationError):
    """Raised when a commission record or withdrawal request is missing."""

    def __init__(self, record_kind: str, record_id: int) -> None:
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(f"{record_kind} {record_id} not found")


class InvalidTransitionError(CompensationError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(
        self,
        record_kind: str,
        record_id: int,
        action: str,
        current_status: str,
    ) -> None:
        self.record_kind = record_kind
        self.record_id = record_id
        self.action = action
        self.current_status = current_status
        super().__init__(
            f"Cannot {action} {record_kind} {record_id} "
            f"in status '{current_status}'"
        )


class InsufficientBalanceError(CompensationError):
    """Raised when a debit exceeds the affiliate's available balance."""

    def __init__(
        self, affiliate_id: int, requested: Decimal, available: Decimal
    ) -> None:
        self.affiliate_id = affiliate_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Affiliate {affiliate_id} requested {requested}, "
            f"only {available} available"
        )


class WithdrawalValidationError(CompensationError):
    """Raised when a withdrawal request breaks withdrawal rules."""


class EnrollmentError(CompensationError):
    """Raised when an affiliate cannot be enrolled."""


# Exception categories based on handling strategy

# Domain rejections - expected outcomes, logged at warning without traceback
DOMAIN_ERRORS = (
    CompensationError,
)

# Must log but can continue - non-critical failures
MUST_LOG = (
    OperationalError,  # Database connectivity errors
)

# Must raise - data integrity or validation issues
MUST_RAISE = (
    IntegrityError,         # Unique or check constraint violated
    CorruptHierarchyError,  # Sponsor links need repair
    RateStackingError,      # Tier ladder misconfigured
    ValueError,             # Validation errors
    TypeError,              # Type errors in critical paths
)


def is_domain_error(exc: Exception) -> bool:
    """
    Check if exception is an expected business rejection.

    Args:
        exc: Exception to check

    Returns:
        True if exception is a compensation domain error
    """
    return isinstance(exc, DOMAIN_ERRORS)


def must_log(exc: Exception) -> bool:
    """
    Check if exception must be logged.

    Args:
        exc: Exception to check

    Returns:
        True if exception must be logged
    """
    return isinstance(exc, MUST_LOG)


def must_raise(exc: Exception) -> bool:
    """
    Check if exception must be raised.

    Args:
        exc: Exception to check

    Returns:
        True if exception must be raised
    """
    return isinstance(exc, MUST_RAISE)


__all__ = [
    "AffiliateNotFoundError",
    "CompensationError",
    "CorruptHierarchyError",
    "EnrollmentError",
    "InsufficientBalanceError",
    "InvalidTransitionError",
    "RateStackingError",
    "RecordNotFoundError",
    "UnknownAffiliateError",
    "WithdrawalValidationError",
    "is_domain_error",
    "must_log",
    "must_raise",
]
