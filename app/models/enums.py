"""
Model enumerations.

Stored as plain strings in the database.
"""

from enum import Enum

from compensation.types import AffiliateStatus, CommissionType, Tier


class CommissionStatus(str, Enum):
    """Commission record lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"
    REVERSED = "reversed"


class WithdrawalStatus(str, Enum):
    """Withdrawal request lifecycle status."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    """Payout channels for withdrawals."""

    PIX = "pix"
    STRIPE_CONNECT = "stripe_connect"
    BANK_TRANSFER = "bank_transfer"


__all__ = [
    "AffiliateStatus",
    "CommissionStatus",
    "CommissionType",
    "PaymentMethod",
    "Tier",
    "WithdrawalStatus",
]
