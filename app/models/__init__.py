"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.affiliate import Affiliate
from app.models.base import Base
from app.models.commission_record import CommissionRecord
from app.models.enums import (
    AffiliateStatus,
    CommissionStatus,
    CommissionType,
    PaymentMethod,
    Tier,
    WithdrawalStatus,
)
from app.models.withdrawal_request import WithdrawalRequest

__all__ = [
    # Base
    "Base",
    # Enums
    "AffiliateStatus",
    "CommissionStatus",
    "CommissionType",
    "PaymentMethod",
    "Tier",
    "WithdrawalStatus",
    # Models
    "Affiliate",
    "CommissionRecord",
    "WithdrawalRequest",
]
