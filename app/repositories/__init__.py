"""Data access layer."""

from app.repositories.affiliate_repository import AffiliateRepository
from app.repositories.base import BaseRepository
from app.repositories.commission_repository import CommissionRepository
from app.repositories.withdrawal_repository import WithdrawalRepository

__all__ = [
    "AffiliateRepository",
    "BaseRepository",
    "CommissionRepository",
    "WithdrawalRepository",
]
