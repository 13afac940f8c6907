"""
Payout services package.

- balance_manager: atomic balance credits and conditional debits
- commission_lifecycle: commission status transitions
- withdrawal_lifecycle: withdrawal request creation, completion, rejection
- ledger: transactional facade over both lifecycles
"""

from app.services.payout.balance_manager import PayoutBalanceManager
from app.services.payout.commission_lifecycle import (
    COMMISSION_TRANSITIONS,
    CommissionLifecycleHandler,
)
from app.services.payout.ledger import PayoutLedger
from app.services.payout.withdrawal_lifecycle import WithdrawalLifecycleHandler


__all__ = [
    "COMMISSION_TRANSITIONS",
    "CommissionLifecycleHandler",
    "PayoutBalanceManager",
    "PayoutLedger",
    "WithdrawalLifecycleHandler",
]
