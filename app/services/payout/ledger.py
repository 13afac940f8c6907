"""
Payout ledger.

Single entry point for commission and withdrawal state transitions. Each
public method is one transaction: committed on success, rolled back with
no effect on any error.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import Settings
from app.models.commission_record import CommissionRecord
from app.models.enums import CommissionStatus, PaymentMethod
from app.models.withdrawal_request import WithdrawalRequest
from app.services.base_service import BaseService, transaction
from app.services.payout.commission_lifecycle import CommissionLifecycleHandler
from app.services.payout.withdrawal_lifecycle import WithdrawalLifecycleHandler


class PayoutLedger(BaseService):
    """Tracks commissions and withdrawals through their lifecycles."""

    def __init__(
        self, session: AsyncSession, config: Settings | None = None
    ) -> None:
        super().__init__(session)
        self.commissions = CommissionLifecycleHandler(session)
        self.withdrawals = WithdrawalLifecycleHandler(session, config)

    @transaction
    async def approve_commission(self, commission_id: int) -> CommissionRecord:
        """Approve a pending commission, crediting available balance."""
        return await self.commissions.approve(commission_id)

    @transaction
    async def reject_commission(
        self, commission_id: int, reason: str | None = None
    ) -> CommissionRecord:
        """Reject a pending commission."""
        return await self.commissions.reject(commission_id, reason)

    @transaction
    async def pay_commission(self, commission_id: int) -> CommissionRecord:
        """Mark an approved commission as paid."""
        return await self.commissions.pay(commission_id)

    @transaction
    async def reverse_commission(
        self, commission_id: int, reason: str | None = None
    ) -> CommissionRecord:
        """Reverse a pending or approved commission."""
        return await self.commissions.reverse(commission_id, reason)

    @transaction
    async def approve_order(self, order_id: str) -> list[CommissionRecord]:
        """
        Approve every pending commission of one order.

        Records in other statuses are left as they are.
        """
        records = await self.commissions.commission_repo.get_by_order(order_id)
        approved = []
        for record in records:
            if record.status == CommissionStatus.PENDING.value:
                approved.append(await self.commissions.approve(record.id))
        self.logger.info(
            "Order commissions approved",
            extra={"order_id": order_id, "approved": len(approved)},
        )
        return approved

    @transaction
    async def request_withdrawal(
        self,
        affiliate_id: int,
        amount: Decimal,
        payment_method: PaymentMethod | str,
    ) -> WithdrawalRequest:
        """Create a pending withdrawal request."""
        return await self.withdrawals.request(
            affiliate_id, amount, payment_method
        )

    @transaction
    async def complete_withdrawal(
        self, withdrawal_id: int, processed_by: str | None = None
    ) -> WithdrawalRequest:
        """Complete a pending withdrawal, debiting available balance."""
        return await self.withdrawals.complete(withdrawal_id, processed_by)

    @transaction
    async def reject_withdrawal(
        self,
        withdrawal_id: int,
        reason: str | None = None,
        processed_by: str | None = None,
    ) -> WithdrawalRequest:
        """Reject a pending withdrawal."""
        return await self.withdrawals.reject(withdrawal_id, reason, processed_by)
