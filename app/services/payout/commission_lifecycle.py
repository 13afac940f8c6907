"""
Commission lifecycle handling module.

Moves commission records through
pending -> approved -> paid, pending -> rejected and
pending|approved -> reversed.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.commission_record import CommissionRecord
from app.models.enums import CommissionStatus
from app.repositories.commission_repository import CommissionRepository
from app.services.payout.balance_manager import PayoutBalanceManager
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import InvalidTransitionError, RecordNotFoundError

# action -> (allowed source statuses, target status)
COMMISSION_TRANSITIONS: dict[
    str, tuple[frozenset[CommissionStatus], CommissionStatus]
] = {
    "approve": (frozenset({CommissionStatus.PENDING}), CommissionStatus.APPROVED),
    "reject": (frozenset({CommissionStatus.PENDING}), CommissionStatus.REJECTED),
    "pay": (frozenset({CommissionStatus.APPROVED}), CommissionStatus.PAID),
    "reverse": (
        frozenset({CommissionStatus.PENDING, CommissionStatus.APPROVED}),
        CommissionStatus.REVERSED,
    ),
}


class CommissionLifecycleHandler:
    """
    Handles commission status transitions.

    Does not commit; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize commission lifecycle handler.

        Args:
            session: Database session
        """
        self.session = session
        self.commission_repo = CommissionRepository(session)
        self.balance_manager = PayoutBalanceManager(session)

    async def _lock(self, commission_id: int, action: str) -> CommissionRecord:
        """Lock the record and check the action is allowed from its status."""
        record = await self.commission_repo.get_for_update(commission_id)
        if record is None:
            raise RecordNotFoundError("commission", commission_id)

        sources, _ = COMMISSION_TRANSITIONS[action]
        if CommissionStatus(record.status) not in sources:
            raise InvalidTransitionError(
                "commission", commission_id, action, record.status
            )
        return record

    def _move(self, record: CommissionRecord, action: str) -> str:
        _, target = COMMISSION_TRANSITIONS[action]
        previous = record.status
        record.status = target.value
        return previous

    async def approve(self, commission_id: int) -> CommissionRecord:
        """
        Approve a pending commission and credit the beneficiary.

        Raises:
            RecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is not pending
        """
        record = await self._lock(commission_id, "approve")
        await self.balance_manager.credit_commission(record)
        self._move(record, "approve")
        record.approved_at = utc_now()
        await self.session.flush()

        logger.info(
            "Commission approved",
            extra={
                "commission_id": record.id,
                "affiliate_id": record.affiliate_id,
                "amount": str(record.commission_amount),
            },
        )
        return record

    async def reject(
        self, commission_id: int, reason: str | None = None
    ) -> CommissionRecord:
        """
        Reject a pending commission. No balance effect.

        Raises:
            RecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is not pending
        """
        record = await self._lock(commission_id, "reject")
        self._move(record, "reject")
        record.status_reason = reason
        record.rejected_at = utc_now()
        await self.session.flush()

        logger.info(
            "Commission rejected",
            extra={"commission_id": record.id, "reason": reason},
        )
        return record

    async def pay(self, commission_id: int) -> CommissionRecord:
        """
        Mark an approved commission as paid.

        Bookkeeping only: the money already sits in available balance and
        leaves through withdrawals.

        Raises:
            RecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is not approved
        """
        record = await self._lock(commission_id, "pay")
        self._move(record, "pay")
        record.paid_at = utc_now()
        await self.session.flush()

        logger.info("Commission paid", extra={"commission_id": record.id})
        return record

    async def reverse(
        self, commission_id: int, reason: str | None = None
    ) -> CommissionRecord:
        """
        Reverse a pending or approved commission (refund, chargeback).

        An approved commission is debited back from available balance.

        Raises:
            RecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is paid, rejected or
                already reversed
            InsufficientBalanceError: If the credit was already withdrawn
        """
        record = await self._lock(commission_id, "reverse")
        if record.status == CommissionStatus.APPROVED.value:
            await self.balance_manager.debit_commission(record)

        previous = self._move(record, "reverse")
        record.status_reason = reason
        record.reversed_at = utc_now()
        await self.session.flush()

        logger.info(
            "Commission reversed",
            extra={
                "commission_id": record.id,
                "previous_status": previous,
                "reason": reason,
            },
        )
        return record
