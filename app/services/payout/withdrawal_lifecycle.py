"""
Withdrawal lifecycle handling module.

Handles withdrawal request creation, completion and rejection.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import Settings, settings as default_settings
from app.models.enums import AffiliateStatus, PaymentMethod, WithdrawalStatus
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.affiliate_repository import AffiliateRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.payout.balance_manager import PayoutBalanceManager
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AffiliateNotFoundError,
    InsufficientBalanceError,
    InvalidTransitionError,
    RecordNotFoundError,
    WithdrawalValidationError,
)
from compensation.utils.money import percent_of, round_money, to_decimal


class WithdrawalLifecycleHandler:
    """
    Handles withdrawal lifecycle operations.

    Does not commit; the caller owns the transaction.
    """

    def __init__(
        self, session: AsyncSession, config: Settings | None = None
    ) -> None:
        """
        Initialize withdrawal lifecycle handler.

        Args:
            session: Database session
            config: Settings providing withdrawal minimum and fee
        """
        self.session = session
        self.config = config or default_settings
        self.affiliate_repo = AffiliateRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.balance_manager = PayoutBalanceManager(session)

    def calculate_fee(self, amount: Decimal) -> tuple[Decimal, Decimal]:
        """
        Calculate withdrawal fee and net amount.

        Returns:
            Tuple of (fee, net_amount)
        """
        fee = percent_of(amount, self.config.withdrawal_fee_percent)
        return fee, round_money(amount - fee)

    async def request(
        self,
        affiliate_id: int,
        amount: Decimal,
        payment_method: PaymentMethod | str,
    ) -> WithdrawalRequest:
        """
        Create a pending withdrawal request.

        Nothing is debited here. The amount must fit in the available
        balance minus the affiliate's other pending requests.

        Args:
            affiliate_id: Requesting affiliate
            amount: Gross amount
            payment_method: pix, stripe_connect or bank_transfer

        Returns:
            Created withdrawal request

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
            WithdrawalValidationError: If the affiliate is not approved, the
                amount is below the minimum or the method is unknown
            InsufficientBalanceError: If the amount exceeds what is available
        """
        amount = round_money(to_decimal(amount))

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise WithdrawalValidationError(
                f"Unknown payment method: {payment_method}"
            ) from None

        affiliate = await self.affiliate_repo.get_for_update(affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError(affiliate_id)

        if affiliate.status != AffiliateStatus.APPROVED.value:
            raise WithdrawalValidationError(
                f"Affiliate {affiliate_id} is {affiliate.status}, "
                f"only approved affiliates may withdraw"
            )

        minimum = self.config.min_withdrawal_amount
        if amount <= 0 or amount < minimum:
            raise WithdrawalValidationError(
                f"Minimum withdrawal is {minimum}, requested {amount}"
            )

        pending = await self.withdrawal_repo.pending_total(affiliate_id)
        available = affiliate.available_balance - pending
        if amount > available:
            logger.warning(
                "Withdrawal request exceeds available balance",
                extra={
                    "affiliate_id": affiliate_id,
                    "requested": str(amount),
                    "available_balance": str(affiliate.available_balance),
                    "pending_withdrawals": str(pending),
                },
            )
            raise InsufficientBalanceError(affiliate_id, amount, available)

        fee, net_amount = self.calculate_fee(amount)
        if fee >= amount:
            raise WithdrawalValidationError(
                f"Fee {fee} leaves nothing of {amount}"
            )

        request = await self.withdrawal_repo.create(
            affiliate_id=affiliate_id,
            amount=amount,
            fee=fee,
            net_amount=net_amount,
            payment_method=method.value,
            status=WithdrawalStatus.PENDING.value,
        )

        logger.info(
            "Withdrawal requested",
            extra={
                "withdrawal_id": request.id,
                "affiliate_id": affiliate_id,
                "amount": str(amount),
                "fee": str(fee),
                "payment_method": method.value,
            },
        )
        return request

    async def _lock_pending(
        self, withdrawal_id: int, action: str
    ) -> WithdrawalRequest:
        request = await self.withdrawal_repo.get_for_update(withdrawal_id)
        if request is None:
            raise RecordNotFoundError("withdrawal", withdrawal_id)
        if request.status != WithdrawalStatus.PENDING.value:
            raise InvalidTransitionError(
                "withdrawal", withdrawal_id, action, request.status
            )
        return request

    async def complete(
        self, withdrawal_id: int, processed_by: str | None = None
    ) -> WithdrawalRequest:
        """
        Complete a pending withdrawal, debiting available balance.

        Raises:
            RecordNotFoundError: If the request does not exist
            InvalidTransitionError: If the request is not pending
            InsufficientBalanceError: If available balance is below amount
        """
        request = await self._lock_pending(withdrawal_id, "complete")
        await self.balance_manager.debit_withdrawal(request)

        request.status = WithdrawalStatus.COMPLETED.value
        request.processed_by = processed_by
        request.processed_at = utc_now()
        await self.session.flush()

        logger.info(
            "Withdrawal completed",
            extra={
                "withdrawal_id": request.id,
                "affiliate_id": request.affiliate_id,
                "amount": str(request.amount),
                "processed_by": processed_by,
            },
        )
        return request

    async def reject(
        self,
        withdrawal_id: int,
        reason: str | None = None,
        processed_by: str | None = None,
    ) -> WithdrawalRequest:
        """
        Reject a pending withdrawal. No balance effect.

        Raises:
            RecordNotFoundError: If the request does not exist
            InvalidTransitionError: If the request is not pending
        """
        request = await self._lock_pending(withdrawal_id, "reject")

        request.status = WithdrawalStatus.REJECTED.value
        request.rejection_reason = reason
        request.processed_by = processed_by
        request.processed_at = utc_now()
        await self.session.flush()

        logger.info(
            "Withdrawal rejected",
            extra={
                "withdrawal_id": request.id,
                "affiliate_id": request.affiliate_id,
                "reason": reason,
            },
        )
        return request
