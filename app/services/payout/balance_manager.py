"""
Payout balance manager.

Applies commission credits and withdrawal debits to affiliate balances.
Every change is a single UPDATE statement; debits are conditional on the
balance covering the amount.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.commission_record import CommissionRecord
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.affiliate_repository import AffiliateRepository
from app.utils.exceptions import InsufficientBalanceError


def _earnings_split(record: CommissionRecord) -> tuple[Decimal, Decimal]:
    """Split a commission into (direct earnings, team earnings)."""
    amount = record.commission_amount
    if record.commission_level == 0:
        return amount, Decimal("0")
    return Decimal("0"), amount


class PayoutBalanceManager:
    """Manages balance operations for commissions and withdrawals."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize payout balance manager.

        Args:
            session: Database session
        """
        self.session = session
        self.affiliate_repo = AffiliateRepository(session)

    async def credit_commission(self, record: CommissionRecord) -> None:
        """
        Credit an approved commission to its beneficiary.

        Adds the amount to available balance and to direct or team earnings
        depending on the commission level.

        Args:
            record: Commission being approved
        """
        direct, team = _earnings_split(record)
        await self.affiliate_repo.credit_balance(
            record.affiliate_id,
            record.commission_amount,
            total_earnings=direct,
            team_earnings=team,
        )

        logger.info(
            "Commission credited",
            extra={
                "commission_id": record.id,
                "affiliate_id": record.affiliate_id,
                "amount": str(record.commission_amount),
                "level": record.commission_level,
            },
        )

    async def debit_commission(self, record: CommissionRecord) -> None:
        """
        Take back a previously credited commission.

        Args:
            record: Approved commission being reversed

        Raises:
            InsufficientBalanceError: If the credit was already withdrawn
        """
        direct, team = _earnings_split(record)
        debited = await self.affiliate_repo.debit_balance(
            record.affiliate_id,
            record.commission_amount,
            total_earnings=direct,
            team_earnings=team,
        )
        if not debited:
            await self._raise_insufficient(
                record.affiliate_id, record.commission_amount
            )

        logger.info(
            "Commission debited",
            extra={
                "commission_id": record.id,
                "affiliate_id": record.affiliate_id,
                "amount": str(record.commission_amount),
            },
        )

    async def debit_withdrawal(self, request: WithdrawalRequest) -> None:
        """
        Debit a completed withdrawal and move it to withdrawn balance.

        Args:
            request: Withdrawal being completed

        Raises:
            InsufficientBalanceError: If available balance is below amount
        """
        debited = await self.affiliate_repo.debit_balance(
            request.affiliate_id,
            request.amount,
            withdrawn=request.amount,
        )
        if not debited:
            await self._raise_insufficient(request.affiliate_id, request.amount)

        logger.info(
            "Balance debited for withdrawal",
            extra={
                "withdrawal_id": request.id,
                "affiliate_id": request.affiliate_id,
                "amount": str(request.amount),
            },
        )

    async def available_balance(self, affiliate_id: int) -> Decimal:
        """Current available balance read from the database."""
        return await self.affiliate_repo.get_available_balance(affiliate_id)

    async def _raise_insufficient(
        self, affiliate_id: int, requested: Decimal
    ) -> None:
        available = await self.available_balance(affiliate_id)
        logger.warning(
            "Insufficient balance for debit",
            extra={
                "affiliate_id": affiliate_id,
                "available": str(available),
                "requested": str(requested),
            },
        )
        raise InsufficientBalanceError(affiliate_id, requested, available)
