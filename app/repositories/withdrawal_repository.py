"""
Withdrawal request repository.

Data access layer for WithdrawalRequest model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import WithdrawalStatus
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[WithdrawalRequest]):
    """Withdrawal request repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal repository."""
        super().__init__(WithdrawalRequest, session)

    async def pending_total(self, affiliate_id: int) -> Decimal:
        """
        Sum of amounts of an affiliate's pending withdrawal requests.

        Args:
            affiliate_id: Affiliate ID

        Returns:
            Total pending amount (0 if none)
        """
        stmt = select(
            func.coalesce(func.sum(WithdrawalRequest.amount), 0)
        ).where(
            WithdrawalRequest.affiliate_id == affiliate_id,
            WithdrawalRequest.status == WithdrawalStatus.PENDING.value,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def totals_by_status(self) -> dict[str, tuple[int, Decimal]]:
        """
        Count and sum withdrawal amounts per status.

        Returns:
            Dict mapping status to (count, amount)
        """
        stmt = select(
            WithdrawalRequest.status,
            func.count(WithdrawalRequest.id).label("count"),
            func.coalesce(func.sum(WithdrawalRequest.amount), 0).label("amount"),
        ).group_by(WithdrawalRequest.status)

        result = await self.session.execute(stmt)
        return {
            row.status: (row.count, Decimal(str(row.amount)))
            for row in result.all()
        }
