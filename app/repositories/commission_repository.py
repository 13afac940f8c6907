"""
Commission record repository.

Data access layer for CommissionRecord model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.commission_record import CommissionRecord
from app.repositories.base import BaseRepository


class CommissionRepository(BaseRepository[CommissionRecord]):
    """Commission record repository with aggregate queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(CommissionRecord, session)

    async def get_by_order(self, order_id: str) -> list[CommissionRecord]:
        """
        Get all records created for one sale, seller first.

        Args:
            order_id: External sale reference

        Returns:
            Records ordered by commission level
        """
        stmt = (
            select(CommissionRecord)
            .where(CommissionRecord.order_id == order_id)
            .order_by(CommissionRecord.commission_level, CommissionRecord.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_affiliate(
        self, affiliate_id: int, status: str | None = None
    ) -> list[CommissionRecord]:
        """Get records credited to an affiliate, optionally by status."""
        filters: dict[str, object] = {"affiliate_id": affiliate_id}
        if status:
            filters["status"] = status
        return await self.find_by(**filters)

    async def totals_by_status(
        self, affiliate_id: int | None = None
    ) -> dict[str, tuple[int, Decimal]]:
        """
        Count and sum commission amounts per status.

        Args:
            affiliate_id: Restrict to one beneficiary (None = all)

        Returns:
            Dict mapping status to (count, amount)
        """
        stmt = select(
            CommissionRecord.status,
            func.count(CommissionRecord.id).label("count"),
            func.coalesce(func.sum(CommissionRecord.commission_amount), 0).label(
                "amount"
            ),
        ).group_by(CommissionRecord.status)

        if affiliate_id is not None:
            stmt = stmt.where(CommissionRecord.affiliate_id == affiliate_id)

        result = await self.session.execute(stmt)
        return {
            row.status: (row.count, Decimal(str(row.amount)))
            for row in result.all()
        }

    async def totals_by_type(self) -> dict[str, tuple[int, Decimal]]:
        """
        Count and sum commission amounts per commission type.

        Returns:
            Dict mapping type to (count, amount)
        """
        stmt = select(
            CommissionRecord.commission_type,
            func.count(CommissionRecord.id).label("count"),
            func.coalesce(func.sum(CommissionRecord.commission_amount), 0).label(
                "amount"
            ),
        ).group_by(CommissionRecord.commission_type)

        result = await self.session.execute(stmt)
        return {
            row.commission_type: (row.count, Decimal(str(row.amount)))
            for row in result.all()
        }
