"""
Affiliate repository.

Data access layer for Affiliate model.
"""

from decimal import Decimal

from sqlalchemy import Integer, func, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.config.business_constants import UPLINE_SNAPSHOT_DEPTH
from app.models.affiliate import Affiliate
from app.repositories.base import BaseRepository


class AffiliateRepository(BaseRepository[Affiliate]):
    """Affiliate repository with hierarchy and balance queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate repository."""
        super().__init__(Affiliate, session)

    async def get_by_referral_code(self, code: str) -> Affiliate | None:
        """Get affiliate by referral code (case-insensitive)."""
        return await self.get_by(referral_code=code.strip().upper())

    async def get_by_user_id(self, user_id: str) -> Affiliate | None:
        """Get affiliate by host application user reference."""
        return await self.get_by(user_id=user_id)

    async def get_upline_snapshot(
        self, affiliate_id: int, depth: int = UPLINE_SNAPSHOT_DEPTH
    ) -> list[Affiliate]:
        """
        Load an affiliate together with its sponsor chain.

        Rows already in the session are overwritten with current values so
        tiers are classified from the latest counters and volumes.

        Uses a recursive CTE walking ``sponsor_id`` up to ``depth`` links.
        The depth bound also stops the walk on corrupt cyclic links; cycle
        detection itself is left to the hierarchy resolver.

        Args:
            affiliate_id: Starting affiliate
            depth: Maximum number of ancestors to load

        Returns:
            Affiliates in the chain (starting affiliate included), unordered.
            Empty list if the affiliate does not exist.
        """
        chain = (
            select(
                Affiliate.id.label("id"),
                Affiliate.sponsor_id.label("sponsor_id"),
                literal(0, Integer).label("level"),
            )
            .where(Affiliate.id == affiliate_id)
            .cte(name="upline_chain", recursive=True)
        )

        previous = chain.alias("previous")
        sponsor = aliased(Affiliate, name="sponsor")
        chain = chain.union_all(
            select(
                sponsor.id,
                sponsor.sponsor_id,
                previous.c.level + 1,
            ).where(
                sponsor.id == previous.c.sponsor_id,
                previous.c.level < depth,
            )
        )

        stmt = (
            select(Affiliate)
            .where(Affiliate.id.in_(select(chain.c.id)))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_available_balance(self, affiliate_id: int) -> Decimal:
        """Read the current available balance straight from the database."""
        stmt = select(Affiliate.available_balance).where(
            Affiliate.id == affiliate_id
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def get_all(self) -> list[Affiliate]:
        """Load every affiliate, ordered by ID."""
        return await self.find_all()

    async def credit_balance(
        self,
        affiliate_id: int,
        amount: Decimal,
        total_earnings: Decimal = Decimal("0"),
        team_earnings: Decimal = Decimal("0"),
    ) -> None:
        """
        Atomically credit available balance and earnings counters.

        Args:
            affiliate_id: Affiliate ID
            amount: Amount added to available balance
            total_earnings: Amount added to direct earnings
            team_earnings: Amount added to downline earnings
        """
        stmt = (
            update(Affiliate)
            .where(Affiliate.id == affiliate_id)
            .values(
                available_balance=Affiliate.available_balance + amount,
                total_earnings=Affiliate.total_earnings + total_earnings,
                team_earnings=Affiliate.team_earnings + team_earnings,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def debit_balance(
        self,
        affiliate_id: int,
        amount: Decimal,
        total_earnings: Decimal = Decimal("0"),
        team_earnings: Decimal = Decimal("0"),
        withdrawn: Decimal = Decimal("0"),
    ) -> bool:
        """
        Atomically debit available balance if it covers the amount.

        The balance check is part of the UPDATE's WHERE clause, so two
        concurrent debits can never drive the balance negative.

        Args:
            affiliate_id: Affiliate ID
            amount: Amount removed from available balance
            total_earnings: Amount removed from direct earnings
            team_earnings: Amount removed from downline earnings
            withdrawn: Amount added to withdrawn balance

        Returns:
            True if debited, False if the balance was insufficient
        """
        stmt = (
            update(Affiliate)
            .where(
                Affiliate.id == affiliate_id,
                Affiliate.available_balance >= amount,
            )
            .values(
                available_balance=Affiliate.available_balance - amount,
                total_earnings=Affiliate.total_earnings - total_earnings,
                team_earnings=Affiliate.team_earnings - team_earnings,
                withdrawn_balance=Affiliate.withdrawn_balance + withdrawn,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def add_sales_volume(
        self,
        affiliate_id: int,
        direct: Decimal = Decimal("0"),
        team: Decimal = Decimal("0"),
    ) -> None:
        """Atomically add to direct and team sales volume."""
        stmt = (
            update(Affiliate)
            .where(Affiliate.id == affiliate_id)
            .values(
                direct_sales_volume=Affiliate.direct_sales_volume + direct,
                team_sales_volume=Affiliate.team_sales_volume + team,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def increment_referrals(
        self, affiliate_id: int, delta: int = 1
    ) -> None:
        """Atomically adjust the direct referral counter."""
        stmt = (
            update(Affiliate)
            .where(Affiliate.id == affiliate_id)
            .values(
                direct_referrals_count=Affiliate.direct_referrals_count + delta
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def count_referrals(self, sponsor_id: int) -> int:
        """Count affiliates directly sponsored by an affiliate."""
        return await self.count(sponsor_id=sponsor_id)

    async def tier_counts(self) -> dict[str, int]:
        """
        Count affiliates per tier in a single GROUP BY query.

        Returns:
            Dict mapping stored tier name to count
        """
        stmt = (
            select(Affiliate.tier, func.count(Affiliate.id).label("count"))
            .group_by(Affiliate.tier)
        )
        result = await self.session.execute(stmt)
        return {row.tier: row.count for row in result.all()}

    async def top_earners(self, limit: int = 10) -> list[Affiliate]:
        """Get affiliates ordered by direct plus team earnings."""
        stmt = (
            select(Affiliate)
            .order_by(
                (Affiliate.total_earnings + Affiliate.team_earnings).desc(),
                Affiliate.id,
            )
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
