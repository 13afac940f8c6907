"""
Compensation statistics module.

Read-only queries for admin dashboards: commission totals, tier
distribution, hierarchy membership, affiliate summaries and leaderboards.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import UPLINE_SNAPSHOT_DEPTH
from app.models.affiliate import Affiliate
from app.models.enums import CommissionStatus, CommissionType, Tier, WithdrawalStatus
from app.repositories.affiliate_repository import AffiliateRepository
from app.repositories.commission_repository import CommissionRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.utils.datetime_utils import as_utc
from app.utils.exceptions import AffiliateNotFoundError
from compensation import HierarchyResolver, TierClassifier, normalize_tier
from compensation.utils.money import round_money


def _totals(
    keys: list[str], rows: dict[str, tuple[int, Decimal]]
) -> dict[str, dict[str, Any]]:
    """Fill every key, defaulting to zero count and amount."""
    totals = {}
    for key in keys:
        count, amount = rows.get(key, (0, Decimal("0")))
        totals[key] = {"count": count, "amount": round_money(amount)}
    return totals


class CompensationStatistics:
    """Compensation reporting queries."""

    def __init__(
        self,
        session: AsyncSession,
        classifier: TierClassifier | None = None,
    ) -> None:
        """Initialize statistics."""
        self.session = session
        self.classifier = classifier or TierClassifier()
        self.affiliate_repo = AffiliateRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)

    async def commission_totals_by_status(self) -> dict[str, dict[str, Any]]:
        """
        Commission count and amount per status.

        Returns:
            {status: {"count": int, "amount": Decimal}} for every status
        """
        rows = await self.commission_repo.totals_by_status()
        return _totals([s.value for s in CommissionStatus], rows)

    async def commission_totals_by_type(self) -> dict[str, dict[str, Any]]:
        """
        Commission count and amount per commission type.

        Returns:
            {type: {"count": int, "amount": Decimal}} for every type
        """
        rows = await self.commission_repo.totals_by_type()
        return _totals([t.value for t in CommissionType], rows)

    async def withdrawal_totals_by_status(self) -> dict[str, dict[str, Any]]:
        """Withdrawal count and amount per status."""
        rows = await self.withdrawal_repo.totals_by_status()
        return _totals([s.value for s in WithdrawalStatus], rows)

    async def tier_distribution(self) -> dict[str, int]:
        """
        Affiliate count per tier.

        Legacy tier names are folded into their tier; all four tiers are
        always present.
        """
        distribution = {tier.value: 0 for tier in Tier}
        for stored, count in (await self.affiliate_repo.tier_counts()).items():
            distribution[normalize_tier(stored).value] += count
        return distribution

    async def _require(self, affiliate_id: int) -> Affiliate:
        affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError(affiliate_id)
        return affiliate

    async def upline(
        self, affiliate_id: int, depth: int = UPLINE_SNAPSHOT_DEPTH
    ) -> list[Affiliate]:
        """
        Sponsor chain of an affiliate, nearest first.

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
            CorruptHierarchyError: If the chain contains a cycle
        """
        snapshot = await self.affiliate_repo.get_upline_snapshot(
            affiliate_id, depth=depth
        )
        if not snapshot:
            raise AffiliateNotFoundError(affiliate_id)
        return HierarchyResolver(snapshot).upline_of(affiliate_id, max_depth=depth)

    async def downline(self, affiliate_id: int) -> list[Affiliate]:
        """Direct referrals of an affiliate, ordered by ID."""
        await self._require(affiliate_id)
        return await self.affiliate_repo.find_by(sponsor_id=affiliate_id)

    async def team(
        self, affiliate_id: int, max_depth: int | None = None
    ) -> list[tuple[Affiliate, int]]:
        """
        Multi-level downline with depth (1 = direct referral).

        Loads the whole affiliate set once; traversal happens in memory.
        """
        await self._require(affiliate_id)
        resolver = HierarchyResolver(await self.affiliate_repo.get_all())
        return resolver.team_of(affiliate_id, max_depth=max_depth)

    async def affiliate_summary(self, affiliate_id: int) -> dict[str, Any]:
        """
        Earnings, balances and tier progress for one affiliate.

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
        """
        affiliate = await self._require(affiliate_id)
        classification = self.classifier.classify_affiliate(affiliate)
        commissions = _totals(
            [s.value for s in CommissionStatus],
            await self.commission_repo.totals_by_status(affiliate_id),
        )
        pending_withdrawals = await self.withdrawal_repo.pending_total(affiliate_id)

        return {
            "affiliate_id": affiliate.id,
            "referral_code": affiliate.referral_code,
            "status": affiliate.status,
            "member_since": as_utc(affiliate.created_at),
            "approved_at": as_utc(affiliate.approved_at),
            "tier": classification.tier.value,
            "commission_rate": classification.rate,
            "points": self.classifier.points_for(affiliate),
            "next_tier": (
                classification.next_tier.value
                if classification.next_tier
                else None
            ),
            "progress_to_next": classification.progress_to_next,
            "direct_referrals": affiliate.direct_referrals_count,
            "pending_commissions": commissions[CommissionStatus.PENDING.value]["amount"],
            "approved_commissions": commissions[CommissionStatus.APPROVED.value]["amount"],
            "paid_commissions": commissions[CommissionStatus.PAID.value]["amount"],
            "total_earnings": affiliate.total_earnings,
            "team_earnings": affiliate.team_earnings,
            "available_balance": affiliate.available_balance,
            "pending_withdrawals": round_money(pending_withdrawals),
            "withdrawn_balance": affiliate.withdrawn_balance,
        }

    async def top_earners(self, limit: int = 10) -> list[dict[str, Any]]:
        """
        Leaderboard by direct plus team earnings.

        Returns:
            List of {"rank", "affiliate_id", "referral_code", "tier",
            "total_earnings"} dicts
        """
        affiliates = await self.affiliate_repo.top_earners(limit)
        return [
            {
                "rank": rank,
                "affiliate_id": affiliate.id,
                "referral_code": affiliate.referral_code,
                "tier": affiliate.tier,
                "total_earnings": affiliate.total_earnings + affiliate.team_earnings,
            }
            for rank, affiliate in enumerate(affiliates, start=1)
        ]
