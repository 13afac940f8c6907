"""
Structure maintenance.

Recounts direct referrals from sponsor links, re-derives tiers and reports
on the health of the sponsor tree.
"""

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.affiliate_repository import AffiliateRepository
from app.services.affiliate.tier_sync import TierSynchronizer
from app.services.base_service import BaseService, transaction
from compensation import HierarchyResolver, TierClassifier


class StructureReport(BaseModel):
    """Outcome of a structure repair run."""

    total_affiliates: int = 0
    with_sponsor: int = 0
    orphans: int = 0
    referral_counts_fixed: int = 0
    tiers_changed: int = 0
    cycle_members: list[int] = Field(default_factory=list)
    dangling_sponsor_ids: list[int] = Field(default_factory=list)
    health_percent: int = 100


class StructureMaintenanceService(BaseService):
    """Repairs derived affiliate fields."""

    def __init__(
        self,
        session: AsyncSession,
        classifier: TierClassifier | None = None,
    ) -> None:
        super().__init__(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.tier_sync = TierSynchronizer(classifier)

    @transaction
    async def repair(self) -> StructureReport:
        """
        Recount referrals, re-derive tiers and report tree health.

        Cycles are reported, not broken: deciding which link is wrong needs
        a human.

        Returns:
            StructureReport
        """
        affiliates = await self.affiliate_repo.get_all()
        resolver = HierarchyResolver(affiliates)
        report = StructureReport(total_affiliates=len(affiliates))

        for affiliate in affiliates:
            if affiliate.sponsor_id is not None:
                report.with_sponsor += 1
                if affiliate.sponsor_id not in resolver:
                    report.dangling_sponsor_ids.append(affiliate.id)

            actual = len(resolver.downline_of(affiliate.id))
            if affiliate.direct_referrals_count != actual:
                self.logger.info(
                    "Referral count corrected",
                    extra={
                        "affiliate_id": affiliate.id,
                        "stored": affiliate.direct_referrals_count,
                        "actual": actual,
                    },
                )
                affiliate.direct_referrals_count = actual
                report.referral_counts_fixed += 1

            _, changed = self.tier_sync.sync(affiliate)
            if changed:
                report.tiers_changed += 1

        report.cycle_members = resolver.find_cycles()
        if report.cycle_members:
            self.logger.error(
                "Sponsor cycles found",
                extra={"cycle_members": report.cycle_members},
            )

        report.orphans = report.total_affiliates - report.with_sponsor
        if report.total_affiliates:
            report.health_percent = round(
                report.with_sponsor / report.total_affiliates * 100
            )

        await self.session.flush()

        self.logger.info("Structure repair finished", extra=report.model_dump())
        return report
