"""Integration tests for StructureMaintenanceService."""

from decimal import Decimal

import pytest

from app.services.affiliate import (
    AffiliateService,
    StructureMaintenanceService,
    StructureReport,
)


class TestStructureMaintenance:
    """Referral recount, tier re-derivation and health report."""

    @pytest.mark.asyncio
    async def test_repair_report(self, db_session, make_affiliate):
        """Counters and tiers are fixed and the report reflects the tree."""
        root = await make_affiliate(direct_referrals_count=7)
        child = await make_affiliate(
            sponsor=root,
            direct_referrals_count=5,
            direct_sales_volume=Decimal("600"),
        )
        await make_affiliate(sponsor=root)
        stale = await make_affiliate(tier="gold", commission_rate=Decimal("15"))

        report = await StructureMaintenanceService(db_session).repair()

        assert isinstance(report, StructureReport)
        assert report.total_affiliates == 4
        assert report.with_sponsor == 2
        assert report.orphans == 2
        assert report.referral_counts_fixed == 2
        assert report.tiers_changed == 1
        assert report.health_percent == 50
        assert report.cycle_members == []
        assert report.dangling_sponsor_ids == []

        for affiliate in (root, child, stale):
            await db_session.refresh(affiliate)
        assert root.direct_referrals_count == 2
        assert child.direct_referrals_count == 0
        assert child.tier == "bronze"
        assert child.points == 600
        assert stale.tier == "bronze"
        assert stale.commission_rate == Decimal("10")

    @pytest.mark.asyncio
    async def test_repair_is_idempotent(self, db_session, make_affiliate):
        """A second run finds nothing to fix."""
        root = await make_affiliate(direct_referrals_count=3)
        await make_affiliate(sponsor=root)
        service = StructureMaintenanceService(db_session)

        await service.repair()
        report = await service.repair()

        assert report.referral_counts_fixed == 0
        assert report.tiers_changed == 0

    @pytest.mark.asyncio
    async def test_cycles_and_dangling_reported(self, db_session, make_affiliate):
        """Corrupt links are reported, not repaired."""
        x = await make_affiliate()
        y = await make_affiliate(sponsor=x)
        x.sponsor_id = y.id
        await db_session.commit()
        lost = await make_affiliate(sponsor_id=999)

        report = await StructureMaintenanceService(db_session).repair()
        await db_session.refresh(x)

        assert report.cycle_members == sorted([x.id, y.id])
        assert report.dangling_sponsor_ids == [lost.id]
        assert report.with_sponsor == 3
        assert report.health_percent == 100
        assert x.sponsor_id == y.id

    @pytest.mark.asyncio
    async def test_empty_structure(self, db_session):
        """No affiliates means a healthy, empty report."""
        report = await StructureMaintenanceService(db_session).repair()

        assert report.total_affiliates == 0
        assert report.orphans == 0
        assert report.health_percent == 100

    @pytest.mark.asyncio
    async def test_repair_sees_enrollments_from_same_session(
        self, db_session, make_affiliate
    ):
        """Counters incremented earlier in the session are not reported as fixed."""
        sponsor = await make_affiliate()
        await AffiliateService(db_session).enroll(
            "user-late", sponsor_code=sponsor.referral_code
        )

        report = await StructureMaintenanceService(db_session).repair()

        assert report.referral_counts_fixed == 0
        assert sponsor.direct_referrals_count == 1
