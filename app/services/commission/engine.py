"""
Commission engine.

Turns a sale event into pending commission records for the seller and its
approved upline, and updates the sales metrics tiers are derived from.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import Settings, settings as default_settings
from app.models.commission_record import CommissionRecord
from app.models.enums import CommissionStatus
from app.repositories.affiliate_repository import AffiliateRepository
from app.repositories.commission_repository import CommissionRepository
from app.services.affiliate.tier_sync import TierSynchronizer
from app.services.base_service import BaseService, log_operation, transaction
from app.services.commission.events import SaleEvent
from app.utils.exceptions import AffiliateNotFoundError
from compensation import (
    AffiliateNode,
    DistributionPlan,
    DistributionPlanner,
    HierarchyResolver,
)


class CommissionEngine(BaseService):
    """
    Distributes commissions for sales.

    One call to ``distribute`` is one transaction: either every record of
    the sale is written together with the metric updates, or nothing is.
    """

    def __init__(
        self,
        session: AsyncSession,
        planner: DistributionPlanner | None = None,
        config: Settings | None = None,
    ) -> None:
        super().__init__(session)
        self.planner = planner or DistributionPlanner()
        self.config = config or default_settings
        self.affiliate_repo = AffiliateRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.tier_sync = TierSynchronizer(self.planner.classifier)

    @log_operation
    async def distribute(self, sale: SaleEvent) -> list[CommissionRecord]:
        """
        Create commission records for one sale.

        Re-distributing an order that already has records returns those
        records unchanged. This also holds when a concurrent call for the
        same order commits first: the unique constraint on
        (order_id, affiliate_id, commission_level) rejects the second insert,
        the transaction is rolled back and the winner's records are returned.

        Args:
            sale: Completed sale

        Returns:
            Records created (or found) for the order, seller first

        Raises:
            AffiliateNotFoundError: If the seller does not exist
            CorruptHierarchyError: If the seller's upline contains a cycle
            RateStackingError: If shares would exceed the order total
        """
        try:
            return await self._distribute(sale)
        except IntegrityError:
            existing = await self.commission_repo.get_by_order(sale.order_id)
            if not existing:
                raise
            self.logger.info(
                "Order distributed concurrently, returning existing records",
                extra={"order_id": sale.order_id, "records": len(existing)},
            )
            return existing

    @transaction
    async def _distribute(self, sale: SaleEvent) -> list[CommissionRecord]:
        """Check, plan, insert and update metrics in one transaction."""
        if sale.order_total == 0:
            self.logger.info(
                "Zero-total sale, nothing to distribute",
                extra={"order_id": sale.order_id},
            )
            return []

        existing = await self.commission_repo.get_by_order(sale.order_id)
        if existing:
            self.logger.info(
                "Order already distributed, returning existing records",
                extra={"order_id": sale.order_id, "records": len(existing)},
            )
            return existing

        plan = await self.plan(sale)
        if not plan.shares:
            self.logger.info(
                "No eligible beneficiaries for sale",
                extra={
                    "order_id": sale.order_id,
                    "seller_id": sale.selling_affiliate_id,
                },
            )
            return []

        records = []
        for share in plan.shares:
            records.append(
                await self.commission_repo.create(
                    order_id=sale.order_id,
                    order_total=sale.order_total,
                    affiliate_id=share.affiliate_id,
                    source_affiliate_id=plan.seller_id,
                    commission_level=share.level,
                    commission_type=share.commission_type.value,
                    commission_rate=share.rate,
                    commission_amount=share.amount,
                    status=CommissionStatus.PENDING.value,
                )
            )

        await self._update_metrics(plan)

        self.logger.info(
            "Commissions distributed",
            extra={
                "order_id": sale.order_id,
                "order_total": str(sale.order_total),
                "seller_id": plan.seller_id,
                "records": len(records),
                "total_commission": str(plan.total),
                "skipped_ids": plan.skipped_ids,
            },
        )
        return records

    async def plan(self, sale: SaleEvent) -> DistributionPlan:
        """
        Plan shares for a sale without writing anything.

        Raises:
            AffiliateNotFoundError: If the seller does not exist
            CorruptHierarchyError: If the seller's upline contains a cycle
        """
        snapshot = await self.affiliate_repo.get_upline_snapshot(
            sale.selling_affiliate_id, depth=self.planner.scan_limit
        )
        if not snapshot:
            raise AffiliateNotFoundError(sale.selling_affiliate_id)

        resolver = HierarchyResolver(
            [AffiliateNode.model_validate(a) for a in snapshot],
            strict=self.config.strict_hierarchy,
        )
        return self.planner.plan(
            resolver,
            sale.selling_affiliate_id,
            sale.order_total,
            order_id=sale.order_id,
        )

    async def _update_metrics(self, plan: DistributionPlan) -> None:
        """Add sale volume to seller and beneficiaries, then re-derive tiers."""
        total: Decimal = plan.order_total

        await self.affiliate_repo.add_sales_volume(plan.seller_id, direct=total)
        for share in plan.shares:
            if share.level > 0:
                await self.affiliate_repo.add_sales_volume(
                    share.affiliate_id, team=total
                )

        for affiliate_id in [plan.seller_id, *plan.beneficiary_ids]:
            affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
            self.tier_sync.sync(affiliate)

        await self.session.flush()
