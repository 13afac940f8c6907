"""
Commission distribution planning.

Decides who earns what for one sale: the seller at its own tier rate, then up
to MAX_COMMISSION_DEPTH approved upline members at their tier override rate.
Produces a plan only; persisting it is the caller's job.
"""

from decimal import Decimal

from compensation.constants import MAX_COMMISSION_DEPTH, UPLINE_SCAN_LIMIT
from compensation.core.classifier import TierClassifier
from compensation.core.hierarchy import HierarchyResolver
from compensation.core.models import CommissionShare, DistributionPlan
from compensation.exceptions import RateStackingError
from compensation.types import AffiliateStatus, CommissionType
from compensation.utils.money import percent_of, to_decimal


class DistributionPlanner:
    """Plans multi-level commission shares for a sale."""

    def __init__(
        self,
        classifier: TierClassifier | None = None,
        max_depth: int = MAX_COMMISSION_DEPTH,
        scan_limit: int = UPLINE_SCAN_LIMIT,
    ) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must not be negative")
        if scan_limit < max_depth:
            raise ValueError("scan_limit must cover max_depth")
        self.classifier = classifier or TierClassifier()
        self.max_depth = max_depth
        self.scan_limit = scan_limit

    def plan(
        self,
        resolver: HierarchyResolver,
        seller_id: int,
        order_total: Decimal,
        order_id: str = "",
    ) -> DistributionPlan:
        """
        Plan commission shares for one sale.

        Ineligible upline members (any status except approved) are skipped
        and the next approved ancestor takes their level slot, until
        ``max_depth`` levels are filled or ``scan_limit`` ancestors were
        examined.

        Args:
            resolver: Snapshot containing the seller and its upline
            seller_id: Selling affiliate
            order_total: Gross sale amount
            order_id: External order reference (for error reporting)

        Returns:
            DistributionPlan; empty when the total is zero or the seller is
            not approved

        Raises:
            UnknownAffiliateError: If the seller is not in the snapshot
            CorruptHierarchyError: If the upline contains a cycle
            RateStackingError: If shares would exceed the order total
        """
        total = to_decimal(order_total)
        plan = DistributionPlan(
            order_id=order_id, order_total=total, seller_id=seller_id
        )

        seller = resolver.get(seller_id)
        if total <= 0 or seller.status != AffiliateStatus.APPROVED:
            return plan

        seller_class = self.classifier.classify_affiliate(seller)
        plan.shares.append(
            CommissionShare(
                affiliate_id=seller.id,
                level=0,
                commission_type=CommissionType.DIRECT,
                tier=seller_class.tier,
                rate=seller_class.rate,
                amount=percent_of(total, seller_class.rate),
            )
        )

        level = 0
        if self.max_depth > 0:
            upline = resolver.upline_of(seller_id, max_depth=self.scan_limit)
        else:
            upline = []

        for ancestor in upline:
            if level >= self.max_depth:
                break

            if ancestor.status != AffiliateStatus.APPROVED:
                plan.skipped_ids.append(ancestor.id)
                continue

            level += 1
            ancestor_class = self.classifier.classify_affiliate(ancestor)
            rate = self.classifier.get_config(ancestor_class.tier).override_rate(level)
            plan.shares.append(
                CommissionShare(
                    affiliate_id=ancestor.id,
                    level=level,
                    commission_type=CommissionType.for_level(level),
                    tier=ancestor_class.tier,
                    rate=rate,
                    amount=percent_of(total, rate),
                )
            )

        plan.shares = [share for share in plan.shares if share.amount > 0]

        if plan.total > total:
            raise RateStackingError(order_id, plan.total, total)

        return plan
