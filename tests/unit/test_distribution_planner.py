"""Tests for commission distribution planning."""

from decimal import Decimal

import pytest

from compensation import (
    AffiliateStatus,
    CommissionType,
    CorruptHierarchyError,
    DistributionPlanner,
    HierarchyResolver,
    RateStackingError,
    Tier,
    TierClassifier,
    TierConfig,
    UnknownAffiliateError,
)


def _shares(plan) -> list[tuple[int, int, CommissionType, Decimal]]:
    return [
        (s.affiliate_id, s.level, s.commission_type, s.amount) for s in plan.shares
    ]


class TestDistributionPlanner:
    """Tests for DistributionPlanner.plan."""

    @pytest.fixture
    def planner(self) -> DistributionPlanner:
        """Planner with default ladder and depth."""
        return DistributionPlanner()

    def test_three_level_scenario(self, planner: DistributionPlanner, node) -> None:
        """Bronze seller, silver sponsor, gold grand-sponsor on R$1,000."""
        resolver = HierarchyResolver(
            [
                node(1, 2),                                      # A, bronze
                node(2, 3, referrals=5, direct_sales="600"),      # B, silver
                node(3, referrals=15, direct_sales="2500"),       # C, gold
            ]
        )

        plan = planner.plan(resolver, 1, Decimal("1000"), order_id="ORD-1")

        assert _shares(plan) == [
            (1, 0, CommissionType.DIRECT, Decimal("100.00")),
            (2, 1, CommissionType.MLM_LEVEL1, Decimal("30.00")),
            (3, 2, CommissionType.MLM_LEVEL2, Decimal("10.00")),
        ]
        assert [s.tier for s in plan.shares] == [Tier.BRONZE, Tier.SILVER, Tier.GOLD]
        assert plan.total == Decimal("140.00")
        assert plan.beneficiary_ids == [2, 3]

    def test_no_upline_single_direct_share(
        self, planner: DistributionPlanner, node
    ) -> None:
        """Seller without sponsor gets exactly the direct share."""
        resolver = HierarchyResolver([node(1)])

        plan = planner.plan(resolver, 1, Decimal("250"))

        assert _shares(plan) == [(1, 0, CommissionType.DIRECT, Decimal("25.00"))]

    def test_zero_total(self, planner: DistributionPlanner, node) -> None:
        """Nothing to distribute on a zero total."""
        resolver = HierarchyResolver([node(1, 2), node(2)])

        assert planner.plan(resolver, 1, Decimal("0")).shares == []

    def test_seller_not_approved(self, planner: DistributionPlanner, node) -> None:
        """Suspended seller earns nothing and neither does its upline."""
        resolver = HierarchyResolver(
            [node(1, 2, status=AffiliateStatus.SUSPENDED), node(2)]
        )

        assert planner.plan(resolver, 1, Decimal("100")).shares == []

    def test_unknown_seller(self, planner: DistributionPlanner, node) -> None:
        """Seller missing from the snapshot raises."""
        with pytest.raises(UnknownAffiliateError):
            planner.plan(HierarchyResolver([node(1)]), 2, Decimal("100"))

    def test_suspended_sponsor_is_compressed(
        self, planner: DistributionPlanner, node
    ) -> None:
        """D's suspended sponsor E is skipped and F takes level 1."""
        resolver = HierarchyResolver(
            [
                node(1, 2),                                   # D
                node(2, 3, status=AffiliateStatus.SUSPENDED),  # E
                node(3),                                      # F, bronze
            ]
        )

        plan = planner.plan(resolver, 1, Decimal("1000"))

        assert _shares(plan) == [
            (1, 0, CommissionType.DIRECT, Decimal("100.00")),
            (3, 1, CommissionType.MLM_LEVEL1, Decimal("20.00")),
        ]
        assert plan.skipped_ids == [2]

    def test_pending_sponsor_is_compressed(
        self, planner: DistributionPlanner, node
    ) -> None:
        """Pending sponsors are skipped the same way."""
        resolver = HierarchyResolver(
            [
                node(1, 2),
                node(2, 3, status=AffiliateStatus.PENDING),
                node(3, 4),
                node(4),
            ]
        )

        plan = planner.plan(resolver, 1, Decimal("1000"))

        assert [(s.affiliate_id, s.level) for s in plan.shares] == [
            (1, 0),
            (3, 1),
            (4, 2),
        ]

    def test_depth_cap(self, planner: DistributionPlanner, node) -> None:
        """Only two upline levels are paid."""
        resolver = HierarchyResolver([node(1, 2), node(2, 3), node(3, 4), node(4)])

        plan = planner.plan(resolver, 1, Decimal("1000"))

        assert [s.affiliate_id for s in plan.shares] == [1, 2, 3]

    def test_scan_limit(self, node) -> None:
        """Ancestors beyond the scan limit are not examined."""
        planner = DistributionPlanner(scan_limit=2)
        resolver = HierarchyResolver(
            [
                node(1, 2),
                node(2, 3, status=AffiliateStatus.SUSPENDED),
                node(3, 4, status=AffiliateStatus.SUSPENDED),
                node(4),
            ]
        )

        plan = planner.plan(resolver, 1, Decimal("1000"))

        assert [s.affiliate_id for s in plan.shares] == [1]
        assert plan.skipped_ids == [2, 3]

    def test_rounding_half_up(self, planner: DistributionPlanner, node) -> None:
        """Each share is rounded to centavos independently."""
        resolver = HierarchyResolver([node(1, 2), node(2, 3), node(3)])

        plan = planner.plan(resolver, 1, Decimal("33.33"))

        assert [s.amount for s in plan.shares] == [
            Decimal("3.33"),
            Decimal("0.67"),
            Decimal("0.17"),
        ]

    def test_zero_amount_shares_dropped(
        self, planner: DistributionPlanner, node
    ) -> None:
        """A share rounding to 0.00 is not emitted."""
        resolver = HierarchyResolver([node(1, 2), node(2, 3), node(3)])

        plan = planner.plan(resolver, 1, Decimal("0.50"))

        assert [s.amount for s in plan.shares] == [Decimal("0.05"), Decimal("0.01")]

    def test_total_never_exceeds_order_total(
        self, planner: DistributionPlanner, node
    ) -> None:
        """Sum of shares stays below the order total across tier mixes."""
        resolver = HierarchyResolver(
            [
                node(1, 2, referrals=50, direct_sales="10000"),
                node(2, 3, referrals=50, direct_sales="10000"),
                node(3, referrals=50, direct_sales="10000"),
            ]
        )

        for total in ("0.01", "1", "99.99", "1000000"):
            plan = planner.plan(resolver, 1, Decimal(total))
            assert plan.total <= Decimal(total)

    def test_cycle_aborts(self, planner: DistributionPlanner, node) -> None:
        """Cyclic upline raises before any share is returned."""
        resolver = HierarchyResolver([node(1, 2), node(2, 3), node(3, 2)])

        with pytest.raises(CorruptHierarchyError):
            planner.plan(resolver, 1, Decimal("100"))

    def test_rate_stacking_guard(self, node) -> None:
        """Shares above the order total are refused."""
        ladder = (
            TierConfig(
                tier=Tier.BRONZE,
                label="Bronze",
                min_referrals=0,
                min_sales_volume=Decimal("0"),
                min_points=0,
                commission_rate=Decimal("90"),
                override_rates=(Decimal("5"), Decimal("5")),
            ),
            TierConfig(
                tier=Tier.SILVER,
                label="Silver",
                min_referrals=1,
                min_sales_volume=Decimal("1"),
                min_points=1,
                commission_rate=Decimal("10"),
                override_rates=(Decimal("50"), Decimal("40")),
            ),
        )
        planner = DistributionPlanner(classifier=TierClassifier(ladder=ladder))
        resolver = HierarchyResolver(
            [node(1, 2), node(2, referrals=1, direct_sales="1")]
        )

        with pytest.raises(RateStackingError):
            planner.plan(resolver, 1, Decimal("100"), order_id="ORD-X")

    def test_invalid_configuration(self) -> None:
        """Negative depth and too small scan limit are rejected."""
        with pytest.raises(ValueError):
            DistributionPlanner(max_depth=-1)
        with pytest.raises(ValueError):
            DistributionPlanner(max_depth=2, scan_limit=1)
