"""
Tier classification.

Maps an affiliate's accumulated metrics to a tier on the ladder and reports
progress towards the next one. Pure logic, no I/O.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from compensation.constants import PERCENT_QUANT, TIER_LADDER, validate_ladder
from compensation.core.models import TierClassification, TierConfig
from compensation.core.points import PointsCalculator
from compensation.types import Tier
from compensation.utils.money import to_decimal


class TierClassifier:
    """Classifies affiliates into ladder tiers."""

    def __init__(
        self,
        ladder: Sequence[TierConfig] = TIER_LADDER,
        points_calculator: PointsCalculator | None = None,
    ) -> None:
        ladder = tuple(ladder)
        validate_ladder(ladder)
        self.ladder = ladder
        self.points_calculator = points_calculator or PointsCalculator()

    def classify(
        self,
        direct_referrals: int,
        total_sales_volume: Decimal,
        points: int,
    ) -> TierClassification:
        """
        Classify metrics into the highest fully satisfied tier.

        Args:
            direct_referrals: Number of directly recruited affiliates
            total_sales_volume: Accumulated sales volume
            points: Accumulated points

        Returns:
            TierClassification with tier, rate and progress to next tier

        Example:
            >>> TierClassifier().classify(5, Decimal("600"), 450).tier
            <Tier.BRONZE: 'bronze'>
        """
        sales = to_decimal(total_sales_volume)

        index = 0
        for position, config in enumerate(self.ladder):
            if config.qualifies(direct_referrals, sales, points):
                index = position

        current = self.ladder[index]

        if index == len(self.ladder) - 1:
            return TierClassification(
                tier=current.tier,
                rate=current.commission_rate,
                next_tier=None,
                progress_to_next=Decimal("100"),
            )

        upcoming = self.ladder[index + 1]
        gap = upcoming.min_points - current.min_points
        progress = Decimal(points - current.min_points) / Decimal(gap) * 100
        progress = min(max(progress, Decimal("0")), Decimal("100"))

        return TierClassification(
            tier=current.tier,
            rate=current.commission_rate,
            next_tier=upcoming.tier,
            progress_to_next=progress.quantize(
                PERCENT_QUANT, rounding=ROUND_HALF_UP
            ),
            referrals_needed=max(0, upcoming.min_referrals - direct_referrals),
            sales_needed=max(Decimal("0"), upcoming.min_sales_volume - sales),
            points_needed=max(0, upcoming.min_points - points),
        )

    def points_for(self, affiliate: Any) -> int:
        """Points derived from an affiliate's direct and team sales volume."""
        return self.points_calculator.points(
            affiliate.direct_sales_volume, affiliate.team_sales_volume
        )

    def classify_affiliate(self, affiliate: Any) -> TierClassification:
        """
        Classify an affiliate record.

        Total sales volume is the affiliate's own volume plus the downline
        volume credited to it; points are derived from the same two figures.

        Args:
            affiliate: Object with direct_referrals_count, direct_sales_volume
                and team_sales_volume attributes

        Returns:
            TierClassification
        """
        direct = to_decimal(affiliate.direct_sales_volume)
        team = to_decimal(affiliate.team_sales_volume)
        return self.classify(
            affiliate.direct_referrals_count or 0,
            direct + team,
            self.points_for(affiliate),
        )

    def get_config(self, tier: Tier) -> TierConfig:
        """Get ladder entry for a tier."""
        for config in self.ladder:
            if config.tier == tier:
                return config
        raise KeyError(tier)
