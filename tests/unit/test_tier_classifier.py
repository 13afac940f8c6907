"""
Tests for tier classification.

Tests the compensation package without database dependencies.
"""

from decimal import Decimal

import pytest

from compensation import Tier, TierClassifier


class TestTierClassifier:
    """Tests for TierClassifier.classify."""

    @pytest.mark.parametrize(
        "referrals, sales, points, expected",
        [
            (0, "0", 0, Tier.BRONZE),
            (4, "500", 500, Tier.BRONZE),
            (5, "600", 450, Tier.BRONZE),
            (5, "500", 500, Tier.SILVER),
            (60, "1000", 1000, Tier.SILVER),
            (60, "20000", 1500, Tier.SILVER),
            (15, "2000", 2000, Tier.GOLD),
            (49, "50000", 50000, Tier.GOLD),
            (50, "10000", 10000, Tier.DIAMOND),
            (100, "50000", 50000, Tier.DIAMOND),
        ],
    )
    def test_highest_fully_satisfied_tier(
        self,
        classifier: TierClassifier,
        referrals: int,
        sales: str,
        points: int,
        expected: Tier,
    ) -> None:
        """Tier is the highest one whose three minimums are all met."""
        result = classifier.classify(referrals, Decimal(sales), points)
        assert result.tier == expected

    def test_never_classified_above_qualification(
        self, classifier: TierClassifier
    ) -> None:
        """Every minimum of the returned tier is satisfied."""
        for referrals in (0, 5, 15, 50):
            for sales in ("0", "500", "2000", "10000"):
                for points in (0, 500, 2000, 10000):
                    result = classifier.classify(referrals, Decimal(sales), points)
                    config = classifier.get_config(result.tier)
                    assert config.qualifies(referrals, Decimal(sales), points)

    def test_rate_follows_tier(self, classifier: TierClassifier) -> None:
        """Direct rate comes from the ladder entry."""
        assert classifier.classify(0, Decimal("0"), 0).rate == Decimal("10")
        assert classifier.classify(5, Decimal("500"), 500).rate == Decimal("12")
        assert classifier.classify(15, Decimal("2000"), 2000).rate == Decimal("15")
        assert classifier.classify(50, Decimal("10000"), 10000).rate == Decimal("20")

    def test_progress_and_gaps_towards_next_tier(
        self, classifier: TierClassifier
    ) -> None:
        """Bronze at 450 points is 90% of the way to silver."""
        result = classifier.classify(2, Decimal("300"), 450)

        assert result.tier == Tier.BRONZE
        assert result.next_tier == Tier.SILVER
        assert result.progress_to_next == Decimal("90.00")
        assert result.referrals_needed == 3
        assert result.sales_needed == Decimal("200")
        assert result.points_needed == 50

    def test_progress_within_silver(self, classifier: TierClassifier) -> None:
        """Progress is measured from the current tier's point minimum."""
        result = classifier.classify(5, Decimal("1250"), 1250)

        assert result.tier == Tier.SILVER
        assert result.next_tier == Tier.GOLD
        assert result.progress_to_next == Decimal("50.00")

    def test_progress_is_capped(self, classifier: TierClassifier) -> None:
        """Points past the next minimum do not push progress above 100."""
        result = classifier.classify(0, Decimal("0"), 5000)

        assert result.tier == Tier.BRONZE
        assert result.progress_to_next == Decimal("100.00")
        assert result.points_needed == 0
        assert result.referrals_needed == 5

    def test_top_tier_has_no_next(self, classifier: TierClassifier) -> None:
        """Diamond reports full progress and no next tier."""
        result = classifier.classify(80, Decimal("99999"), 99999)

        assert result.tier == Tier.DIAMOND
        assert result.next_tier is None
        assert result.progress_to_next == Decimal("100")

    def test_classify_affiliate_sums_direct_and_team_volume(
        self, classifier: TierClassifier, node
    ) -> None:
        """Sales volume is direct plus team; points weight the team half."""
        affiliate = node(1, referrals=5, direct_sales="400", team_sales="200")

        assert classifier.points_for(affiliate) == 500
        assert classifier.classify_affiliate(affiliate).tier == Tier.SILVER

    def test_classify_affiliate_team_volume_earns_fewer_points(
        self, classifier: TierClassifier, node
    ) -> None:
        """Same volume sold only by the downline misses the silver points."""
        affiliate = node(1, referrals=5, team_sales="600")

        assert classifier.points_for(affiliate) == 300
        assert classifier.classify_affiliate(affiliate).tier == Tier.BRONZE

    def test_get_config_unknown_tier(self, classifier: TierClassifier) -> None:
        """A tier missing from a custom ladder raises KeyError."""
        ladder = classifier.ladder[:2]
        short = TierClassifier(ladder=ladder)

        with pytest.raises(KeyError):
            short.get_config(Tier.DIAMOND)
