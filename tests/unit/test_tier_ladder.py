"""Tests for tier ladder constants and validation."""

from decimal import Decimal

import pytest

from compensation import TIER_LADDER, Tier, TierConfig, get_tier_config, normalize_tier
from compensation.constants import validate_ladder
from compensation.types import CommissionType


def _config(tier: Tier, threshold: int, rate: str, overrides: tuple[str, ...]) -> TierConfig:
    return TierConfig(
        tier=tier,
        label=tier.value.title(),
        min_referrals=threshold,
        min_sales_volume=Decimal(threshold),
        min_points=threshold,
        commission_rate=Decimal(rate),
        override_rates=tuple(Decimal(o) for o in overrides),
    )


class TestTierLadder:
    """Tests for the default ladder."""

    def test_ladder_order(self) -> None:
        """Tiers run bronze to diamond."""
        assert [c.tier for c in TIER_LADDER] == [
            Tier.BRONZE,
            Tier.SILVER,
            Tier.GOLD,
            Tier.DIAMOND,
        ]

    def test_default_ladder_is_valid(self) -> None:
        """Default ladder passes validation."""
        validate_ladder(TIER_LADDER)

    def test_override_rates(self) -> None:
        """Override rates per tier and level."""
        assert get_tier_config(Tier.SILVER).override_rate(1) == Decimal("3")
        assert get_tier_config(Tier.GOLD).override_rate(2) == Decimal("1")
        assert get_tier_config(Tier.BRONZE).override_rate(2) == Decimal("0.5")

    def test_override_rate_out_of_range(self) -> None:
        """Unconfigured levels pay nothing."""
        config = get_tier_config(Tier.DIAMOND)
        assert config.override_rate(0) == Decimal("0")
        assert config.override_rate(3) == Decimal("0")

    def test_override_below_direct_rate(self) -> None:
        """Overrides are lower than the tier's own direct rate."""
        for config in TIER_LADDER:
            assert all(rate < config.commission_rate for rate in config.override_rates)


class TestValidateLadder:
    """Tests for validate_ladder."""

    def test_empty_ladder(self) -> None:
        """Empty ladder is rejected."""
        with pytest.raises(ValueError):
            validate_ladder(())

    def test_lowest_tier_must_be_open(self) -> None:
        """Lowest tier with thresholds leaves affiliates unclassified."""
        with pytest.raises(ValueError, match="zero thresholds"):
            validate_ladder((_config(Tier.BRONZE, 1, "10", ()),))

    def test_thresholds_must_ascend(self) -> None:
        """A tier with thresholds not above the previous one is rejected."""
        ladder = (
            _config(Tier.BRONZE, 0, "10", ()),
            _config(Tier.SILVER, 10, "12", ()),
            _config(Tier.GOLD, 10, "15", ()),
        )
        with pytest.raises(ValueError, match="gold"):
            validate_ladder(ladder)

    def test_rate_stacking_above_100(self) -> None:
        """Direct plus overrides above 100% is rejected."""
        with pytest.raises(ValueError, match="stacks"):
            validate_ladder((_config(Tier.BRONZE, 0, "90", ("10", "5")),))


class TestNormalizeTier:
    """Tests for stored tier name normalization."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("gold", Tier.GOLD),
            (" SILVER ", Tier.SILVER),
            ("Ouro", Tier.GOLD),
            ("prata", Tier.SILVER),
            ("diamante", Tier.DIAMOND),
            ("platinum", Tier.BRONZE),
            ("", Tier.BRONZE),
            (None, Tier.BRONZE),
        ],
    )
    def test_normalize(self, value: str | None, expected: Tier) -> None:
        """Known names and aliases map to tiers, anything else to bronze."""
        assert normalize_tier(value) == expected

    def test_get_tier_config_by_alias(self) -> None:
        """Stored alias resolves to the ladder entry."""
        assert get_tier_config("prata").commission_rate == Decimal("12")


class TestCommissionType:
    """Tests for CommissionType.for_level."""

    def test_levels(self) -> None:
        """Level 0 is direct, upline levels are mlm_levelN."""
        assert CommissionType.for_level(0) == CommissionType.DIRECT
        assert CommissionType.for_level(1) == CommissionType.MLM_LEVEL1
        assert CommissionType.for_level(2) == CommissionType.MLM_LEVEL2

    def test_unknown_level(self) -> None:
        """No type beyond the paid depth."""
        with pytest.raises(ValueError):
            CommissionType.for_level(3)
