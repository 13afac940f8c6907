"""
Compensation plan constants.

Single source of truth for the tier ladder, the points weighting and the
commission depth. Both the classifier and the distribution planner read from
here, so a rate change is made in exactly one place.
"""

from decimal import Decimal

from compensation.core.models import TierConfig
from compensation.types import Tier

# Money is settled in the currency's minor unit (centavos)
MONEY_QUANT = Decimal("0.01")
PERCENT_QUANT = Decimal("0.01")

# Upline levels paid above the seller (mlm_level1, mlm_level2)
MAX_COMMISSION_DEPTH = 2

# Ancestors examined while looking for approved beneficiaries
UPLINE_SCAN_LIMIT = 10

# Points weighting: 1 point per currency unit sold directly,
# half a point per unit sold by the downline.
# Tier point thresholds below are calibrated against these weights.
POINTS_SALES_UNIT = Decimal("1")
DIRECT_SALES_POINTS_WEIGHT = Decimal("1")
DOWNLINE_SALES_POINTS_WEIGHT = Decimal("0.5")

# Share of points carried over into the next qualification period
POINTS_ROLLOVER_RATE = Decimal("0.5")

TIER_LADDER: tuple[TierConfig, ...] = (
    TierConfig(
        tier=Tier.BRONZE,
        label="Bronze",
        min_referrals=0,
        min_sales_volume=Decimal("0"),
        min_points=0,
        commission_rate=Decimal("10"),
        override_rates=(Decimal("2"), Decimal("0.5")),
    ),
    TierConfig(
        tier=Tier.SILVER,
        label="Silver",
        min_referrals=5,
        min_sales_volume=Decimal("500"),
        min_points=500,
        commission_rate=Decimal("12"),
        override_rates=(Decimal("3"), Decimal("1")),
    ),
    TierConfig(
        tier=Tier.GOLD,
        label="Gold",
        min_referrals=15,
        min_sales_volume=Decimal("2000"),
        min_points=2000,
        commission_rate=Decimal("15"),
        override_rates=(Decimal("4"), Decimal("1")),
    ),
    TierConfig(
        tier=Tier.DIAMOND,
        label="Diamond",
        min_referrals=50,
        min_sales_volume=Decimal("10000"),
        min_points=10000,
        commission_rate=Decimal("20"),
        override_rates=(Decimal("5"), Decimal("2")),
    ),
)

# Legacy Portuguese tier names found in imported affiliate rows
TIER_ALIASES: dict[str, Tier] = {
    "prata": Tier.SILVER,
    "ouro": Tier.GOLD,
    "diamante": Tier.DIAMOND,
}


def validate_ladder(ladder: tuple[TierConfig, ...]) -> None:
    """
    Validate tier ladder ordering and rate stacking.

    Thresholds must strictly ascend on all three criteria and no tier may
    stack direct and override rates above 100%.

    Args:
        ladder: Tier configs, lowest first

    Raises:
        ValueError: If the ladder is empty or inconsistent
    """
    if not ladder:
        raise ValueError("Tier ladder must contain at least one tier")

    if ladder[0].min_referrals or ladder[0].min_sales_volume or ladder[0].min_points:
        raise ValueError("Lowest tier must have zero thresholds")

    for lower, upper in zip(ladder, ladder[1:]):
        if not (
            upper.min_referrals > lower.min_referrals
            and upper.min_sales_volume > lower.min_sales_volume
            and upper.min_points > lower.min_points
        ):
            raise ValueError(
                f"Tier {upper.tier.value} thresholds must exceed "
                f"{lower.tier.value} thresholds"
            )

    for config in ladder:
        stacked = config.commission_rate + sum(
            config.override_rates[:MAX_COMMISSION_DEPTH], Decimal("0")
        )
        if stacked > Decimal("100"):
            raise ValueError(
                f"Tier {config.tier.value} stacks {stacked}% of an order"
            )


def normalize_tier(value: str | None) -> Tier:
    """
    Normalize a stored tier name to a Tier.

    Unknown or empty values fall back to bronze.

    Example:
        >>> normalize_tier("Ouro")
        <Tier.GOLD: 'gold'>
    """
    if not value:
        return Tier.BRONZE
    lowered = value.strip().lower()
    if lowered in TIER_ALIASES:
        return TIER_ALIASES[lowered]
    try:
        return Tier(lowered)
    except ValueError:
        return Tier.BRONZE


def get_tier_config(tier: Tier | str) -> TierConfig:
    """
    Get ladder entry for a tier.

    Args:
        tier: Tier or stored tier name

    Returns:
        TierConfig for the tier
    """
    key = tier if isinstance(tier, Tier) else normalize_tier(tier)
    for config in TIER_LADDER:
        if config.tier == key:
            return config
    return TIER_LADDER[0]


validate_ladder(TIER_LADDER)
