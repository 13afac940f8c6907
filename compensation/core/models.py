"""Pydantic models for compensation calculations."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from compensation.types import AffiliateStatus, CommissionType, Tier


class TierConfig(BaseModel):
    """One rung of the tier ladder.

    An affiliate holds the tier only when all three minimums are met.
    """

    model_config = ConfigDict(frozen=True)

    tier: Tier = Field(..., description="Tier key")
    label: str = Field(..., description="Display name")
    min_referrals: int = Field(..., ge=0, description="Minimum direct referrals")
    min_sales_volume: Decimal = Field(..., ge=0, description="Minimum sales volume")
    min_points: int = Field(..., ge=0, description="Minimum accumulated points")
    commission_rate: Decimal = Field(
        ..., ge=0, le=100, description="Direct sales commission percentage"
    )
    override_rates: tuple[Decimal, ...] = Field(
        default=(),
        description="Upline override percentages, index 0 = level 1",
    )

    def qualifies(
        self, direct_referrals: int, total_sales_volume: Decimal, points: int
    ) -> bool:
        """Check whether the metrics satisfy every minimum of this tier."""
        return (
            direct_referrals >= self.min_referrals
            and total_sales_volume >= self.min_sales_volume
            and points >= self.min_points
        )

    def override_rate(self, level: int) -> Decimal:
        """
        Get override percentage paid to a member of this tier at an upline level.

        Args:
            level: Upline level (1 = immediate sponsor)

        Returns:
            Override percentage, 0 when the level is not configured
        """
        if level < 1 or level > len(self.override_rates):
            return Decimal("0")
        return self.override_rates[level - 1]


class TierClassification(BaseModel):
    """Result of classifying an affiliate's metrics."""

    tier: Tier
    rate: Decimal = Field(..., ge=0, description="Direct commission percentage")
    next_tier: Tier | None = None
    progress_to_next: Decimal = Field(
        ..., ge=0, le=100, description="Points gap closed towards next tier, %"
    )
    referrals_needed: int = Field(default=0, ge=0)
    sales_needed: Decimal = Field(default=Decimal("0"), ge=0)
    points_needed: int = Field(default=0, ge=0)


class AffiliateNode(BaseModel):
    """Minimal affiliate view used by the pure hierarchy and planner code.

    ORM rows expose the same attributes and can be passed in directly.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    sponsor_id: int | None = None
    status: AffiliateStatus = AffiliateStatus.APPROVED
    direct_referrals_count: int = Field(default=0, ge=0)
    direct_sales_volume: Decimal = Field(default=Decimal("0"), ge=0)
    team_sales_volume: Decimal = Field(default=Decimal("0"), ge=0)


class CommissionShare(BaseModel):
    """One planned commission credit for one beneficiary."""

    affiliate_id: int
    level: int = Field(..., ge=0)
    commission_type: CommissionType
    tier: Tier
    rate: Decimal = Field(..., ge=0)
    amount: Decimal = Field(..., ge=0)


class DistributionPlan(BaseModel):
    """All commission shares planned for a single sale."""

    order_id: str
    order_total: Decimal = Field(..., ge=0)
    seller_id: int
    shares: list[CommissionShare] = Field(default_factory=list)
    skipped_ids: list[int] = Field(
        default_factory=list,
        description="Upline members passed over because they are not approved",
    )

    @property
    def total(self) -> Decimal:
        """Sum of all planned commission amounts."""
        return sum((share.amount for share in self.shares), Decimal("0"))

    @property
    def beneficiary_ids(self) -> list[int]:
        """Upline beneficiaries, nearest first (seller excluded)."""
        return [share.affiliate_id for share in self.shares if share.level > 0]
