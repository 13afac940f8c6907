"""
Affiliate model.

Represents one participant in the compensation program.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import AffiliateStatus, Tier
from app.models.types import MoneyType, RatePercentType, VolumeType


class Affiliate(Base):
    """
    Affiliate entity.

    Sponsor links form a tree stored as parent pointers (``sponsor_id``).
    Tier and commission rate are derived from the metrics by the tier
    classifier; earnings and balances change only through the commission
    engine and the payout ledger. Affiliates are never deleted, only
    suspended.

    Attributes:
        id: Primary key
        user_id: Host application user reference
        referral_code: Unique shareable code
        sponsor_id: Recruiting affiliate (None = network root)
        status: pending, approved, rejected or suspended
        tier: Derived tier
        commission_rate: Direct sales rate for the tier, %
        direct_referrals_count: Affiliates directly recruited
        direct_sales_volume: Own sales volume
        team_sales_volume: Downline sales volume credited through MLM levels
        points: Cached points score
        total_earnings: Approved direct commission
        team_earnings: Approved downline commission
        available_balance: Withdrawable balance, never negative
        withdrawn_balance: Total of completed withdrawals
    """

    __tablename__ = "affiliates"
    __table_args__ = (
        CheckConstraint(
            'available_balance >= 0',
            name='check_affiliate_available_balance_non_negative'
        ),
        CheckConstraint(
            'withdrawn_balance >= 0',
            name='check_affiliate_withdrawn_balance_non_negative'
        ),
        CheckConstraint(
            'total_earnings >= 0',
            name='check_affiliate_total_earnings_non_negative'
        ),
        CheckConstraint(
            'team_earnings >= 0',
            name='check_affiliate_team_earnings_non_negative'
        ),
        CheckConstraint(
            'direct_referrals_count >= 0',
            name='check_affiliate_referrals_non_negative'
        ),
        CheckConstraint(
            'sponsor_id IS NULL OR sponsor_id <> id',
            name='check_affiliate_not_self_sponsored'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    user_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    referral_code: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )

    # Hierarchy
    sponsor_id: Mapped[int | None] = mapped_column(
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Status and classification
    status: Mapped[str] = mapped_column(
        String(20),
        default=AffiliateStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    tier: Mapped[str] = mapped_column(
        String(20),
        default=Tier.BRONZE.value,
        nullable=False,
        index=True,
    )
    commission_rate: Mapped[Decimal] = mapped_column(
        RatePercentType, default=Decimal("10"), nullable=False
    )

    # Performance metrics
    direct_referrals_count: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    direct_sales_volume: Mapped[Decimal] = mapped_column(
        VolumeType, default=Decimal("0"), nullable=False
    )
    team_sales_volume: Mapped[Decimal] = mapped_column(
        VolumeType, default=Decimal("0"), nullable=False
    )
    points: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    # Earnings and balances
    total_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    team_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    available_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    withdrawn_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    sponsor: Mapped[Optional["Affiliate"]] = relationship(
        "Affiliate",
        remote_side=[id],
        back_populates="referrals",
        foreign_keys=[sponsor_id],
    )
    referrals: Mapped[list["Affiliate"]] = relationship(
        "Affiliate",
        back_populates="sponsor",
        foreign_keys=[sponsor_id],
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Affiliate(id={self.id}, code={self.referral_code}, "
            f"tier={self.tier}, status={self.status})>"
        )

    @property
    def is_approved(self) -> bool:
        """Whether the affiliate participates in commission distribution."""
        return self.status == AffiliateStatus.APPROVED.value

    @property
    def total_sales_volume(self) -> Decimal:
        """Own plus downline sales volume."""
        return (self.direct_sales_volume or Decimal("0")) + (
            self.team_sales_volume or Decimal("0")
        )
