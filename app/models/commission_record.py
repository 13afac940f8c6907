"""
CommissionRecord model.

One monetary credit tied to one sale and one beneficiary affiliate.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import CommissionStatus
from app.models.types import MoneyType, RatePercentType


class CommissionRecord(Base):
    """
    CommissionRecord entity.

    Created by the commission engine together with the rest of the records
    for the same order. At most one record exists per
    (order_id, affiliate_id, commission_level).

    Attributes:
        id: Primary key
        order_id: External sale reference
        order_total: Gross sale amount
        affiliate_id: Beneficiary affiliate
        source_affiliate_id: Affiliate who made the sale
        commission_level: 0 = seller, 1 = sponsor, 2 = sponsor's sponsor
        commission_type: direct, mlm_level1 or mlm_level2
        commission_rate: Percentage applied
        commission_amount: order_total * commission_rate / 100
        status: pending, approved, paid, rejected or reversed
        status_reason: Reason given for rejection or reversal
    """

    __tablename__ = "commission_records"
    __table_args__ = (
        UniqueConstraint(
            "order_id",
            "affiliate_id",
            "commission_level",
            name="uq_commission_order_affiliate_level",
        ),
        CheckConstraint(
            'commission_amount >= 0',
            name='check_commission_amount_non_negative'
        ),
        CheckConstraint(
            'commission_level >= 0',
            name='check_commission_level_non_negative'
        ),
        Index("idx_commission_records_affiliate_status", "affiliate_id", "status"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Sale reference
    order_id: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    order_total: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )

    # Beneficiary and seller
    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    source_affiliate_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Commission terms
    commission_level: Mapped[int] = mapped_column(
        Integer, nullable=False
    )
    commission_type: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )
    commission_rate: Mapped[Decimal] = mapped_column(
        RatePercentType, nullable=False
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20),
        default=CommissionStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    status_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reversed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CommissionRecord(id={self.id}, order_id={self.order_id}, "
            f"affiliate_id={self.affiliate_id}, level={self.commission_level}, "
            f"amount={self.commission_amount}, status={self.status})>"
        )
