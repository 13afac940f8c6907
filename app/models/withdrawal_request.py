"""
WithdrawalRequest model.

An affiliate's request to cash out available balance.
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
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import WithdrawalStatus
from app.models.types import MoneyType


class WithdrawalRequest(Base):
    """
    WithdrawalRequest entity.

    Creating a request does not move money; completing it debits the
    affiliate's available balance by ``amount``; rejecting it leaves the
    balance untouched.
    """

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
        CheckConstraint('fee >= 0', name='check_withdrawal_fee_non_negative'),
        CheckConstraint(
            'net_amount >= 0', name='check_withdrawal_net_amount_non_negative'
        ),
        Index("idx_withdrawal_requests_affiliate_status", "affiliate_id", "status"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Amounts
    amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    fee: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    net_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    payment_method: Mapped[str] = mapped_column(
        String(30), nullable=False
    )

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20),
        default=WithdrawalStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )
    processed_by: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<WithdrawalRequest(id={self.id}, affiliate_id={self.affiliate_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
