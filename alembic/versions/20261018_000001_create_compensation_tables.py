"""Create affiliates, commission_records and withdrawal_requests tables

Revision ID: 20261018_000001
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Affiliates (self-referencing sponsor tree)
    op.create_table(
        'affiliates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('referral_code', sa.String(20), nullable=False),
        sa.Column('sponsor_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('tier', sa.String(20), nullable=False, server_default='bronze'),
        sa.Column('commission_rate', sa.DECIMAL(7, 4), nullable=False, server_default='10'),
        sa.Column('direct_referrals_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('direct_sales_volume', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('team_sales_volume', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('team_earnings', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('available_balance', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('withdrawn_balance', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['sponsor_id'], ['affiliates.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.UniqueConstraint('referral_code'),
        sa.CheckConstraint('available_balance >= 0', name='check_affiliate_available_balance_non_negative'),
        sa.CheckConstraint('withdrawn_balance >= 0', name='check_affiliate_withdrawn_balance_non_negative'),
        sa.CheckConstraint('total_earnings >= 0', name='check_affiliate_total_earnings_non_negative'),
        sa.CheckConstraint('team_earnings >= 0', name='check_affiliate_team_earnings_non_negative'),
        sa.CheckConstraint('direct_referrals_count >= 0', name='check_affiliate_referrals_non_negative'),
        sa.CheckConstraint('sponsor_id IS NULL OR sponsor_id <> id', name='check_affiliate_not_self_sponsored'),
    )
    op.create_index('ix_affiliates_user_id', 'affiliates', ['user_id'])
    op.create_index('ix_affiliates_referral_code', 'affiliates', ['referral_code'])
    op.create_index('ix_affiliates_sponsor_id', 'affiliates', ['sponsor_id'])
    op.create_index('ix_affiliates_status', 'affiliates', ['status'])
    op.create_index('ix_affiliates_tier', 'affiliates', ['tier'])

    # Commission records
    op.create_table(
        'commission_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.String(100), nullable=False),
        sa.Column('order_total', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('source_affiliate_id', sa.Integer(), nullable=True),
        sa.Column('commission_level', sa.Integer(), nullable=False),
        sa.Column('commission_type', sa.String(20), nullable=False),
        sa.Column('commission_rate', sa.DECIMAL(7, 4), nullable=False),
        sa.Column('commission_amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('status_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reversed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['source_affiliate_id'], ['affiliates.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'order_id', 'affiliate_id', 'commission_level',
            name='uq_commission_order_affiliate_level',
        ),
        sa.CheckConstraint('commission_amount >= 0', name='check_commission_amount_non_negative'),
        sa.CheckConstraint('commission_level >= 0', name='check_commission_level_non_negative'),
    )
    op.create_index('ix_commission_records_order_id', 'commission_records', ['order_id'])
    op.create_index('ix_commission_records_affiliate_id', 'commission_records', ['affiliate_id'])
    op.create_index('ix_commission_records_commission_type', 'commission_records', ['commission_type'])
    op.create_index('ix_commission_records_status', 'commission_records', ['status'])
    op.create_index(
        'idx_commission_records_affiliate_status',
        'commission_records',
        ['affiliate_id', 'status'],
    )

    # Withdrawal requests
    op.create_table(
        'withdrawal_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('fee', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('net_amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('payment_method', sa.String(30), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('processed_by', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
        sa.CheckConstraint('fee >= 0', name='check_withdrawal_fee_non_negative'),
        sa.CheckConstraint('net_amount >= 0', name='check_withdrawal_net_amount_non_negative'),
    )
    op.create_index('ix_withdrawal_requests_affiliate_id', 'withdrawal_requests', ['affiliate_id'])
    op.create_index('ix_withdrawal_requests_status', 'withdrawal_requests', ['status'])
    op.create_index(
        'idx_withdrawal_requests_affiliate_status',
        'withdrawal_requests',
        ['affiliate_id', 'status'],
    )


def downgrade() -> None:
    op.drop_index('idx_withdrawal_requests_affiliate_status', 'withdrawal_requests')
    op.drop_index('ix_withdrawal_requests_status', 'withdrawal_requests')
    op.drop_index('ix_withdrawal_requests_affiliate_id', 'withdrawal_requests')
    op.drop_table('withdrawal_requests')

    op.drop_index('idx_commission_records_affiliate_status', 'commission_records')
    op.drop_index('ix_commission_records_status', 'commission_records')
    op.drop_index('ix_commission_records_commission_type', 'commission_records')
    op.drop_index('ix_commission_records_affiliate_id', 'commission_records')
    op.drop_index('ix_commission_records_order_id', 'commission_records')
    op.drop_table('commission_records')

    op.drop_index('ix_affiliates_tier', 'affiliates')
    op.drop_index('ix_affiliates_status', 'affiliates')
    op.drop_index('ix_affiliates_sponsor_id', 'affiliates')
    op.drop_index('ix_affiliates_referral_code', 'affiliates')
    op.drop_index('ix_affiliates_user_id', 'affiliates')
    op.drop_table('affiliates')
