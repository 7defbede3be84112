"""Create commission ledger tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users (purchasers and beneficiaries)
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('referred_by_id', sa.Integer(), nullable=True),
        sa.Column('plan', sa.String(20), nullable=True),
        sa.Column('has_paid', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('wallet_balance', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='INR'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('wallet_balance >= 0', name='check_user_wallet_balance_non_negative'),
        sa.CheckConstraint('total_earnings >= 0', name='check_user_total_earnings_non_negative'),
        sa.ForeignKeyConstraint(['referred_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referred_by_id', 'users', ['referred_by_id'])
    op.create_index('ix_users_plan', 'users', ['plan'])
    op.create_index('ix_users_has_paid', 'users', ['has_paid'])

    # Ancestry chains written at signup
    op.create_table(
        'referral_ancestors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('ancestor_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('level >= 1', name='check_referral_ancestor_level_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'level', name='uq_referral_ancestor_user_level')
    )
    op.create_index('ix_referral_ancestors_user_id', 'referral_ancestors', ['user_id'])
    op.create_index('ix_referral_ancestors_ancestor_id', 'referral_ancestors', ['ancestor_id'])
    op.create_index('ix_referral_ancestors_ancestor_level', 'referral_ancestors', ['ancestor_id', 'level'])

    # Commission audit trail
    op.create_table(
        'commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('from_user_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.DECIMAL(7, 3), nullable=False),
        sa.Column('plan_type', sa.String(20), nullable=False),
        sa.Column('plan_amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('amount > 0', name='check_commission_amount_positive'),
        sa.CheckConstraint('level >= 1', name='check_commission_level_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_commissions_user_id', 'commissions', ['user_id'])
    op.create_index('ix_commissions_from_user_id', 'commissions', ['from_user_id'])
    op.create_index('ix_commissions_status', 'commissions', ['status'])
    op.create_index('ix_commissions_user_level', 'commissions', ['user_id', 'level'])

    # Beneficiary earnings
    op.create_table(
        'earnings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='INR'),
        sa.Column('source', sa.String(20), nullable=False),
        sa.Column('referral_id', sa.Integer(), nullable=True),
        sa.Column('level', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_earnings_user_id', 'earnings', ['user_id'])
    op.create_index('ix_earnings_source', 'earnings', ['source'])
    op.create_index('ix_earnings_referral_id', 'earnings', ['referral_id'])
    op.create_index('ix_earnings_user_created', 'earnings', ['user_id', 'created_at'])
    op.create_index('ix_earnings_user_source_level', 'earnings', ['user_id', 'source', 'level'])

    # Wallet ledger (user wallets and the platform wallet)
    op.create_table(
        'wallet_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('platform_wallet_id', sa.String(64), nullable=True),
        sa.Column('amount', sa.DECIMAL(18, 2), nullable=False),
        sa.Column('transaction_type', sa.String(20), nullable=False),
        sa.Column('reference_id', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            '(user_id IS NULL) <> (platform_wallet_id IS NULL)',
            name='check_wallet_transaction_single_owner'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_wallet_transactions_user_id', 'wallet_transactions', ['user_id'])
    op.create_index('ix_wallet_transactions_platform_wallet_id', 'wallet_transactions', ['platform_wallet_id'])
    op.create_index('ix_wallet_transactions_transaction_type', 'wallet_transactions', ['transaction_type'])
    op.create_index('ix_wallet_transactions_reference_id', 'wallet_transactions', ['reference_id'])
    op.create_index('ix_wallet_transactions_user_created', 'wallet_transactions', ['user_id', 'created_at'])
    op.create_index('ix_wallet_transactions_type_status', 'wallet_transactions', ['transaction_type', 'status'])

    # Platform wallet aggregate
    op.create_table(
        'platform_wallets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('wallet_id', sa.String(64), nullable=False),
        sa.Column('balance', sa.DECIMAL(18, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='INR'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('wallet_id')
    )

    # Activity log
    op.create_table(
        'user_activities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('activity_type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column(
            'extra_data',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=True
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_activities_user_id', 'user_activities', ['user_id'])
    op.create_index('ix_user_activities_user_id_created', 'user_activities', ['user_id', 'created_at'])
    op.create_index('ix_user_activities_type_created', 'user_activities', ['activity_type', 'created_at'])


def downgrade() -> None:
    op.drop_table('user_activities')
    op.drop_table('platform_wallets')
    op.drop_table('wallet_transactions')
    op.drop_table('earnings')
    op.drop_table('commissions')
    op.drop_table('referral_ancestors')
    op.drop_table('users')
