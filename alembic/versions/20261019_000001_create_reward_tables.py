"""Create users and GDP reward tables

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table (referral tree + claim flag cache)
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='member'),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('gdp_price', sa.DECIMAL(18, 8), nullable=True),
        sa.Column('balance', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('claimed_130', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('claimed_150', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('claimed_200', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('claimed_300', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('claimed_500', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('claimed_1000', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reward_claimed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint('gdp_price IS NULL OR gdp_price > 0', name='check_user_gdp_price_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_index('ix_users_parent_id', 'users', ['parent_id'])
    op.create_index('ix_users_gdp_price', 'users', ['gdp_price'])

    # Create reward_claims table - one row per (user, tier), never updated
    op.create_table(
        'reward_claims',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('tier', sa.String(10), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'tier', name='uq_reward_claims_user_tier')
    )
    op.create_index('idx_reward_claims_user_claimed_at', 'reward_claims', ['user_id', 'claimed_at'])

    # Create reward_ledger table
    op.create_table(
        'reward_ledger',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('reason', sa.String(50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['claim_id'], ['reward_claims.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'reason', name='uq_reward_ledger_user_reason')
    )
    op.create_index('ix_reward_ledger_user_id', 'reward_ledger', ['user_id'])

    # Create reward_settings table (single row, read-only for the engine)
    op.create_table(
        'reward_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('percentage', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('investment_percentage', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('investment_term', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('gdp_reward_percentage', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('percentage >= 0 AND percentage <= 100', name='check_reward_settings_percentage_range'),
        sa.CheckConstraint('investment_percentage >= 0 AND investment_percentage <= 100', name='check_reward_settings_investment_percentage_range'),
        sa.CheckConstraint('gdp_reward_percentage >= 0 AND gdp_reward_percentage <= 100', name='check_reward_settings_gdp_reward_percentage_range'),
        sa.CheckConstraint('investment_term >= 0', name='check_reward_settings_investment_term_non_negative')
    )


def downgrade() -> None:
    op.drop_table('reward_settings')

    op.drop_index('ix_reward_ledger_user_id', 'reward_ledger')
    op.drop_table('reward_ledger')

    op.drop_index('idx_reward_claims_user_claimed_at', 'reward_claims')
    op.drop_table('reward_claims')

    op.drop_index('ix_users_gdp_price', 'users')
    op.drop_index('ix_users_parent_id', 'users')
    op.drop_index('ix_users_username', 'users')
    op.drop_table('users')
