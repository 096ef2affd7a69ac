"""Create reconciliation engine tables

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
    op.create_table(
        'monitoring_tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('kind', sa.String(32), nullable=False),
        sa.Column('is_running', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('interval_seconds', sa.Integer(), nullable=False, server_default='120'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('interval_seconds > 0', name='check_monitoring_interval_positive'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('kind'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('referrer_username', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_referrer_username', 'users', ['referrer_username'])

    op.create_table(
        'wallets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('withdraw_address', sa.String(255), nullable=True),
        sa.Column('native_gas_balance', sa.DECIMAL(36, 18), nullable=False, server_default='0'),
        sa.Column('stable_token_balance', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('stable_token_balance >= 0', name='check_wallet_token_balance_non_negative'),
        sa.CheckConstraint('native_gas_balance >= 0', name='check_wallet_gas_balance_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('address'),
    )
    op.create_index('ix_wallets_user_id', 'wallets', ['user_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('token', sa.String(20), nullable=False),
        sa.Column('tx_hash', sa.String(255), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('wallet_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount >= 0', name='check_transaction_amount_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tx_hash'),
    )
    op.create_index('ix_transactions_type', 'transactions', ['type'])
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_wallet_id', 'transactions', ['wallet_id'])

    op.create_table(
        'referrer_edges',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_name', sa.String(255), nullable=False),
        sa.Column('referrer_user_name', sa.String(255), nullable=False),
        sa.Column('package_type', sa.String(100), nullable=False),
        sa.Column('fee_rate', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('group_leader_name', sa.String(255), nullable=True),
        sa.Column('fee_rate_leader', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('fee_rate >= 0 AND fee_rate <= 100', name='check_referrer_edge_fee_rate_range'),
        sa.CheckConstraint(
            'fee_rate_leader >= 0 AND fee_rate_leader <= 100',
            name='check_referrer_edge_leader_rate_range',
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_name', 'package_type', name='uq_referrer_edge_user_package'),
    )
    op.create_index('ix_referrer_edges_user_name', 'referrer_edges', ['user_name'])

    op.create_table(
        'referral_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('group_leader_name', sa.String(255), nullable=True),
        sa.Column('payer_user_name', sa.String(255), nullable=False),
        sa.Column('payee_user_name', sa.String(255), nullable=False),
        sa.Column('package_type', sa.String(100), nullable=False),
        sa.Column('profit', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_referral_logs_payer_user_name', 'referral_logs', ['payer_user_name'])
    op.create_index('ix_referral_logs_payee_user_name', 'referral_logs', ['payee_user_name'])
    op.create_index('ix_referral_logs_created_at', 'referral_logs', ['created_at'])

    op.create_table(
        'coin_prices',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('coin_name', sa.String(20), nullable=False),
        sa.Column('language', sa.String(8), nullable=False),
        sa.Column('currency', sa.String(10), nullable=False),
        sa.Column('price', sa.DECIMAL(28, 8), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_coin_price_coin_language', 'coin_prices', ['coin_name', 'language'])


def downgrade() -> None:
    op.drop_index('idx_coin_price_coin_language', 'coin_prices')
    op.drop_table('coin_prices')

    op.drop_index('ix_referral_logs_created_at', 'referral_logs')
    op.drop_index('ix_referral_logs_payee_user_name', 'referral_logs')
    op.drop_index('ix_referral_logs_payer_user_name', 'referral_logs')
    op.drop_table('referral_logs')

    op.drop_index('ix_referrer_edges_user_name', 'referrer_edges')
    op.drop_table('referrer_edges')

    op.drop_index('ix_transactions_wallet_id', 'transactions')
    op.drop_index('ix_transactions_user_id', 'transactions')
    op.drop_index('ix_transactions_type', 'transactions')
    op.drop_table('transactions')

    op.drop_index('ix_wallets_user_id', 'wallets')
    op.drop_table('wallets')

    op.drop_index('ix_users_referrer_username', 'users')
    op.drop_index('ix_users_username', 'users')
    op.drop_table('users')

    op.drop_table('monitoring_tasks')
