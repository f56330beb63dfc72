"""create scrap ledger tables

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2025-11-02 10:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b901'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _soft_delete():
    return [
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    """Create vendors, rates, purchases, payments, snapshots, accounts and the audit log."""
    vendor_category = sa.Enum('KABADIWALA', 'FERIWALA', name='vendorcategory')
    vendor_status = sa.Enum('ACTIVE', 'INACTIVE', name='vendorstatus')
    payment_status = sa.Enum('PENDING', 'PARTIAL', 'PAID', name='paymentstatus')
    account_type = sa.Enum('CASH', 'BANK', name='accounttype')
    transaction_type = sa.Enum('DEBIT', 'CREDIT', name='transactiontype')

    op.create_table(
        'vendors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', vendor_category, nullable=False),
        sa.Column('status', vendor_status, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_vendors_id', 'vendors', ['id'])
    op.create_index('ix_vendors_category', 'vendors', ['category'])

    op.create_table(
        'scrap_types',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('material_type', sa.String(), nullable=False),
        sa.Column('global_rate', sa.Numeric(12, 2), nullable=False),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('material_type'),
    )
    op.create_index('ix_scrap_types_id', 'scrap_types', ['id'])

    op.create_table(
        'vendor_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('scrap_type_id', sa.Integer(), nullable=False),
        sa.Column('vendor_rate', sa.Numeric(12, 2), nullable=False),
        sa.Column('rate_offset', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['scrap_type_id'], ['scrap_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('vendor_id', 'scrap_type_id', name='_vendor_scrap_type_uc'),
    )
    op.create_index('ix_vendor_rates_id', 'vendor_rates', ['id'])
    op.create_index('ix_vendor_rates_vendor_id', 'vendor_rates', ['vendor_id'])
    op.create_index('ix_vendor_rates_scrap_type_id', 'vendor_rates', ['scrap_type_id'])

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('godown_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('account_type', account_type, nullable=False),
        sa.Column('balance', sa.Numeric(14, 2), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_accounts_id', 'accounts', ['id'])
    op.create_index('ix_accounts_company_id', 'accounts', ['company_id'])
    op.create_index('ix_accounts_godown_id', 'accounts', ['godown_id'])

    op.create_table(
        'account_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('godown_id', sa.String(), nullable=False),
        sa.Column('txn_type', transaction_type, nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('reference', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_account_transactions_id', 'account_transactions', ['id'])
    op.create_index('ix_account_transactions_account_id', 'account_transactions', ['account_id'])

    op.create_table(
        'scrap_purchases',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('godown_id', sa.String(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('payment_status', payment_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        *_soft_delete(),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_scrap_purchases_id', 'scrap_purchases', ['id'])
    op.create_index(
        'ix_scrap_purchases_scope_vendor_date', 'scrap_purchases',
        ['company_id', 'godown_id', 'vendor_id', 'purchase_date'],
    )

    op.create_table(
        'purchase_line_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('purchase_id', sa.Integer(), nullable=False),
        sa.Column('scrap_type_id', sa.Integer(), nullable=False),
        sa.Column('material', sa.String(), nullable=False),
        sa.Column('weight', sa.Numeric(12, 3), nullable=False),
        sa.Column('rate', sa.Numeric(12, 2), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.ForeignKeyConstraint(['purchase_id'], ['scrap_purchases.id']),
        sa.ForeignKeyConstraint(['scrap_type_id'], ['scrap_types.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_purchase_line_items_id', 'purchase_line_items', ['id'])
    op.create_index('ix_purchase_line_items_purchase_id', 'purchase_line_items', ['purchase_id'])

    op.create_table(
        'vendor_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('godown_id', sa.String(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('purchase_id', sa.Integer(), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_mode', sa.String(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('account_id', sa.Integer(), nullable=True),
        *_timestamps(),
        *_soft_delete(),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id']),
        sa.ForeignKeyConstraint(['purchase_id'], ['scrap_purchases.id']),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vendor_payments_id', 'vendor_payments', ['id'])
    op.create_index(
        'ix_vendor_payments_scope_vendor_date', 'vendor_payments',
        ['company_id', 'godown_id', 'vendor_id', 'payment_date'],
    )

    op.create_table(
        'vendor_daily_balances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('godown_id', sa.String(), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('balance_date', sa.Date(), nullable=False),
        sa.Column('previous_balance', sa.Numeric(12, 2), nullable=False),
        sa.Column('purchase_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('current_balance', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'godown_id', 'vendor_id', 'balance_date', name='_scope_vendor_date_uc'),
    )
    op.create_index('ix_vendor_daily_balances_id', 'vendor_daily_balances', ['id'])
    op.create_index('ix_vendor_daily_balances_vendor_id', 'vendor_daily_balances', ['vendor_id'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_log_id', 'audit_log', ['id'])


def downgrade() -> None:
    for table in (
        'audit_log',
        'vendor_daily_balances',
        'vendor_payments',
        'purchase_line_items',
        'scrap_purchases',
        'account_transactions',
        'accounts',
        'vendor_rates',
        'scrap_types',
        'vendors',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_name in ('transactiontype', 'accounttype', 'paymentstatus', 'vendorstatus', 'vendorcategory'):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
