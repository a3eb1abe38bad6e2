"""initial e-bucks schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the complete E-Bucks schema:
- users: PIN-identified participants with an hourly rate
- vouchers: Single-use money, amounts in cents
- inventory: Store shelf
- transactions / sales_log: Purchase history
- timesheets: Clock-in/out shifts feeding payroll
- printers: Station printer registry
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # users
    # ============================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('pin_hash', sa.String(length=255), nullable=False),
        sa.Column('hourly_rate_cents', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_users_active_name', 'users', ['is_active', 'name'])

    # ============================================================================
    # vouchers: never deleted, flipped to is_used exactly once
    # ============================================================================
    op.create_table(
        'vouchers',
        sa.Column('id', sa.String(length=16), nullable=False),
        sa.Column('amount_cents', sa.Integer(), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('source', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('amount_cents > 0', name='ck_vouchers_amount_positive'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vouchers_is_used', 'vouchers', ['is_used'])
    op.create_index('ix_vouchers_owner_id', 'vouchers', ['owner_id'])
    op.create_index('ix_vouchers_owner_used', 'vouchers', ['owner_id', 'is_used'])

    # ============================================================================
    # inventory
    # ============================================================================
    op.create_table(
        'inventory',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('barcode', sa.String(length=64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_inventory_active_name', 'inventory', ['is_active', 'name'])
    op.create_index('ix_inventory_barcode', 'inventory', ['barcode'])

    # ============================================================================
    # transactions / sales_log: append-only purchase history
    # ============================================================================
    op.create_table(
        'transactions',
        sa.Column('id', sa.String(length=16), nullable=False),
        sa.Column('total_cost_cents', sa.Integer(), nullable=False),
        sa.Column('tendered_cents', sa.Integer(), nullable=False),
        sa.Column('change_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('change_voucher_id', sa.String(length=16), nullable=True),
        sa.Column('item_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['change_voucher_id'], ['vouchers.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])

    op.create_table(
        'sales_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.String(length=16), nullable=False),
        sa.Column('inventory_item_id', sa.Integer(), nullable=True),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('sold_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id'], ),
        sa.ForeignKeyConstraint(['inventory_item_id'], ['inventory.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_sales_log_transaction_id', 'sales_log', ['transaction_id'])
    op.create_index('ix_sales_log_item_name', 'sales_log', ['item_name'])

    # ============================================================================
    # timesheets
    # ============================================================================
    op.create_table(
        'timesheets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=False),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_minutes', sa.Integer(), nullable=True),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('paid_voucher_id', sa.String(length=16), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['paid_voucher_id'], ['vouchers.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_timesheets_user_id', 'timesheets', ['user_id'])
    op.create_index('ix_timesheets_user_paid', 'timesheets', ['user_id', 'is_paid'])

    # ============================================================================
    # printers
    # ============================================================================
    op.create_table(
        'printers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('assignment', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_printers_assignment', 'printers', ['assignment'])


def downgrade():
    op.drop_table('printers')
    op.drop_table('timesheets')
    op.drop_table('sales_log')
    op.drop_table('transactions')
    op.drop_table('inventory')
    op.drop_table('vouchers')
    op.drop_table('users')
