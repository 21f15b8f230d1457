"""Create customers, invoices and invoice_line_items tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Invoices are keyed by their printed number (INV-/CSH-YYMMnnnnn) and carry
the totals computed at issuance plus the interest terms.
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
        'customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('father_name', sa.String(150), nullable=True),
        sa.Column('business_name', sa.String(200), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('gstin', sa.String(15), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_name', 'customers', ['name'])

    op.create_table(
        'invoices',
        sa.Column('id', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('payment_mode', sa.String(20), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('cgst', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('sgst', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('discount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('total', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('interest_rate', sa.Numeric(precision=6, scale=3), nullable=False),
        sa.Column('interest_compound', sa.String(20), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['customer_id'],
            ['customers.id'],
            name='fk_invoices_customer_id',
            ondelete='RESTRICT',
        ),
    )
    op.create_index('ix_invoices_customer_id', 'invoices', ['customer_id'])
    op.create_index('ix_invoices_issue_date', 'invoices', ['issue_date'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])
    op.create_index('ix_invoices_is_deleted', 'invoices', ['is_deleted'])

    op.create_table(
        'invoice_line_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('invoice_id', sa.String(20), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('item_name', sa.String(200), nullable=False),
        sa.Column('hsn', sa.String(20), nullable=True),
        sa.Column('purity', sa.String(20), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('gross_weight', sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column('net_weight', sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column('rate', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('making_charge_type', sa.String(20), nullable=False),
        sa.Column('making_charge_value', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('apply_tax', sa.Boolean(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['invoice_id'],
            ['invoices.id'],
            name='fk_invoice_line_items_invoice_id',
            ondelete='CASCADE',
        ),
    )
    op.create_index('ix_invoice_line_items_invoice_id', 'invoice_line_items', ['invoice_id'])


def downgrade() -> None:
    op.drop_index('ix_invoice_line_items_invoice_id', table_name='invoice_line_items')
    op.drop_table('invoice_line_items')
    op.drop_index('ix_invoices_is_deleted', table_name='invoices')
    op.drop_index('ix_invoices_due_date', table_name='invoices')
    op.drop_index('ix_invoices_issue_date', table_name='invoices')
    op.drop_index('ix_invoices_customer_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_customers_name', table_name='customers')
    op.drop_table('customers')
