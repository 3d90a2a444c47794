"""initial schema: properties, purchase/loan details, rent & payment logs, transactions, contacts, tenants

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── properties ─────────────────────────────────────────────────────────────
    op.create_table(
        'properties',
        sa.Column('property_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('city', sa.Text(), nullable=True),
        sa.Column('state', sa.Text(), nullable=True),
        sa.Column('zipcode', sa.String(20), nullable=True),
        sa.Column('county', sa.Text(), nullable=True),
        sa.Column('owner', sa.Text(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('type', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('geocoded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # ── purchase_details ───────────────────────────────────────────────────────
    op.create_table(
        'purchase_details',
        sa.Column('purchase_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('closing_date', sa.Date(), nullable=True),
        sa.Column('purchase_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('financing_type', sa.Text(), nullable=True),
        sa.Column('acquisition_type', sa.Text(), nullable=True),
        sa.Column('buyer', sa.Text(), nullable=True),
        sa.Column('seller', sa.Text(), nullable=True),
        sa.Column('closing_costs', sa.Numeric(12, 2), nullable=True),
        sa.Column('earnest_money', sa.Numeric(12, 2), nullable=True),
        sa.Column('down_payment', sa.Numeric(12, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    # ── loan_details ───────────────────────────────────────────────────────────
    op.create_table(
        'loan_details',
        sa.Column('loan_id', sa.String(100), primary_key=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('purchase_id', sa.Integer(), sa.ForeignKey('purchase_details.purchase_id', ondelete='CASCADE'), nullable=False),
        sa.Column('loan_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('lender', sa.Text(), nullable=True),
        sa.Column('interest_rate', sa.Numeric(6, 4), nullable=True),
        sa.Column('loan_term', sa.Integer(), nullable=True),
        sa.Column('loan_start', sa.Date(), nullable=True),
        sa.Column('loan_end', sa.Date(), nullable=True),
        sa.Column('amortization_period', sa.Integer(), nullable=True),
        sa.Column('monthly_payment', sa.Numeric(12, 2), nullable=True),
        sa.Column('loan_type', sa.Text(), nullable=True),
        sa.Column('balloon_payment', sa.Boolean(), nullable=True),
        sa.Column('prepayment_penalty', sa.Boolean(), nullable=True),
        sa.Column('refinanced', sa.Boolean(), nullable=True),
        sa.Column('loan_status', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('property_id', 'purchase_id', name='uq_loan_details_property_purchase'),
    )

    # ── rent_log ───────────────────────────────────────────────────────────────
    op.create_table(
        'rent_log',
        sa.Column('rent_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('month', sa.String(3), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('rent_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('date_deposited', sa.Date(), nullable=False),
        sa.Column('check_number', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('property_id', 'month', 'year', name='uq_rent_log_property_month_year'),
    )

    # ── payment_log ────────────────────────────────────────────────────────────
    op.create_table(
        'payment_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.String(3), nullable=False),
        sa.Column('payment_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('check_number', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('date_paid', sa.Date(), nullable=True),
        sa.UniqueConstraint('property_id', 'month', 'year', name='uq_payment_log_property_month_year'),
    )

    # ── transactions ───────────────────────────────────────────────────────────
    op.create_table(
        'transactions',
        sa.Column('transaction_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('transaction_type', sa.String(100), nullable=True),
        sa.Column('notes', sa.String(255), nullable=True),
        sa.Column('transaction_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=False),
    )

    # ── contacts ───────────────────────────────────────────────────────────────
    op.create_table(
        'contacts',
        sa.Column('contact_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('contact_name', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(20), nullable=False),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('contact_type', sa.String(100), nullable=True),
        sa.Column('contact_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # ── tenant ─────────────────────────────────────────────────────────────────
    op.create_table(
        'tenant',
        sa.Column('tenant_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.property_id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        sa.Column('tenant_status', sa.String(50), nullable=True, index=True),
        sa.Column('lease_start', sa.Date(), nullable=True),
        sa.Column('lease_end', sa.Date(), nullable=True),
        sa.Column('rent_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint('property_id', 'tenant_name', 'lease_start', name='uq_tenant_property_name_start'),
    )


def downgrade() -> None:
    op.drop_table('tenant')
    op.drop_table('contacts')
    op.drop_table('transactions')
    op.drop_table('payment_log')
    op.drop_table('rent_log')
    op.drop_table('loan_details')
    op.drop_table('purchase_details')
    op.drop_table('properties')
