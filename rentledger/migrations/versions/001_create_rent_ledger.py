"""Create rent ledger tables.

Revision ID: 001_create_rent_ledger
Revises: None
Create Date: 2025-11-09 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_rent_ledger'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create rent ledger tables."""
    op.create_table(
        'properties',
        *_timestamps(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'tenants',
        *_timestamps(),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('property_id', sa.Integer(), nullable=True),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_property_id', 'tenants', ['property_id'])

    op.create_table(
        'leases',
        *_timestamps(),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=True),
        sa.Column('lease_start', sa.Date(), nullable=False),
        sa.Column('lease_end', sa.Date(), nullable=False),
        sa.Column('due_day', sa.Integer(), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('billing_mode', sa.String(20), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('idx_lease_tenant_start', 'leases', ['tenant_id', 'lease_start'])

    op.create_table(
        'payments',
        *_timestamps(),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('method', sa.String(50), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_payment_date', 'payments', ['payment_date'])

    op.create_table(
        'rent_periods',
        *_timestamps(),
        sa.Column('lease_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('due_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('balance', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('last_payment_date', sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(['lease_id'], ['leases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('lease_id', 'month', 'year', name='uq_rent_period_lease_month_year'),
    )
    op.create_index('ix_rent_periods_lease_id', 'rent_periods', ['lease_id'])
    op.create_index('idx_rent_period_lease_status', 'rent_periods', ['lease_id', 'status'])
    op.create_index('idx_rent_period_lease_year_month', 'rent_periods', ['lease_id', 'year', 'month'])


def downgrade() -> None:
    """Drop rent ledger tables."""
    op.drop_table('rent_periods')
    op.drop_table('payments')
    op.drop_table('leases')
    op.drop_table('tenants')
    op.drop_table('properties')
