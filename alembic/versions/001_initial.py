# alembic/versions/001_initial.py

"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create routes table
    op.create_table('routes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('route_id', sa.String(length=50), nullable=False),
        sa.Column('vessel_type', sa.String(length=50), nullable=False),
        sa.Column('fuel_type', sa.String(length=50), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('ghg_intensity', sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column('fuel_consumption', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('distance', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('is_baseline', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_routes_route_id', 'routes', ['route_id'], unique=True)
    op.create_index(
        'uq_routes_single_baseline', 'routes', ['is_baseline'],
        unique=True,
        postgresql_where=sa.text('is_baseline = true'),
        sqlite_where=sa.text('is_baseline = 1'),
    )

    # Create banking_records table
    op.create_table('banking_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ship_id', sa.String(length=100), nullable=False),
        sa.Column('transaction_type', sa.Enum('BANK', 'BORROW', name='transactiontypeenum'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=24, scale=4), nullable=False),
        sa.Column('source_year', sa.Integer(), nullable=True),
        sa.Column('resulting_balance', sa.Numeric(precision=24, scale=4), nullable=False),
        sa.Column('transaction_date', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_banking_records_ship_id', 'banking_records', ['ship_id'])
    op.create_index('ix_banking_records_ship_date', 'banking_records', ['ship_id', 'transaction_date'])
    op.create_index('ix_banking_records_ship_year', 'banking_records', ['ship_id', 'year'])

    # Create pools table
    op.create_table('pools',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pool_name', sa.String(length=200), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('members', sa.JSON(), nullable=False),
        sa.Column('total_cb', sa.Numeric(precision=24, scale=4), nullable=False),
        sa.Column('is_compliant', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pools_pool_name', 'pools', ['pool_name'], unique=True)
    op.create_index('ix_pools_year', 'pools', ['year'])


def downgrade():
    op.drop_index('ix_pools_year', table_name='pools')
    op.drop_index('ix_pools_pool_name', table_name='pools')
    op.drop_table('pools')

    op.drop_index('ix_banking_records_ship_year', table_name='banking_records')
    op.drop_index('ix_banking_records_ship_date', table_name='banking_records')
    op.drop_index('ix_banking_records_ship_id', table_name='banking_records')
    op.drop_table('banking_records')
    sa.Enum(name='transactiontypeenum').drop(op.get_bind(), checkfirst=True)

    op.drop_index('uq_routes_single_baseline', table_name='routes')
    op.drop_index('ix_routes_route_id', table_name='routes')
    op.drop_table('routes')
