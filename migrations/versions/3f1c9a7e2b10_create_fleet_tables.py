"""create_fleet_tables

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-18 09:12:44.301562

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a7e2b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('model', sa.String(), nullable=False),
        sa.Column('license_plate', sa.String(), nullable=False),
        sa.Column('max_capacity', sa.Numeric(12, 2), nullable=False),
        sa.Column('odometer', sa.Float(), nullable=False, server_default='0'),
        sa.Column('acquisition_cost', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('region', sa.String(), nullable=False, server_default='Main'),
        sa.Column('vehicle_type', sa.String(), nullable=False, server_default='Truck'),
        sa.Column('status', sa.String(), nullable=False, server_default='Available'),
        sa.Column('current_lat', sa.Float(), nullable=True),
        sa.Column('current_lng', sa.Float(), nullable=True),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vehicles_id', 'vehicles', ['id'])
    op.create_index('ix_vehicles_license_plate', 'vehicles', ['license_plate'], unique=True)
    op.create_index('ix_vehicles_status', 'vehicles', ['status'])

    op.create_table(
        'drivers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('license_number', sa.String(), nullable=False),
        sa.Column('license_category', sa.String(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('safety_score', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('region', sa.String(), nullable=False, server_default='Main'),
        sa.Column('status', sa.String(), nullable=False, server_default='Off Duty'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('license_number'),
    )
    op.create_index('ix_drivers_id', 'drivers', ['id'])
    op.create_index('ix_drivers_name', 'drivers', ['name'])

    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id'), nullable=False),
        sa.Column('driver_id', sa.Integer(), sa.ForeignKey('drivers.id'), nullable=False),
        sa.Column('cargo_weight', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('revenue', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('start_location', sa.String(), nullable=True),
        sa.Column('end_location', sa.String(), nullable=True),
        sa.Column('start_odometer', sa.Float(), nullable=False, server_default='0'),
        sa.Column('end_odometer', sa.Float(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='Draft'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_trips_id', 'trips', ['id'])
    op.create_index('ix_trips_vehicle_id', 'trips', ['vehicle_id'])
    op.create_index('ix_trips_driver_id', 'trips', ['driver_id'])
    op.create_index('ix_trips_status', 'trips', ['status'])
    op.create_index('ix_trips_created_at', 'trips', ['created_at'])

    op.create_table(
        'maintenance_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_type', sa.String(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('service_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_logs_id', 'maintenance_logs', ['id'])
    op.create_index('ix_maintenance_logs_vehicle_id', 'maintenance_logs', ['vehicle_id'])

    op.create_table(
        'fuel_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('liters', sa.Float(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_fuel_logs_id', 'fuel_logs', ['id'])
    op.create_index('ix_fuel_logs_vehicle_id', 'fuel_logs', ['vehicle_id'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])


def downgrade() -> None:
    # Children first so the foreign keys go with them
    for table in ['fuel_logs', 'maintenance_logs', 'trips', 'profiles', 'drivers', 'vehicles']:
        op.drop_table(table)
