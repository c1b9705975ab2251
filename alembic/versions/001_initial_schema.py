"""Initial Strukture schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

All 10 tables, money as INTEGER CENTS (BIGINT).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLE = sa.Enum('TENANT', 'LANDLORD', 'ADMIN', name='userrole')
USER_STATUS = sa.Enum('ACTIVE', 'INACTIVE', 'PENDING', 'SUSPENDED', name='userstatus')
EMPLOYMENT_STATUS = sa.Enum(
    'EMPLOYED', 'SELF_EMPLOYED', 'UNEMPLOYED', 'STUDENT', 'RETIRED', name='employmentstatus'
)
PROPERTY_TYPE = sa.Enum(
    'SINGLE_FAMILY', 'MULTI_FAMILY', 'APARTMENT', 'CONDO', 'TOWNHOUSE', 'COMMERCIAL', name='propertytype'
)
PROPERTY_STATUS = sa.Enum('ACTIVE', 'INACTIVE', 'UNDER_RENOVATION', name='propertystatus')
UNIT_STATUS = sa.Enum('VACANT', 'OCCUPIED', 'UNDER_MAINTENANCE', 'RESERVED', name='unitstatus')
LEASE_STATUS = sa.Enum(
    'DRAFT', 'PENDING_SIGNATURE', 'ACTIVE', 'EXPIRED', 'TERMINATED', 'RENEWED', name='leasestatus'
)
PAYMENT_TYPE = sa.Enum('RENT', 'DEPOSIT', 'LATE_FEE', 'UTILITY', 'MAINTENANCE', 'OTHER', name='paymenttype')
PAYMENT_METHOD = sa.Enum(
    'ACH', 'DEBIT_CARD', 'CREDIT_CARD', 'CASHIER_CHECK', 'CASH', 'OTHER', name='paymentmethod'
)
PAYMENT_STATUS = sa.Enum(
    'PENDING', 'PROCESSING', 'COMPLETED', 'FAILED', 'REFUNDED', 'CANCELLED', name='paymentstatus'
)
MAINTENANCE_CATEGORY = sa.Enum(
    'PLUMBING', 'ELECTRICAL', 'HVAC', 'APPLIANCE', 'STRUCTURAL', 'PEST_CONTROL',
    'LANDSCAPING', 'CLEANING', 'SECURITY', 'OTHER',
    name='maintenancecategory',
)
MAINTENANCE_PRIORITY = sa.Enum('LOW', 'MEDIUM', 'HIGH', 'EMERGENCY', name='maintenancepriority')
MAINTENANCE_STATUS = sa.Enum(
    'SUBMITTED', 'ACKNOWLEDGED', 'IN_PROGRESS', 'ON_HOLD', 'COMPLETED', 'CANCELLED', name='maintenancestatus'
)
NOTIFICATION_CHANNEL = sa.Enum('IN_APP', 'EMAIL', 'TELEGRAM', name='notificationchannel')
NOTIFICATION_CATEGORY = sa.Enum(
    'PAYMENT_REMINDER', 'PAYMENT_RECEIVED', 'LEASE_EXPIRING', 'MAINTENANCE_UPDATE', 'GENERAL', 'SYSTEM',
    name='notificationcategory',
)
AUDIT_ACTION = sa.Enum(
    'TENANT_ONBOARDING_COMPLETED', 'LEASE_ACTIVATED', 'LEASE_TERMINATED', 'LEASE_RENEWED',
    'PAYMENT_RECORDED', 'PAYMENT_REFUNDED', 'PROPERTY_DELETED', 'UNIT_DELETED',
    name='auditaction',
)

ALL_ENUMS = (
    USER_ROLE, USER_STATUS, EMPLOYMENT_STATUS, PROPERTY_TYPE, PROPERTY_STATUS, UNIT_STATUS,
    LEASE_STATUS, PAYMENT_TYPE, PAYMENT_METHOD, PAYMENT_STATUS, MAINTENANCE_CATEGORY,
    MAINTENANCE_PRIORITY, MAINTENANCE_STATUS, NOTIFICATION_CHANNEL, NOTIFICATION_CATEGORY, AUDIT_ACTION,
)


def upgrade() -> None:
    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('first_name', sa.String(50), nullable=True),
        sa.Column('last_name', sa.String(50), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('role', USER_ROLE, nullable=False, index=True),
        sa.Column('status', USER_STATUS, nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('ssn_encrypted', sa.Text(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(100), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(20), nullable=True),
        sa.Column('emergency_contact_relation', sa.String(50), nullable=True),
        sa.Column('employment_status', EMPLOYMENT_STATUS, nullable=True),
        sa.Column('employer_name', sa.String(100), nullable=True),
        sa.Column('employer_phone', sa.String(20), nullable=True),
        sa.Column('monthly_income_cents', sa.BigInteger(), nullable=True),
        sa.Column('stripe_customer_id', sa.String(255), nullable=True),
        sa.Column('telegram_chat_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('property_type', PROPERTY_TYPE, nullable=False),
        sa.Column('status', PROPERTY_STATUS, nullable=False, index=True),
        sa.Column('address_line1', sa.String(200), nullable=False),
        sa.Column('address_line2', sa.String(200), nullable=True),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(50), nullable=False),
        sa.Column('zip_code', sa.String(10), nullable=False),
        sa.Column('country', sa.String(50), default='US'),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('total_units', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('parking_spaces', sa.Integer(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('license_number', sa.String(50), nullable=True),
        sa.Column('license_expiry', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === UNITS ===
    op.create_table(
        'units',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('unit_number', sa.String(20), nullable=False),
        sa.Column('status', UNIT_STATUS, nullable=False, index=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Float(), nullable=True),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('deposit_amount_cents', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('features', sa.JSON(), nullable=True),
        sa.Column('pet_policy', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('property_id', 'unit_number', name='uq_unit_property_number'),
    )

    # === LEASES ===
    op.create_table(
        'leases',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('unit_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('units.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renewed_from_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('leases.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', LEASE_STATUS, nullable=False, index=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('move_in_date', sa.Date(), nullable=True),
        sa.Column('move_out_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('deposit_amount_cents', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('late_fee_cents', sa.BigInteger(), nullable=True),
        sa.Column('rent_due_day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('grace_period_days', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('tenant_signature', sa.Text(), nullable=True),
        sa.Column('tenant_signed_at', sa.DateTime(), nullable=True),
        sa.Column('tenant_signed_ip', sa.String(45), nullable=True),
        sa.Column('landlord_signed_at', sa.DateTime(), nullable=True),
        sa.Column('terminated_at', sa.DateTime(), nullable=True),
        sa.Column('termination_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === PAYMENTS ===
    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('lease_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('leases.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('received_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', PAYMENT_TYPE, nullable=False),
        sa.Column('method', PAYMENT_METHOD, nullable=False),
        sa.Column('status', PAYMENT_STATUS, nullable=False, index=True),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('period_start', sa.Date(), nullable=True),
        sa.Column('period_end', sa.Date(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('stripe_payment_intent_id', sa.String(255), unique=True, nullable=True, index=True),
        sa.Column('stripe_charge_id', sa.String(255), nullable=True),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        sa.Column('check_number', sa.String(50), nullable=True),
        sa.Column('check_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount_cents > 0', name='ck_payment_amount_positive'),
    )

    # === STORED PAYMENT METHODS ===
    op.create_table(
        'stored_payment_methods',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('stripe_payment_method_id', sa.String(255), unique=True, nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('brand', sa.String(50), nullable=True),
        sa.Column('bank_name', sa.String(100), nullable=True),
        sa.Column('last4', sa.String(4), nullable=True),
        sa.Column('exp_month', sa.Integer(), nullable=True),
        sa.Column('exp_year', sa.Integer(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === MAINTENANCE REQUESTS ===
    op.create_table(
        'maintenance_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('unit_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('units.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('assigned_to_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', MAINTENANCE_CATEGORY, nullable=False),
        sa.Column('priority', MAINTENANCE_PRIORITY, nullable=False),
        sa.Column('status', MAINTENANCE_STATUS, nullable=False, index=True),
        sa.Column('entry_permission', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('preferred_times', sa.String(500), nullable=True),
        sa.Column('photo_urls', sa.JSON(), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=True),
        sa.Column('scheduled_time_slot', sa.String(100), nullable=True),
        sa.Column('estimated_cost_cents', sa.BigInteger(), nullable=True),
        sa.Column('actual_cost_cents', sa.BigInteger(), nullable=True),
        sa.Column('vendor_name', sa.String(100), nullable=True),
        sa.Column('vendor_phone', sa.String(20), nullable=True),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        sa.Column('acknowledged_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === MAINTENANCE UPDATES (append-only log) ===
    op.create_table(
        'maintenance_updates',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('request_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('maintenance_requests.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('created_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('previous_status', MAINTENANCE_STATUS, nullable=True),
        sa.Column('new_status', MAINTENANCE_STATUS, nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('photo_urls', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
    )

    # === NOTIFICATIONS ===
    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('channel', NOTIFICATION_CHANNEL, nullable=False),
        sa.Column('category', NOTIFICATION_CATEGORY, nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('read_at', sa.DateTime(), nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
    )

    # === AUDIT LOG (append-only) ===
    op.create_table(
        'audit_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', AUDIT_ACTION, nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('audit_log')
    op.drop_table('notifications')
    op.drop_table('maintenance_updates')
    op.drop_table('maintenance_requests')
    op.drop_table('stored_payment_methods')
    op.drop_table('payments')
    op.drop_table('leases')
    op.drop_table('units')
    op.drop_table('properties')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in ALL_ENUMS:
        enum.drop(bind, checkfirst=True)
