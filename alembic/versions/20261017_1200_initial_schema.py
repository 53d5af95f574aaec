"""Initial YaraCheck schema

Revision ID: 20261017_1200_initial_schema
Revises:
Create Date: 2026-10-17 12:00:00.000000

Creates:
- countries, provinces, profiles
- the seven report tables (persons, devices, vehicles, household_items,
  personal_belongings, hacked_accounts, business_reputation_reports)
- transactions (pending paid submissions)
- roi_distributions, roi_withdrawal_requests
- company_assets
- support_tickets, live_chat_messages, anonymous_messages
- audit_logs

Enum types store member names, matching SQLAlchemy's default Enum mapping.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '20261017_1200_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _profile_fk(name, ondelete='SET NULL', nullable=True):
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey('profiles.id', ondelete=ondelete),
        nullable=nullable,
    )


def _report_columns():
    """Columns shared by every report table."""
    return [
        sa.Column('tracking_code', sa.String(64), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('visible', sa.Boolean(), nullable=True),
        sa.Column('report_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column(
            'country_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('countries.id', ondelete='SET NULL'),
            nullable=True,
        ),
        _profile_fk('user_id'),
        sa.Column('reporter_name', sa.String(255), nullable=True),
        sa.Column('reporter_email', sa.String(255), nullable=True),
        sa.Column('reporter_phone', sa.String(30), nullable=True),
        sa.Column('reporter_address', sa.Text(), nullable=True),
    ]


def _item_columns():
    """Columns shared by physical-item reports."""
    return _report_columns() + [
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('brand', sa.String(100), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('color', sa.String(50), nullable=True),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('contact', sa.String(255), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
    ]


def _report_indexes(table):
    op.create_index(f'ix_{table}_tracking_code', table, ['tracking_code'], unique=True)
    op.create_index(f'ix_{table}_country_id', table, ['country_id'])
    op.create_index(f'ix_{table}_reporter_email', table, ['reporter_email'])


REPORT_TABLES = [
    'persons',
    'devices',
    'vehicles',
    'household_items',
    'personal_belongings',
    'hacked_accounts',
    'business_reputation_reports',
]


def upgrade() -> None:
    """Create all YaraCheck tables."""

    # ===========================================
    # GEOGRAPHY & PROFILES
    # ===========================================
    op.create_table(
        'countries',
        _id(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(3), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        'provinces',
        _id(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column(
            'country_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('countries.id', ondelete='CASCADE'),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index('ix_provinces_country_id', 'provinces', ['country_id'])

    op.create_table(
        'profiles',
        _id(),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('role', sa.Enum('USER', 'ADMIN', 'SUPER_ADMIN', name='userrole'), nullable=False),
        sa.Column(
            'admin_role',
            sa.Enum(
                'SUPER_ADMIN', 'DIRECTOR', 'COUNTRY_REP', 'PROVINCE_MANAGER',
                'SHAREHOLDER', 'CUSTOMER_SUPPORT_EXECUTIVE', 'INVESTOR',
                name='adminrole',
            ),
            nullable=True,
        ),
        sa.Column('permissions', sa.JSON(), nullable=True),
        sa.Column(
            'country_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('countries.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column(
            'province_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('provinces.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('geographic_access', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('must_change_password', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])
    op.create_foreign_key(
        'fk_profiles_created_by_id_profiles', 'profiles', 'profiles',
        ['created_by_id'], ['id'], ondelete='SET NULL',
    )

    # ===========================================
    # REPORTS
    # ===========================================
    op.create_table(
        'persons',
        _id(),
        *_report_columns(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.String(20), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('date_missing', sa.Date(), nullable=False),
        sa.Column('physical_attributes', sa.Text(), nullable=True),
        sa.Column('contact', sa.String(255), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'devices',
        _id(),
        *_item_columns(),
        sa.Column('imei', sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_devices_imei', 'devices', ['imei'])
    op.create_table(
        'vehicles',
        _id(),
        *_item_columns(),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('chassis', sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_vehicles_chassis', 'vehicles', ['chassis'])
    for table in ('household_items', 'personal_belongings'):
        op.create_table(
            table,
            _id(),
            *_item_columns(),
            sa.Column('year', sa.Integer(), nullable=True),
            sa.Column('imei', sa.String(64), nullable=True),
            *_timestamps(),
        )
    op.create_table(
        'hacked_accounts',
        _id(),
        *_report_columns(),
        sa.Column('account_type', sa.String(50), nullable=False),
        sa.Column('account_identifier', sa.String(255), nullable=False),
        sa.Column('date_compromised', sa.Date(), nullable=False),
        sa.Column('contact', sa.String(255), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'business_reputation_reports',
        _id(),
        *_report_columns(),
        sa.Column('reported_person_name', sa.String(255), nullable=False),
        sa.Column('reported_person_contact', sa.String(255), nullable=False),
        sa.Column('business_type', sa.String(100), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        sa.Column('transaction_amount', sa.String(50), nullable=False),
        sa.Column('reputation_status', sa.String(50), nullable=False),
        sa.Column('evidence', sa.Text(), nullable=True),
        sa.Column('verification_notes', sa.Text(), nullable=True),
        _profile_fk('verified_by_id'),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    for table in REPORT_TABLES:
        _report_indexes(table)

    # ===========================================
    # PAYMENTS
    # ===========================================
    op.create_table(
        'transactions',
        _id(),
        _profile_fk('user_id'),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column(
            'payment_provider',
            sa.Enum('STRIPE', 'PAYSTACK', 'FLUTTERWAVE', name='paymentprovider'),
            nullable=False,
        ),
        sa.Column('payment_reference', sa.String(100), nullable=False, unique=True),
        sa.Column('provider_reference', sa.String(100), nullable=True),
        sa.Column('stripe_session_id', sa.String(255), nullable=True),
        sa.Column('authorization_url', sa.String(1000), nullable=True),
        sa.Column('report_type', sa.String(32), nullable=False),
        sa.Column('report_data', sa.JSON(), nullable=False),
        sa.Column('tracking_code', sa.String(64), nullable=True),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'PAID', 'FAILED', name='transactionstatus'),
            nullable=False,
        ),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('failure_reason', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_payment_reference', 'transactions', ['payment_reference'])
    op.create_index('ix_transactions_stripe_session_id', 'transactions', ['stripe_session_id'])
    op.create_index('ix_transactions_tracking_code', 'transactions', ['tracking_code'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])

    # ===========================================
    # ROI
    # ===========================================
    op.create_table(
        'roi_distributions',
        _id(),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('percentage', sa.Numeric(6, 2), nullable=False),
        sa.Column(
            'period_type',
            sa.Enum('MONTHLY', 'QUARTERLY', 'YEARLY', name='periodtype'),
            nullable=False,
        ),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        _profile_fk('shareholder_id', ondelete='CASCADE'),
        sa.Column('withdrawal_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        _profile_fk('distributed_by_id'),
        *_timestamps(),
    )
    op.create_index('ix_roi_distributions_shareholder_id', 'roi_distributions', ['shareholder_id'])

    op.create_table(
        'roi_withdrawal_requests',
        _id(),
        sa.Column(
            'distribution_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('roi_distributions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        _profile_fk('shareholder_id', ondelete='CASCADE', nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'APPROVED', 'SENT', 'COMPLETED', name='withdrawalstatus'),
            nullable=False,
        ),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        _profile_fk('processed_by_id'),
        sa.Column('notes', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_roi_withdrawal_requests_distribution_id', 'roi_withdrawal_requests', ['distribution_id'])
    op.create_index('ix_roi_withdrawal_requests_shareholder_id', 'roi_withdrawal_requests', ['shareholder_id'])

    # ===========================================
    # ASSETS
    # ===========================================
    op.create_table(
        'company_assets',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('condition', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('current_value', sa.Numeric(14, 2), nullable=False),
        sa.Column('purchase_price', sa.Numeric(14, 2), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('depreciation_rate', sa.Numeric(5, 2), nullable=True),
        sa.Column('serial_number', sa.String(100), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('warranty_expiry', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _profile_fk('created_by_id'),
        *_timestamps(),
    )

    # ===========================================
    # SUPPORT
    # ===========================================
    op.create_table(
        'support_tickets',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('subject', sa.String(500), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column(
            'priority',
            sa.Enum('LOW', 'MEDIUM', 'HIGH', 'URGENT', name='ticketpriority'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum('OPEN', 'IN_PROGRESS', 'RESOLVED', 'CLOSED', name='ticketstatus'),
            nullable=False,
        ),
        _profile_fk('assigned_to_id'),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        _profile_fk('user_id'),
        *_timestamps(),
    )
    op.create_index('ix_support_tickets_email', 'support_tickets', ['email'])
    op.create_index('ix_support_tickets_status', 'support_tickets', ['status'])

    op.create_table(
        'live_chat_messages',
        _id(),
        sa.Column('session_id', sa.String(100), nullable=False),
        sa.Column('user_email', sa.String(255), nullable=True),
        sa.Column('user_name', sa.String(255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_admin_reply', sa.Boolean(), nullable=False, server_default=sa.false()),
        _profile_fk('admin_id'),
        sa.Column('status', sa.Enum('OPEN', 'RESOLVED', name='chatstatus'), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        _profile_fk('resolved_by_id'),
        *_timestamps(),
    )
    op.create_index('ix_live_chat_messages_session_id', 'live_chat_messages', ['session_id'])

    op.create_table(
        'anonymous_messages',
        _id(),
        sa.Column('report_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('report_type', sa.String(32), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('sender_contact', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_anonymous_messages_report_id', 'anonymous_messages', ['report_id'])

    # ===========================================
    # AUDIT
    # ===========================================
    op.create_table(
        'audit_logs',
        _id(),
        _profile_fk('admin_id'),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_audit_logs_admin_id', 'audit_logs', ['admin_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    """Drop all YaraCheck tables and enum types."""
    for table in (
        'audit_logs',
        'anonymous_messages',
        'live_chat_messages',
        'support_tickets',
        'company_assets',
        'roi_withdrawal_requests',
        'roi_distributions',
        'transactions',
        *reversed(REPORT_TABLES),
        'profiles',
        'provinces',
        'countries',
    ):
        op.drop_table(table)

    for enum_name in (
        'chatstatus', 'ticketstatus', 'ticketpriority', 'withdrawalstatus',
        'periodtype', 'transactionstatus', 'paymentprovider', 'adminrole', 'userrole',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
