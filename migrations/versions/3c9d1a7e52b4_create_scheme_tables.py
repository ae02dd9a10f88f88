"""create_scheme_tables

Revision ID: 3c9d1a7e52b4
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9d1a7e52b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('operators',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=10), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_operators_username', 'operators', ['username'], unique=True)

    op.create_table('members',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=10), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('scheme_type', sa.String(length=10), nullable=False),
        sa.Column('num_schemes', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('selected_item', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_members_scheme_type', 'members', ['scheme_type'], unique=False)
    op.create_index('ix_members_created_at', 'members', ['created_at'], unique=False)

    # No foreign key to members: entries survive member deletion
    op.create_table('payment_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('balance_amount', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('recorded_by', sa.String(length=40), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_payment_entries_member_id', 'payment_entries', ['member_id'], unique=False)
    op.create_index('ix_payment_entries_payment_date', 'payment_entries', ['payment_date'], unique=False)

    op.create_table('scheme_settings',
        sa.Column('scheme_type', sa.String(length=10), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('scheme_type')
    )

    op.create_table('scheme_counters',
        sa.Column('scheme_type', sa.String(length=10), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('scheme_type')
    )

    op.create_table('activity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('operator_id', sa.String(length=40), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=True),
        sa.Column('entity_id', sa.String(length=40), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_logs_operator_id', 'activity_logs', ['operator_id'], unique=False)
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'], unique=False)


def downgrade():
    op.drop_table('activity_logs')
    op.drop_table('scheme_counters')
    op.drop_table('scheme_settings')
    op.drop_table('payment_entries')
    op.drop_table('members')
    op.drop_table('operators')
