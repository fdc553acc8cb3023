"""create booking, staff and admin tables

Revision ID: 4b1d7c9e2a30
Revises:
Create Date: 2025-12-02 18:20:41.512301

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1d7c9e2a30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Specialists
    op.create_table(
        'staff',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('service_category', sa.String(50), nullable=False),
        sa.Column('calendar_id', sa.String(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_staff_service_category', 'staff', ['service_category'])

    # 2. Bookings (staff_id deliberately without a foreign key)
    op.create_table(
        'bookings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('service', sa.Text(), nullable=False),
        sa.Column('staff_id', sa.String(36), nullable=True),
        sa.Column('staff_name', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.String(5), nullable=False),
        sa.Column('duration', sa.String(), nullable=False, server_default='90'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('calendar_event_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('idx_bookings_date_status', 'bookings', ['date', 'status'])
    op.create_index('idx_bookings_staff', 'bookings', ['staff_id'])

    # 3. Dashboard operators
    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_admin_users_username', 'admin_users', ['username'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_admin_users_username', table_name='admin_users')
    op.drop_table('admin_users')

    op.drop_index('idx_bookings_staff', table_name='bookings')
    op.drop_index('idx_bookings_date_status', table_name='bookings')
    op.drop_table('bookings')

    op.drop_index('ix_staff_service_category', table_name='staff')
    op.drop_table('staff')
