"""Add OHW registrations table

Revision ID: 001
Revises:
Create Date: 2024-01-10 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_add_ohw_registrations'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('ohw_registrations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('serial_number', sa.String(), nullable=True),
        sa.Column('clinic_id', sa.String(), nullable=True),
        sa.Column('clinic_name', sa.String(), nullable=True),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('from_phone', sa.String(), nullable=True),
        sa.Column('last_menstrual_period', sa.String(), nullable=True),
        sa.Column('reported_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=True),
        sa.Column('lmp_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expected_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_tasks', sa.JSON(), nullable=False),
        sa.Column('tasks', sa.JSON(), nullable=False),
        sa.Column('errors', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id')
    )

    # Duplicate serial number lookups filter on all three columns
    op.create_index(
        'ix_ohw_registrations_serial_clinic_reported',
        'ohw_registrations',
        ['serial_number', 'clinic_id', 'reported_date'],
    )


def downgrade() -> None:
    op.drop_index('ix_ohw_registrations_serial_clinic_reported', table_name='ohw_registrations')
    op.drop_table('ohw_registrations')
