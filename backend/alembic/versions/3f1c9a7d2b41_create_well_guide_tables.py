"""Create well guide tables

Revision ID: 3f1c9a7d2b41
Revises:
Create Date: 2026-10-17 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'well_guides',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('speciality', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('booking_time_zone', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'], unique=False)

    op.create_table(
        'patient_well_guides',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('well_guide_id', sa.Integer(), nullable=False),
        sa.Column('last_appointment_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('utc_offset', sa.String(length=6), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('next_reminder', sa.Date(), nullable=True),
        sa.Column('due_in_one_month_reminder_sent', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('due_for_visit_reminder_sent', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('reminder_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            "status IN ('scheduled', 'uptodate', 'dueInOneMonth', 'dueForAVisit')",
            name='check_patient_well_guide_status'
        ),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.ForeignKeyConstraint(['well_guide_id'], ['well_guides.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id', 'well_guide_id', name='uq_patient_well_guides_patient_guide'),
    )
    op.create_index(op.f('ix_patient_well_guides_id'), 'patient_well_guides', ['id'], unique=False)
    op.create_index('idx_patient_well_guides_patient', 'patient_well_guides', ['patient_id'], unique=False)
    op.create_index('idx_patient_well_guides_next_reminder', 'patient_well_guides', ['next_reminder'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_patient_well_guides_next_reminder', table_name='patient_well_guides')
    op.drop_index('idx_patient_well_guides_patient', table_name='patient_well_guides')
    op.drop_index(op.f('ix_patient_well_guides_id'), table_name='patient_well_guides')
    op.drop_table('patient_well_guides')
    op.drop_index(op.f('ix_bookings_id'), table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('well_guides')
