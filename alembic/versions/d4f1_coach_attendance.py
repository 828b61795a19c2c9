"""add coach_attendance_records

Revision ID: d4f1_coach_attendance
Revises: c3e9_attendance_package_cycle
Create Date: 2025-10-27 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'd4f1_coach_attendance'
down_revision = 'c3e9_attendance_package_cycle'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Тип attendancestatus уже создан вместе с attendance_records
    status_enum = postgresql.ENUM('PRESENT', 'ABSENT', 'PENDING', name='attendancestatus', create_type=False)

    op.create_table(
        'coach_attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            'session_id', sa.Integer(), sa.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('coach_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', status_enum, nullable=False, server_default='PENDING'),
        sa.Column('time_in', sa.DateTime(), nullable=True),
        sa.Column('time_out', sa.DateTime(), nullable=True),
        sa.Column('marked_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('session_id', 'coach_id', name='uq_coach_attendance_session_coach'),
    )
    op.create_index('ix_coach_attendance_records_id', 'coach_attendance_records', ['id'])
    op.create_index('ix_coach_attendance_records_session_id', 'coach_attendance_records', ['session_id'])
    op.create_index('ix_coach_attendance_records_coach_id', 'coach_attendance_records', ['coach_id'])
    op.create_index('ix_coach_attendance_records_status', 'coach_attendance_records', ['status'])

    # Pending-запись для тренера каждой уже существующей сессии
    op.execute(
        "INSERT INTO coach_attendance_records (session_id, coach_id, status, created_at, updated_at) "
        "SELECT id, coach_id, 'PENDING', now(), now() FROM training_sessions"
    )


def downgrade() -> None:
    op.drop_index('ix_coach_attendance_records_status', table_name='coach_attendance_records')
    op.drop_index('ix_coach_attendance_records_coach_id', table_name='coach_attendance_records')
    op.drop_index('ix_coach_attendance_records_session_id', table_name='coach_attendance_records')
    op.drop_index('ix_coach_attendance_records_id', table_name='coach_attendance_records')
    op.drop_table('coach_attendance_records')
