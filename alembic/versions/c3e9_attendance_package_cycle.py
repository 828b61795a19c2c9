"""add package_cycle to attendance_records

Revision ID: c3e9_attendance_package_cycle
Revises: b7d2_player_package_history
Create Date: 2025-10-20 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c3e9_attendance_package_cycle'
down_revision = 'b7d2_player_package_history'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Старые записи остаются без тега и относятся к циклу по дате сессии
    op.add_column('attendance_records', sa.Column('package_cycle', sa.Integer(), nullable=True))
    op.create_index('ix_attendance_records_package_cycle', 'attendance_records', ['package_cycle'])


def downgrade() -> None:
    op.drop_index('ix_attendance_records_package_cycle', table_name='attendance_records')
    op.drop_column('attendance_records', 'package_cycle')
