"""add player_package_history

Revision ID: b7d2_player_package_history
Revises: a1c0_initial_schema
Create Date: 2025-10-02 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7d2_player_package_history'
down_revision = 'a1c0_initial_schema'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'player_package_history',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id', ondelete='CASCADE'), nullable=False),
        sa.Column('package_type', sa.String(), nullable=True),
        sa.Column('sessions', sa.Float(), nullable=True),
        sa.Column('remaining_sessions', sa.Float(), nullable=True),
        sa.Column('enrollment_date', sa.Date(), nullable=True),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('captured_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('reason', sa.String(), nullable=True),
    )
    op.create_index('ix_player_package_history_id', 'player_package_history', ['id'])
    op.create_index('ix_player_package_history_player_id', 'player_package_history', ['player_id'])
    op.create_index('ix_player_package_history_captured_at', 'player_package_history', ['captured_at'])


def downgrade() -> None:
    op.drop_index('ix_player_package_history_captured_at', table_name='player_package_history')
    op.drop_index('ix_player_package_history_player_id', table_name='player_package_history')
    op.drop_index('ix_player_package_history_id', table_name='player_package_history')
    op.drop_table('player_package_history')
