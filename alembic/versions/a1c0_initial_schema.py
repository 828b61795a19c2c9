"""initial schema

Revision ID: a1c0_initial_schema
Revises:
Create Date: 2025-09-01 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c0_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', sa.Enum('ADMIN', 'COACH', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('contact_info', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_branches_id', 'branches', ['id'])

    op.create_table(
        'packages',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_packages_id', 'packages', ['id'])

    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('package_type', sa.String(), nullable=True),
        sa.Column('sessions', sa.Float(), nullable=True),
        sa.Column('remaining_sessions', sa.Float(), nullable=False, server_default='0'),
        sa.Column('enrollment_date', sa.Date(), nullable=True),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('total_training_fee', sa.Float(), nullable=True),
        sa.Column('downpayment', sa.Float(), nullable=True),
        sa.Column('remaining_balance', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_players_id', 'players', ['id'])

    op.create_table(
        'training_sessions',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('coach_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('package_type', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', name='sessionstatus'),
            nullable=False,
            server_default='SCHEDULED',
        ),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_training_sessions_id', 'training_sessions', ['id'])
    op.create_index('ix_training_sessions_date', 'training_sessions', ['date'])

    op.create_table(
        'attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            'session_id', sa.Integer(), sa.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PRESENT', 'ABSENT', 'PENDING', name='attendancestatus'),
            nullable=False,
            server_default='PENDING',
        ),
        sa.Column('session_duration', sa.Float(), nullable=True, server_default='1'),
        sa.Column('marked_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('session_id', 'player_id', name='uq_attendance_session_player'),
    )
    op.create_index('ix_attendance_records_id', 'attendance_records', ['id'])
    op.create_index('ix_attendance_records_player_id', 'attendance_records', ['player_id'])

    op.create_table(
        'player_payments',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id', ondelete='CASCADE'), nullable=False),
        sa.Column('payment_amount', sa.Float(), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_player_payments_id', 'player_payments', ['id'])
    op.create_index('ix_player_payments_player_id', 'player_payments', ['player_id'])


def downgrade() -> None:
    op.drop_table('player_payments')
    op.drop_table('attendance_records')
    op.drop_table('training_sessions')
    op.drop_table('players')
    op.drop_table('packages')
    op.drop_table('branches')
    op.drop_table('users')
    op.execute("DROP TYPE IF EXISTS attendancestatus")
    op.execute("DROP TYPE IF EXISTS sessionstatus")
    op.execute("DROP TYPE IF EXISTS userrole")
