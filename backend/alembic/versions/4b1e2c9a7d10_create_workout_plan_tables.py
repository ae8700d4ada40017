"""create workouts, exercises, exercise plans, sessions and plan records

Revision ID: 4b1e2c9a7d10
Revises:
Create Date: 2026-10-19 10:12:41.503217

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

exercise_type = sa.Enum('strength', 'cardio', 'mobility', 'bodyweight', name='exercise_type')


# revision identifiers, used by Alembic.
revision: str = '4b1e2c9a7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) parents
    op.create_table(
        'workouts',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('type', exercise_type, nullable=False),
    )

    # 2) workout_sessions
    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('workout_id', sa.String(length=64), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    # 3) exercise_plans
    op.create_table(
        'exercise_plans',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('workout_id', sa.String(length=64), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.String(length=64), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('synced', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('workout_id', 'order', name='uq_exercise_plans_workout_order'),
    )

    # 4) plan_records (server canonical copies)
    op.create_table(
        'plan_records',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('workout_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('exercise_id', sa.String(length=64), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('plan_records')
    op.drop_table('exercise_plans')
    op.drop_table('workout_sessions')
    op.drop_table('exercises')
    op.drop_table('workouts')

    # finally drop enum type
    exercise_type.drop(op.get_bind(), checkfirst=True)
