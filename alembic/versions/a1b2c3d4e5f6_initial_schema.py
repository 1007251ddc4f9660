"""initial bible quiz schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('church', sa.String(255), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'levels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('order_number', sa.Integer(), nullable=False),
        sa.Column('questions_count', sa.Integer(), server_default='12', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
    )

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('level_id', sa.Integer(), sa.ForeignKey('levels.id'), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('option_a', sa.Text(), nullable=False),
        sa.Column('option_b', sa.Text(), nullable=False),
        sa.Column('option_c', sa.Text(), nullable=False),
        sa.Column('option_d', sa.Text(), nullable=False),
        sa.Column('correct_answer', sa.String(1), nullable=False),
        sa.Column('difficulty', sa.Integer(), server_default='1', nullable=False),
    )
    op.create_index('ix_questions_level_id', 'questions', ['level_id'])

    op.create_table(
        'user_progress',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('level_id', sa.Integer(), sa.ForeignKey('levels.id'), nullable=False),
        sa.Column('is_completed', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('stars', sa.Integer(), server_default='0', nullable=False),
        sa.Column('best_time_seconds', sa.Integer(), nullable=True),
        sa.Column('last_played', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'level_id', name='uq_user_progress_user_level'),
    )
    op.create_index('ix_user_progress_user_id', 'user_progress', ['user_id'])

    op.create_table(
        'quiz_attempts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('level_id', sa.Integer(), sa.ForeignKey('levels.id'), nullable=False),
        sa.Column('started_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('time_elapsed_seconds', sa.Integer(), nullable=True),
        sa.Column('correct_answers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('incorrect_answers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('stars_earned', sa.Integer(), server_default='0', nullable=False),
    )
    op.create_index('idx_attempts_user_level', 'quiz_attempts', ['user_id', 'level_id'])

    op.create_table(
        'user_answers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('attempt_id', sa.Integer(), sa.ForeignKey('quiz_attempts.id'), nullable=False),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id'), nullable=True),
        sa.Column('user_answer', sa.String(1), nullable=True),
        sa.Column('is_correct', sa.Boolean(), nullable=True),
        sa.Column('time_taken_seconds', sa.Integer(), nullable=True),
    )
    op.create_index('ix_user_answers_attempt_id', 'user_answers', ['attempt_id'])

    # One ranking row per user, rewritten after every attempt
    op.create_table(
        'rankings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('score', sa.Integer(), server_default='0', nullable=False),
        sa.Column('completed_levels', sa.Integer(), server_default='0', nullable=False),
        sa.Column('correct_answers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('incorrect_answers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('average_time_seconds', sa.Integer(), nullable=True),
        sa.Column('last_updated', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_rankings_user_id', 'rankings', ['user_id'], unique=True)

    op.create_table(
        'achievements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('requirement_type', sa.String(50), nullable=False),
        sa.Column('requirement_value', sa.Integer(), nullable=False),
    )

    op.create_table(
        'user_achievements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('achievement_id', sa.Integer(), sa.ForeignKey('achievements.id'), nullable=False),
        sa.Column('earned_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint('user_id', 'achievement_id', name='uq_user_achievement'),
    )
    op.create_index('ix_user_achievements_user_id', 'user_achievements', ['user_id'])

    # Primary keys carry index=True on the models
    for table in (
        'users', 'levels', 'questions', 'user_progress', 'quiz_attempts',
        'user_answers', 'rankings', 'achievements', 'user_achievements',
    ):
        op.create_index(f'ix_{table}_id', table, ['id'])


def downgrade() -> None:
    op.drop_table('user_achievements')
    op.drop_table('achievements')
    op.drop_table('rankings')
    op.drop_table('user_answers')
    op.drop_table('quiz_attempts')
    op.drop_table('user_progress')
    op.drop_table('questions')
    op.drop_table('levels')
    op.drop_table('users')
