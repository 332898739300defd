"""Create earning engine schema

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


MONEY = sa.Numeric(18, 2)


def upgrade() -> None:
    # Plan catalog
    op.create_table(
        'membership_plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('daily_task_earning', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tasks_per_day', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('max_earning_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('extended_earning_days', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('minimum_withdrawal', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('voucher_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('daily_task_earning >= 0', name='check_plan_daily_task_earning_non_negative'),
        sa.CheckConstraint('tasks_per_day > 0', name='check_plan_tasks_per_day_positive'),
        sa.CheckConstraint('extended_earning_days >= max_earning_days', name='check_plan_extended_days_not_shorter'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_membership_plans_name', 'membership_plans', ['name'], unique=True)

    op.create_table(
        'signup_commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('membership_plan_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('percentage', sa.Numeric(7, 4), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('level >= 1 AND level <= 5', name='check_signup_commission_level'),
        sa.CheckConstraint('amount >= 0', name='check_signup_commission_amount_non_negative'),
        sa.ForeignKeyConstraint(['membership_plan_id'], ['membership_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('membership_plan_id', 'level', name='uq_signup_commission_level')
    )
    op.create_index('ix_signup_commissions_membership_plan_id', 'signup_commissions', ['membership_plan_id'])

    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('referral_code', sa.String(20), nullable=True),
        sa.Column('sponsor_id', sa.Integer(), nullable=True),
        sa.Column('membership_plan', sa.String(50), nullable=True),
        sa.Column('membership_status', sa.String(20), nullable=False, server_default='INACTIVE'),
        sa.Column('membership_start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('membership_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('earnings_continue_until', sa.DateTime(timezone=True), nullable=True,
                  comment='Admin override; can only extend the earning window'),
        sa.Column('tasks_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('balance', MONEY, nullable=False, server_default='0'),
        sa.Column('total_earnings', MONEY, nullable=False, server_default='0'),
        sa.Column('available_voucher_pkr', MONEY, nullable=False, server_default='0'),
        sa.Column('referral_earnings', MONEY, nullable=False, server_default='0',
                  comment='Signup-referral commissions received'),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tasks_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint('total_earnings >= 0', name='check_user_total_earnings_non_negative'),
        sa.CheckConstraint('available_voucher_pkr >= 0', name='check_user_voucher_non_negative'),
        sa.CheckConstraint('total_points >= 0', name='check_user_points_non_negative'),
        sa.CheckConstraint('tasks_completed >= 0', name='check_user_tasks_completed_non_negative'),
        sa.ForeignKeyConstraint(['sponsor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_index('ix_users_sponsor_id', 'users', ['sponsor_id'])
    op.create_index('ix_users_membership_plan', 'users', ['membership_plan'])
    op.create_index('ix_users_membership_status', 'users', ['membership_status'])

    # Tasks
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.Column('reward', MONEY, nullable=False, server_default='0'),
        sa.Column('article_url', sa.String(500), nullable=True),
        sa.Column('min_duration', sa.Integer(), nullable=False, server_default='45'),
        sa.Column('min_scroll_percentage', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('require_scrolling', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('require_mouse_movement', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('min_ad_clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('completions >= 0', name='check_task_completions_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tasks_type', 'tasks', ['type'])
    op.create_index('ix_tasks_status', 'tasks', ['status'])

    op.create_table(
        'task_completions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('slot', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reward', MONEY, nullable=False, server_default='0'),
        sa.Column('tracking_data', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('progress >= 0 AND progress <= 100', name='check_task_completion_progress_range'),
        sa.CheckConstraint('reward >= 0', name='check_task_completion_reward_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'assignment_date', 'slot', name='uq_task_completion_user_day_slot')
    )
    op.create_index('ix_task_completions_user_id', 'task_completions', ['user_id'])
    op.create_index('ix_task_completions_task_id', 'task_completions', ['task_id'])
    op.create_index('ix_task_completions_assignment_date', 'task_completions', ['assignment_date'])
    op.create_index('ix_task_completions_status', 'task_completions', ['status'])

    # Ledger
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='COMPLETED'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(255), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_type', 'transactions', ['type'])
    op.create_index('ix_transactions_reference', 'transactions', ['reference'])
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])

    op.create_table(
        'referral_commission_earnings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('referred_user_id', sa.Integer(), nullable=False),
        sa.Column('membership_plan', sa.String(50), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('source', sa.String(20), nullable=False, server_default='TASK'),
        sa.Column('transaction_id', sa.Integer(), nullable=True),
        sa.Column('earning_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('level >= 1 AND level <= 5', name='check_commission_level_range'),
        sa.CheckConstraint('amount > 0', name='check_commission_amount_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referred_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_referral_commission_earnings_user_id', 'referral_commission_earnings', ['user_id'])
    op.create_index('ix_referral_commission_earnings_referred_user_id', 'referral_commission_earnings', ['referred_user_id'])
    op.create_index('ix_referral_commission_earnings_source', 'referral_commission_earnings', ['source'])
    op.create_index('ix_referral_commission_earnings_earning_date', 'referral_commission_earnings', ['earning_date'])

    # Notifications
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('recipient_id', sa.Integer(), nullable=True),
        sa.Column('role', sa.String(20), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='INFO'),
        sa.Column('category', sa.String(50), nullable=False, server_default='SYSTEM'),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])


def downgrade() -> None:
    op.drop_index('ix_notifications_recipient_id', 'notifications')
    op.drop_table('notifications')

    op.drop_index('ix_referral_commission_earnings_earning_date', 'referral_commission_earnings')
    op.drop_index('ix_referral_commission_earnings_source', 'referral_commission_earnings')
    op.drop_index('ix_referral_commission_earnings_referred_user_id', 'referral_commission_earnings')
    op.drop_index('ix_referral_commission_earnings_user_id', 'referral_commission_earnings')
    op.drop_table('referral_commission_earnings')

    op.drop_index('ix_transactions_created_at', 'transactions')
    op.drop_index('ix_transactions_reference', 'transactions')
    op.drop_index('ix_transactions_type', 'transactions')
    op.drop_index('ix_transactions_user_id', 'transactions')
    op.drop_table('transactions')

    op.drop_index('ix_task_completions_status', 'task_completions')
    op.drop_index('ix_task_completions_assignment_date', 'task_completions')
    op.drop_index('ix_task_completions_task_id', 'task_completions')
    op.drop_index('ix_task_completions_user_id', 'task_completions')
    op.drop_table('task_completions')

    op.drop_index('ix_tasks_status', 'tasks')
    op.drop_index('ix_tasks_type', 'tasks')
    op.drop_table('tasks')

    op.drop_index('ix_users_membership_status', 'users')
    op.drop_index('ix_users_membership_plan', 'users')
    op.drop_index('ix_users_sponsor_id', 'users')
    op.drop_index('ix_users_referral_code', 'users')
    op.drop_table('users')

    op.drop_index('ix_signup_commissions_membership_plan_id', 'signup_commissions')
    op.drop_table('signup_commissions')

    op.drop_index('ix_membership_plans_name', 'membership_plans')
    op.drop_table('membership_plans')
