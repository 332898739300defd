"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from earning_engine.models.base import Base
from earning_engine.models.enums import (
    CommissionSource,
    MembershipStatus,
    TaskCompletionStatus,
    TaskStatus,
    TransactionStatus,
    TransactionType,
)
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.notification import Notification
from earning_engine.models.referral_commission_earning import (
    ReferralCommissionEarning,
)
from earning_engine.models.signup_commission import SignupCommission
from earning_engine.models.task import Task
from earning_engine.models.task_completion import TaskCompletion
from earning_engine.models.transaction import Transaction
from earning_engine.models.user import User


__all__ = [
    "Base",
    "CommissionSource",
    "MembershipPlan",
    "MembershipStatus",
    "Notification",
    "ReferralCommissionEarning",
    "SignupCommission",
    "Task",
    "TaskCompletion",
    "TaskCompletionStatus",
    "TaskStatus",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "User",
]
